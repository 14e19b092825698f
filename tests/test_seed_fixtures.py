"""Tests for the company seeding script."""

import asyncio

from fixtures.seed_fixtures import load_companies, seed_companies
from interviewhub.models import Company


class TestSeedCompanies:
    def test_bundled_file_has_unique_names(self):
        names = [entry["name"].lower() for entry in load_companies()]
        assert names
        assert len(names) == len(set(names))

    def test_inserts_then_is_idempotent(self, session_factory, count_rows):
        companies = load_companies()

        first = asyncio.run(seed_companies(session_factory, companies))
        second = asyncio.run(seed_companies(session_factory, companies))

        assert first == len(companies)
        assert second == 0
        assert count_rows(Company) == len(companies)

    def test_matches_existing_names_case_insensitively(self, session_factory, add_rows, count_rows):
        add_rows(Company(name="google"))

        inserted = asyncio.run(
            seed_companies(session_factory, [{"name": "Google"}, {"name": "  Zoho  Corp "}])
        )

        assert inserted == 1
        assert count_rows(Company, name="Zoho Corp") == 1
