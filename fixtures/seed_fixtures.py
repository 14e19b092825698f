"""Seed fixture data into the database.

Loads companies from companies.json so experiences can be shared against a
fresh database.

Usage:
    DATABASE_URL="postgresql+asyncpg://..." python -m fixtures.seed_fixtures

The script is idempotent: running it multiple times is safe. Companies are
matched by case-insensitive name and only missing ones are inserted.
"""
import asyncio
import json
from pathlib import Path

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from interviewhub.config import settings
from interviewhub.database import create_engine, create_session_factory
from interviewhub.logging_config import configure_logging
from interviewhub.models.company import Company

log = structlog.get_logger(__name__)

# Path to the company list (relative to this file)
FIXTURES_DIR = Path(__file__).parent
COMPANIES_FILE = FIXTURES_DIR / "companies.json"


def load_companies(path: Path = COMPANIES_FILE) -> list[dict]:
    with path.open(encoding="utf-8") as fh:
        return json.load(fh)


async def seed_companies(
    session_factory: async_sessionmaker[AsyncSession],
    companies: list[dict],
) -> int:
    """Insert companies that are not present yet. Returns the number inserted."""
    inserted = 0
    async with session_factory() as session:
        result = await session.execute(select(func.lower(Company.name)))
        existing = set(result.scalars().all())

        for entry in companies:
            name = " ".join(entry["name"].split())
            if not name or name.lower() in existing:
                continue
            session.add(
                Company(
                    name=name,
                    logo_url=entry.get("logo_url"),
                    website=entry.get("website"),
                    industry=entry.get("industry"),
                )
            )
            existing.add(name.lower())
            inserted += 1

        await session.commit()
    return inserted


async def seed() -> None:
    configure_logging()
    engine = create_engine(settings)
    try:
        inserted = await seed_companies(create_session_factory(engine), load_companies())
    finally:
        await engine.dispose()
    if inserted:
        log.info("companies_seeded", inserted=inserted)
    else:
        log.info("already_seeded")


if __name__ == "__main__":
    asyncio.run(seed())
