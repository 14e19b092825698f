"""Tests for GET /api/v1/experiences and GET /api/v1/experiences/{id}."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from interviewhub.config import settings
from interviewhub.models import Comment, Experience, ExperienceView, PageVisit


class TestListExperiences:
    def test_empty_listing(self, client):
        response = client.get("/api/v1/experiences")

        assert response.status_code == 200
        assert response.json() == {
            "experiences": [],
            "pagination": {"page": 1, "limit": 10, "hasMore": False, "total": 0},
        }

    def test_item_shape(self, client, author, company, create_experience):
        experience = create_experience(rounds=[{"round_number": 1}])

        item = client.get("/api/v1/experiences").json()["experiences"][0]

        assert item["id"] == experience["id"]
        assert item["user_name"] == "Asha Rao"
        assert item["user"] == {
            "id": author["id"],
            "full_name": "Asha Rao",
            "year_of_passing": 2025,
            "branch": "CSE",
        }
        assert item["company"]["name"] == "Google"
        assert item["company"]["industry"] == "Technology"
        assert item["_count"] == {"votes": 0, "comments": 0, "views": 0}
        # Rounds are only materialized by the detail endpoint
        assert item["rounds"] == []

    def test_newest_first(self, client, create_experience, set_created_at):
        older = create_experience(position="Data Analyst")
        newer = create_experience(position="Backend Engineer")
        set_created_at(Experience, older["id"], datetime(2026, 1, 1, 9, 0))
        set_created_at(Experience, newer["id"], datetime(2026, 1, 2, 9, 0))

        items = client.get("/api/v1/experiences").json()["experiences"]
        assert [item["id"] for item in items] == [newer["id"], older["id"]]

    def test_counts_upvotes_comments_and_views(self, client, register_user, create_experience):
        experience = create_experience()
        path = f"/api/v1/experiences/{experience['id']}"
        voters = [register_user(f"Voter {n}") for n in range(3)]

        client.post(f"{path}/vote", json={"vote_type": "upvote"}, headers=voters[0]["headers"])
        client.post(f"{path}/vote", json={"vote_type": "upvote"}, headers=voters[1]["headers"])
        client.post(f"{path}/vote", json={"vote_type": "downvote"}, headers=voters[2]["headers"])
        client.post(f"{path}/comment", json={"content": "Helpful!"}, headers=voters[0]["headers"])
        client.get(path)

        item = client.get("/api/v1/experiences").json()["experiences"][0]
        assert item["_count"] == {"votes": 2, "comments": 1, "views": 1}

    def test_anonymous_author_is_masked(self, client, create_experience):
        create_experience(is_anonymous=True)

        item = client.get("/api/v1/experiences").json()["experiences"][0]

        assert item["user_name"] == "Anonymous"
        assert item["user"] == {
            "id": None,
            "full_name": "Anonymous",
            "year_of_passing": None,
            "branch": None,
        }
        assert item["user_id"] is None

    def test_records_page_visit(self, client, count_rows, fetch_rows):
        client.get("/api/v1/experiences?page=1", headers={"Referer": "https://example.com/"})

        assert count_rows(PageVisit) == 1
        visit = fetch_rows(PageVisit)[0]
        assert visit.page_url == "/api/v1/experiences?page=1"
        assert visit.referrer == "https://example.com/"
        assert visit.ip_address == "testclient"


class TestListExperiencesFilters:
    @pytest.fixture
    def seeded(self, register_user, make_company, create_experience, company):
        """Three experiences across two companies, results and authors."""
        microsoft = make_company("Microsoft")
        bhavesh = register_user("Bhavesh Kumar")
        chitra = register_user("Chitra Iyer")
        return {
            "google_backend": create_experience(position="Backend Engineer", result="selected"),
            "microsoft_sde": create_experience(
                headers=bhavesh["headers"],
                company_id=microsoft["id"],
                position="SDE 1",
                result="rejected",
            ),
            "google_anon": create_experience(
                headers=chitra["headers"],
                position="Site Reliability Engineer",
                result="pending",
                is_anonymous=True,
            ),
        }

    def _ids(self, client, query: str) -> set:
        response = client.get(f"/api/v1/experiences?{query}")
        assert response.status_code == 200, response.text
        return {item["id"] for item in response.json()["experiences"]}

    def test_search_matches_company_name_case_insensitively(self, client, seeded):
        assert self._ids(client, "search=microSOFT") == {seeded["microsoft_sde"]["id"]}

    def test_search_matches_position(self, client, seeded):
        assert self._ids(client, "search=backend") == {seeded["google_backend"]["id"]}

    def test_search_matches_author_name(self, client, seeded):
        assert self._ids(client, "search=bhavesh") == {seeded["microsoft_sde"]["id"]}

    def test_search_does_not_match_anonymous_author(self, client, seeded):
        assert self._ids(client, "search=Chitra") == set()

    def test_search_treats_wildcards_literally(self, client, seeded):
        assert self._ids(client, "search=%25") == set()

    def test_result_filter(self, client, seeded):
        assert self._ids(client, "result=rejected") == {seeded["microsoft_sde"]["id"]}
        assert self._ids(client, "result=pending") == {seeded["google_anon"]["id"]}

    def test_result_all_is_unfiltered(self, client, seeded):
        assert len(self._ids(client, "result=all")) == 3

    def test_company_filter(self, client, seeded):
        assert self._ids(client, "company=goog") == {
            seeded["google_backend"]["id"],
            seeded["google_anon"]["id"],
        }

    def test_filters_combine(self, client, seeded):
        assert self._ids(client, "company=google&result=selected&search=engineer") == {
            seeded["google_backend"]["id"]
        }

    def test_total_reflects_filters(self, client, seeded):
        pagination = client.get("/api/v1/experiences?company=google").json()["pagination"]
        assert pagination["total"] == 2

    @pytest.mark.parametrize(
        "query",
        ["result=ghosted", "page=0", "limit=0", f"limit={settings.max_page_size + 1}", "page=abc"],
    )
    def test_invalid_query_is_bad_request(self, client, query):
        response = client.get(f"/api/v1/experiences?{query}")
        assert response.status_code == 400
        assert "error" in response.json()


class TestListExperiencesPagination:
    def test_has_more_across_pages(self, client, create_experience):
        """11 rows at limit 10: page 1 is full with more to come, page 2 holds the last row."""
        for n in range(11):
            create_experience(position=f"Engineer {n}")

        first = client.get("/api/v1/experiences?page=1&limit=10").json()
        second = client.get("/api/v1/experiences?page=2&limit=10").json()

        assert len(first["experiences"]) == 10
        assert first["pagination"] == {"page": 1, "limit": 10, "hasMore": True, "total": 11}
        assert len(second["experiences"]) == 1
        assert second["pagination"]["hasMore"] is False

        seen = {item["id"] for item in first["experiences"] + second["experiences"]}
        assert len(seen) == 11

    def test_exactly_full_page_has_no_more(self, client, create_experience):
        for n in range(3):
            create_experience(position=f"Engineer {n}")

        pagination = client.get("/api/v1/experiences?limit=3").json()["pagination"]
        assert pagination["hasMore"] is False

    def test_page_past_the_end_is_empty(self, client, create_experience):
        create_experience()

        body = client.get("/api/v1/experiences?page=5").json()
        assert body["experiences"] == []
        assert body["pagination"]["total"] == 1


class TestGetExperience:
    def test_returns_full_detail(self, client, author, create_experience):
        experience = create_experience()

        response = client.get(f"/api/v1/experiences/{experience['id']}")

        assert response.status_code == 200
        detail = response.json()
        assert detail["id"] == experience["id"]
        assert detail["user_name"] == "Asha Rao"
        assert detail["user"]["id"] == author["id"]
        assert detail["company"]["name"] == "Google"
        assert detail["rounds"] == []
        assert detail["comments"] == []
        assert detail["votes"] == {"upvote": 0, "downvote": 0}

    def test_vote_tally_by_type(self, client, register_user, create_experience):
        experience = create_experience()
        path = f"/api/v1/experiences/{experience['id']}"
        for name, vote_type in [("A", "upvote"), ("B", "downvote"), ("C", "downvote")]:
            voter = register_user(name)
            client.post(f"{path}/vote", json={"vote_type": vote_type}, headers=voter["headers"])

        assert client.get(path).json()["votes"] == {"upvote": 1, "downvote": 2}

    def test_comments_newest_first_with_author_names(
        self, client, register_user, create_experience, set_created_at
    ):
        experience = create_experience()
        path = f"/api/v1/experiences/{experience['id']}"
        first_user = register_user("Deepa")
        second_user = register_user("Farhan")
        first = client.post(f"{path}/comment", json={"content": "First"}, headers=first_user["headers"]).json()
        second = client.post(f"{path}/comment", json={"content": "Second"}, headers=second_user["headers"]).json()
        set_created_at(Comment, first["comment"]["id"], datetime(2026, 3, 1, 10, 0))
        set_created_at(Comment, second["comment"]["id"], datetime(2026, 3, 1, 11, 0))

        comments = client.get(path).json()["comments"]

        assert [c["content"] for c in comments] == ["Second", "First"]
        assert [c["user_name"] for c in comments] == ["Farhan", "Deepa"]

    def test_anonymous_detail_hides_author(self, client, create_experience):
        experience = create_experience(is_anonymous=True)

        detail = client.get(f"/api/v1/experiences/{experience['id']}").json()

        assert detail["user_name"] == "Anonymous"
        assert detail["user"]["id"] is None
        assert detail["user_id"] is None

    def test_unknown_id_is_not_found(self, client):
        response = client.get(f"/api/v1/experiences/{uuid.uuid4()}")
        assert response.status_code == 404
        assert response.json() == {"error": "Experience not found"}

    def test_malformed_id_is_not_found(self, client):
        response = client.get("/api/v1/experiences/not-a-uuid")
        assert response.status_code == 404
        assert response.json() == {"error": "Experience not found"}

    def test_unknown_id_records_no_view(self, client, count_rows):
        client.get(f"/api/v1/experiences/{uuid.uuid4()}")
        assert count_rows(ExperienceView) == 0


class TestViewTracking:
    def test_repeat_views_from_same_ip_count_once(self, client, create_experience, count_rows):
        experience = create_experience()
        path = f"/api/v1/experiences/{experience['id']}"

        client.get(path)
        client.get(path)
        client.get(path)

        assert count_rows(ExperienceView) == 1
        assert client.get("/api/v1/experiences").json()["experiences"][0]["_count"]["views"] == 1

    def test_view_outside_window_is_recorded_again(self, client, create_experience, add_rows, count_rows):
        experience = create_experience()
        add_rows(
            ExperienceView(
                experience_id=uuid.UUID(experience["id"]),
                ip_address="testclient",
                created_at=datetime.now(timezone.utc) - timedelta(hours=48),
            )
        )

        client.get(f"/api/v1/experiences/{experience['id']}")

        assert count_rows(ExperienceView) == 2

    def test_distinct_forwarded_ips_each_count(self, client, create_experience, count_rows, monkeypatch):
        monkeypatch.setattr(settings, "trust_forwarded_for", True)
        experience = create_experience()
        path = f"/api/v1/experiences/{experience['id']}"

        client.get(path, headers={"X-Forwarded-For": "203.0.113.9"})
        client.get(path, headers={"X-Forwarded-For": "198.51.100.7, 10.0.0.1"})
        client.get(path, headers={"X-Forwarded-For": "203.0.113.9"})

        assert count_rows(ExperienceView) == 2

    def test_forwarded_header_ignored_unless_trusted(self, client, create_experience, fetch_rows):
        experience = create_experience()

        client.get(f"/api/v1/experiences/{experience['id']}", headers={"X-Forwarded-For": "203.0.113.9"})

        assert [view.ip_address for view in fetch_rows(ExperienceView)] == ["testclient"]

    def test_authenticated_view_keeps_user(self, client, author, create_experience, fetch_rows):
        experience = create_experience()

        client.get(f"/api/v1/experiences/{experience['id']}", headers=author["headers"])

        assert str(fetch_rows(ExperienceView)[0].user_id) == author["id"]
