"""Validation rules of the request schemas, exercised without the HTTP layer."""

import uuid
from datetime import date

import pytest
from pydantic import ValidationError

from interviewhub.schemas.common import Pagination
from interviewhub.schemas.experience import CodingQuestionCreate, ExperienceCreate, RoundCreate


def _experience(**overrides) -> dict:
    data = {
        "company_id": str(uuid.uuid4()),
        "position": "Analyst",
        "interview_date": "2026-05-01",
        "result": "pending",
        "overall_rating": 3,
        "difficulty_level": 2,
        "interview_process": "One HR call.",
        "advice": "Be on time.",
    }
    data.update(overrides)
    return data


class TestExperienceCreate:
    def test_valid_payload(self):
        experience = ExperienceCreate(**_experience())
        assert experience.interview_date == date(2026, 5, 1)
        assert experience.result == "pending"
        assert experience.is_anonymous is False
        assert experience.rounds == []

    def test_text_fields_are_stripped(self):
        experience = ExperienceCreate(**_experience(position="  Analyst  "))
        assert experience.position == "Analyst"

    @pytest.mark.parametrize("rating", [0, 6, -1])
    def test_rating_bounds(self, rating):
        with pytest.raises(ValidationError):
            ExperienceCreate(**_experience(overall_rating=rating))

    def test_blank_advice_message(self):
        with pytest.raises(ValidationError) as exc_info:
            ExperienceCreate(**_experience(advice="\n\t "))
        assert "Advice is required" in str(exc_info.value)

    def test_round_numbers_must_be_unique(self):
        rounds = [{"round_number": 1}, {"round_number": 2}, {"round_number": 1}]
        with pytest.raises(ValidationError) as exc_info:
            ExperienceCreate(**_experience(rounds=rounds))
        assert "Round numbers must be unique" in str(exc_info.value)

    def test_distinct_round_numbers_in_any_order(self):
        experience = ExperienceCreate(**_experience(rounds=[{"round_number": 3}, {"round_number": 1}]))
        assert [r.round_number for r in experience.rounds] == [3, 1]


class TestRoundCreate:
    def test_defaults(self):
        round_in = RoundCreate(round_number=1)
        assert round_in.round_type == "technical"
        assert round_in.result == "pending"
        assert round_in.coding_questions == []

    @pytest.mark.parametrize("field, value", [("round_number", 0), ("difficulty", 6), ("duration", -5)])
    def test_bounds(self, field, value):
        with pytest.raises(ValidationError):
            RoundCreate(**{"round_number": 1, field: value})

    def test_unknown_round_type(self):
        with pytest.raises(ValidationError):
            RoundCreate(round_number=1, round_type="lunch")


class TestCodingQuestionCreate:
    def test_topics_normalized_on_input(self):
        question = CodingQuestionCreate(title="LRU Cache", topics=["Design ", "design", "Hash  Map"])
        assert question.topics == ["Design", "Hash Map"]

    def test_link_requires_http_url(self):
        with pytest.raises(ValidationError):
            CodingQuestionCreate(
                title="LRU Cache",
                platform_links=[{"platform": "leetcode", "url": "leetcode.com/problems/lru-cache"}],
            )

    def test_unknown_platform(self):
        with pytest.raises(ValidationError):
            CodingQuestionCreate(
                title="LRU Cache",
                platform_links=[{"platform": "myspace", "url": "https://example.com"}],
            )


class TestPagination:
    def test_serializes_has_more_in_camel_case(self):
        pagination = Pagination(page=2, limit=10, has_more=True, total=25)
        assert pagination.model_dump(by_alias=True) == {
            "page": 2,
            "limit": 10,
            "hasMore": True,
            "total": 25,
        }
