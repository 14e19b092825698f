"""Pydantic schemas for interview experiences and their nested rounds."""

import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from interviewhub.models.coding_question import QuestionDifficulty
from interviewhub.models.experience import ExperienceResult
from interviewhub.models.platform_link import Platform
from interviewhub.models.round import RoundResult, RoundType
from interviewhub.schemas.comment import CommentResponse
from interviewhub.schemas.common import Pagination
from interviewhub.services.topics import normalize_topics

# Human-readable labels for required free-text fields
REQUIRED_TEXT_LABELS = {
    "position": "Position",
    "interview_process": "Interview process description",
    "advice": "Advice",
    "title": "Question title",
}

ANONYMOUS_NAME = "Anonymous"


def _require_text(value: str, info: ValidationInfo) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{REQUIRED_TEXT_LABELS[info.field_name]} is required")
    return value


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class PlatformLinkCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    platform: Platform
    url: str = Field(min_length=1, max_length=2000)
    problem_id: Optional[str] = Field(None, max_length=100)

    @field_validator("url")
    @classmethod
    def url_is_http(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return value


class CodingQuestionCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    title: str = Field(max_length=300)
    description: Optional[str] = None
    difficulty: QuestionDifficulty = QuestionDifficulty.medium
    topics: list[str] = Field(default_factory=list, max_length=20)
    solution_approach: Optional[str] = None
    time_complexity: Optional[str] = Field(None, max_length=100)
    space_complexity: Optional[str] = Field(None, max_length=100)
    platform_links: list[PlatformLinkCreate] = Field(default_factory=list, max_length=10)

    @field_validator("title")
    @classmethod
    def title_required(cls, value: str, info: ValidationInfo) -> str:
        return _require_text(value, info)

    @field_validator("topics")
    @classmethod
    def clean_topics(cls, value: list[str]) -> list[str]:
        return normalize_topics(value)


class RoundCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    round_number: int = Field(ge=1, le=50)
    round_type: RoundType = RoundType.technical
    round_name: Optional[str] = Field(None, max_length=200)
    duration: Optional[int] = Field(None, ge=0, le=1440, description="Minutes")
    description: Optional[str] = None
    difficulty: Optional[int] = Field(None, ge=1, le=5)
    result: RoundResult = RoundResult.pending
    coding_questions: list[CodingQuestionCreate] = Field(default_factory=list, max_length=20)


class ExperienceCreate(BaseModel):
    """Request schema for sharing a new interview experience.

    The nested ``rounds[].coding_questions[].platform_links[]`` tree is
    persisted in a single transaction.
    """

    model_config = ConfigDict(use_enum_values=True)

    company_id: uuid.UUID
    position: str = Field(max_length=200)
    experience_level: str = Field("fresher", max_length=50)
    experience_years: int = Field(0, ge=0, le=60)
    interview_date: date
    result: ExperienceResult
    overall_rating: int = Field(ge=1, le=5)
    difficulty_level: int = Field(ge=1, le=5)
    interview_process: str
    preparation_time: Optional[str] = Field(None, max_length=100)
    advice: str
    salary_offered: Optional[str] = Field(None, max_length=100)
    is_anonymous: bool = False
    rounds: list[RoundCreate] = Field(default_factory=list, max_length=20)

    @field_validator("position", "interview_process", "advice")
    @classmethod
    def text_required(cls, value: str, info: ValidationInfo) -> str:
        return _require_text(value, info)

    @field_validator("rounds")
    @classmethod
    def round_numbers_unique(cls, value: list[RoundCreate]) -> list[RoundCreate]:
        numbers = [round_in.round_number for round_in in value]
        if len(numbers) != len(set(numbers)):
            raise ValueError("Round numbers must be unique")
        return value


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class AuthorSummary(BaseModel):
    """Public view of an experience's author; identity fields are None when anonymous."""

    id: Optional[uuid.UUID] = None
    full_name: str
    year_of_passing: Optional[int] = None
    branch: Optional[str] = None


class CompanySummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    logo_url: Optional[str] = None
    website: Optional[str] = None
    industry: Optional[str] = None


class ExperienceCounts(BaseModel):
    votes: int = 0
    comments: int = 0
    views: int = 0


class PlatformLinkResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    platform: str
    url: str
    problem_id: Optional[str] = None


class CodingQuestionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    description: Optional[str] = None
    difficulty: str
    topics: list[str] = Field(default_factory=list)
    solution_approach: Optional[str] = None
    time_complexity: Optional[str] = None
    space_complexity: Optional[str] = None
    platform_links: list[PlatformLinkResponse] = Field(default_factory=list)


class RoundResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    experience_id: uuid.UUID
    round_number: int
    round_type: str
    round_name: Optional[str] = None
    duration: Optional[int] = None
    description: Optional[str] = None
    difficulty: Optional[int] = None
    result: str
    created_at: datetime
    coding_questions: list[CodingQuestionResponse] = Field(default_factory=list)


class ExperienceResponse(BaseModel):
    """Columns of one experience row, suitable for ORM serialization."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: Optional[uuid.UUID] = None
    company_id: uuid.UUID
    position: str
    experience_level: str
    experience_years: int
    interview_date: date
    result: str
    overall_rating: int
    difficulty_level: int
    interview_process: str
    preparation_time: Optional[str] = None
    advice: str
    salary_offered: Optional[str] = None
    is_anonymous: bool
    created_at: datetime
    updated_at: datetime


class ExperienceListItem(ExperienceResponse):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    user_name: str
    user: AuthorSummary
    company: CompanySummary
    counts: ExperienceCounts = Field(alias="_count")
    # Listing never materializes rounds; the detail endpoint does
    rounds: list[RoundResponse] = Field(default_factory=list)


class VoteTally(BaseModel):
    upvote: int = 0
    downvote: int = 0


class ExperienceDetail(ExperienceResponse):
    user_name: str
    user: AuthorSummary
    company: CompanySummary
    rounds: list[RoundResponse] = Field(default_factory=list)
    comments: list[CommentResponse] = Field(default_factory=list)
    votes: VoteTally = Field(default_factory=VoteTally)


class ExperienceListResponse(BaseModel):
    experiences: list[ExperienceListItem]
    pagination: Pagination


class ExperienceCreated(BaseModel):
    message: str = "Experience created successfully"
    experience: ExperienceResponse
