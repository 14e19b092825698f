"""InterviewHub Pydantic schemas package.

Re-exports all request and response schemas for convenient importing:

    from interviewhub.schemas import ExperienceCreate, VoteCreate, ...
"""

from interviewhub.schemas.auth import APIKeyCreate, APIKeyResponse
from interviewhub.schemas.comment import CommentCreate, CommentCreated, CommentResponse
from interviewhub.schemas.common import ErrorResponse, Pagination
from interviewhub.schemas.company import (
    CompanyCreate,
    CompanyCreated,
    CompanyListResponse,
    CompanyResponse,
)
from interviewhub.schemas.experience import (
    CodingQuestionCreate,
    ExperienceCreate,
    ExperienceCreated,
    ExperienceDetail,
    ExperienceListItem,
    ExperienceListResponse,
    ExperienceResponse,
    PlatformLinkCreate,
    RoundCreate,
)
from interviewhub.schemas.question import QuestionListItem, QuestionListResponse
from interviewhub.schemas.vote import VoteCreate, VoteResult

__all__ = [
    # Experience
    "ExperienceCreate",
    "RoundCreate",
    "CodingQuestionCreate",
    "PlatformLinkCreate",
    "ExperienceResponse",
    "ExperienceListItem",
    "ExperienceListResponse",
    "ExperienceDetail",
    "ExperienceCreated",
    # Vote
    "VoteCreate",
    "VoteResult",
    # Comment
    "CommentCreate",
    "CommentResponse",
    "CommentCreated",
    # Company
    "CompanyCreate",
    "CompanyResponse",
    "CompanyListResponse",
    "CompanyCreated",
    # Questions
    "QuestionListItem",
    "QuestionListResponse",
    # Auth
    "APIKeyCreate",
    "APIKeyResponse",
    # Common
    "ErrorResponse",
    "Pagination",
]
