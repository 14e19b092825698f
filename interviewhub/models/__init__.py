from .base import Base
from .user import User
from .company import Company
from .experience import Experience, ExperienceResult
from .round import InterviewRound, RoundResult, RoundType
from .coding_question import CodingQuestion, QuestionDifficulty
from .platform_link import Platform, PlatformLink
from .vote import Vote, VoteType
from .comment import Comment
from .view import ExperienceView, PageVisit

__all__ = [
    "Base",
    "User",
    "Company",
    "Experience",
    "ExperienceResult",
    "InterviewRound",
    "RoundResult",
    "RoundType",
    "CodingQuestion",
    "QuestionDifficulty",
    "Platform",
    "PlatformLink",
    "Vote",
    "VoteType",
    "Comment",
    "ExperienceView",
    "PageVisit",
]
