import enum
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .platform_link import PlatformLink
    from .round import InterviewRound


class QuestionDifficulty(str, enum.Enum):
    easy = "easy"
    medium = "medium"
    hard = "hard"


class CodingQuestion(Base):
    __tablename__ = "coding_questions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    round_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("interview_rounds.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Submission order within the round
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    difficulty: Mapped[str] = mapped_column(
        String(10), default=QuestionDifficulty.medium.value, nullable=False, index=True
    )
    topics: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    solution_approach: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    time_complexity: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    space_complexity: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    round: Mapped["InterviewRound"] = relationship(
        "InterviewRound", back_populates="coding_questions"
    )
    platform_links: Mapped[list["PlatformLink"]] = relationship(
        "PlatformLink",
        back_populates="question",
        order_by="PlatformLink.position",
    )
