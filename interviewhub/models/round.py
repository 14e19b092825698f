import enum
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Integer,
    SmallInteger,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .coding_question import CodingQuestion
    from .experience import Experience


class RoundType(str, enum.Enum):
    technical = "technical"
    hr = "hr"
    managerial = "managerial"
    group_discussion = "group_discussion"
    aptitude = "aptitude"
    coding = "coding"


class RoundResult(str, enum.Enum):
    passed = "passed"
    failed = "failed"
    pending = "pending"


class InterviewRound(Base):
    __tablename__ = "interview_rounds"
    __table_args__ = (
        UniqueConstraint(
            "experience_id", "round_number", name="uq_interview_rounds_experience_id_round_number"
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    experience_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("interview_experiences.id", ondelete="CASCADE"), nullable=False
    )
    round_number: Mapped[int] = mapped_column(Integer, nullable=False)
    round_type: Mapped[str] = mapped_column(String(30), nullable=False)
    round_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    # Minutes
    duration: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    difficulty: Mapped[Optional[int]] = mapped_column(SmallInteger, nullable=True)
    result: Mapped[str] = mapped_column(
        String(20), default=RoundResult.pending.value, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    experience: Mapped["Experience"] = relationship("Experience", back_populates="rounds")
    coding_questions: Mapped[list["CodingQuestion"]] = relationship(
        "CodingQuestion",
        back_populates="round",
        order_by="CodingQuestion.position",
    )
