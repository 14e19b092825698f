import enum
import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    SmallInteger,
    String,
    Text,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .comment import Comment
    from .company import Company
    from .round import InterviewRound
    from .user import User
    from .view import ExperienceView
    from .vote import Vote


class ExperienceResult(str, enum.Enum):
    selected = "selected"
    rejected = "rejected"
    pending = "pending"


class Experience(Base):
    __tablename__ = "interview_experiences"
    __table_args__ = (
        CheckConstraint("overall_rating BETWEEN 1 AND 5", name="ck_interview_experiences_overall_rating"),
        CheckConstraint("difficulty_level BETWEEN 1 AND 5", name="ck_interview_experiences_difficulty_level"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False, index=True
    )
    company_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("companies.id"), nullable=False, index=True
    )

    position: Mapped[str] = mapped_column(String(200), nullable=False)
    experience_level: Mapped[str] = mapped_column(String(50), default="fresher", nullable=False)
    experience_years: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    interview_date: Mapped[date] = mapped_column(Date, nullable=False)
    result: Mapped[str] = mapped_column(
        String(20), default=ExperienceResult.pending.value, nullable=False, index=True
    )
    overall_rating: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    difficulty_level: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    interview_process: Mapped[str] = mapped_column(Text, nullable=False)
    preparation_time: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    advice: Mapped[str] = mapped_column(Text, nullable=False)
    salary_offered: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    is_anonymous: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="experiences")
    company: Mapped["Company"] = relationship("Company", back_populates="experiences")
    rounds: Mapped[list["InterviewRound"]] = relationship(
        "InterviewRound",
        back_populates="experience",
        order_by="InterviewRound.round_number",
    )
    comments: Mapped[list["Comment"]] = relationship("Comment", back_populates="experience")
    votes: Mapped[list["Vote"]] = relationship("Vote", back_populates="experience")
    views: Mapped[list["ExperienceView"]] = relationship(
        "ExperienceView", back_populates="experience"
    )
