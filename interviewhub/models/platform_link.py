import enum
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .coding_question import CodingQuestion


class Platform(str, enum.Enum):
    leetcode = "leetcode"
    gfg = "gfg"
    codechef = "codechef"
    codeforces = "codeforces"
    hackerrank = "hackerrank"
    interviewbit = "interviewbit"
    other = "other"


class PlatformLink(Base):
    __tablename__ = "platform_links"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    question_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("coding_questions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    platform: Mapped[str] = mapped_column(String(20), nullable=False)
    url: Mapped[str] = mapped_column(String(2000), nullable=False)
    problem_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    question: Mapped["CodingQuestion"] = relationship(
        "CodingQuestion", back_populates="platform_links"
    )
