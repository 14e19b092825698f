"""Pydantic schemas for voting on experiences."""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from interviewhub.models.vote import VoteType


class VoteCreate(BaseModel):
    """Request schema for toggling a vote on an experience."""

    model_config = ConfigDict(use_enum_values=True)

    vote_type: VoteType


class VoteResult(BaseModel):
    """Outcome of a vote toggle.

    ``action`` is one of added / removed / updated; ``vote_type`` is the
    caller's vote after the toggle (None once removed).
    """

    message: str
    action: str
    vote_type: Optional[str] = None
