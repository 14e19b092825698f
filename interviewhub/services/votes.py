"""Per-user vote toggle on an experience.

State machine for one (experience, user) pair:

    no vote          + request X -> insert X      ("added")
    existing X       + request X -> delete        ("removed")
    existing X       + request Y -> update to Y   ("updated")

The caller owns the transaction: toggle_vote flushes so constraint
violations surface here, and the router commits or rolls back. The
(experience_id, user_id) unique constraint keeps the one-row invariant
even when two toggles race; the loser's flush raises IntegrityError.
"""

import enum
import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from interviewhub.metrics import vote_actions
from interviewhub.models.vote import Vote

log = structlog.get_logger(__name__)


class VoteAction(str, enum.Enum):
    added = "added"
    removed = "removed"
    updated = "updated"


VOTE_MESSAGES = {
    VoteAction.added: "Vote added",
    VoteAction.removed: "Vote removed",
    VoteAction.updated: "Vote updated",
}


async def toggle_vote(
    db: AsyncSession,
    experience_id: uuid.UUID,
    user_id: uuid.UUID,
    vote_type: str,
) -> VoteAction:
    """Apply one toggle step and flush it. Does not commit."""
    result = await db.execute(
        select(Vote).where(Vote.experience_id == experience_id, Vote.user_id == user_id)
    )
    existing = result.scalar_one_or_none()

    if existing is None:
        db.add(Vote(experience_id=experience_id, user_id=user_id, vote_type=vote_type))
        action = VoteAction.added
    elif existing.vote_type == vote_type:
        await db.delete(existing)
        action = VoteAction.removed
    else:
        existing.vote_type = vote_type
        action = VoteAction.updated

    await db.flush()

    vote_actions.labels(action=action.value).inc()
    log.info(
        "vote_toggled",
        experience_id=str(experience_id),
        user_id=str(user_id),
        vote_type=vote_type,
        action=action.value,
    )
    return action
