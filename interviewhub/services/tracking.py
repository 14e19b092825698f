"""Best-effort view and visit tracking.

Both trackers open their own session from the factory so a tracking failure
can never poison the caller's transaction, and both swallow every error
after logging it: analytics must not change whether a request succeeds.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from interviewhub.config import settings
from interviewhub.metrics import views_recorded
from interviewhub.models.view import ExperienceView, PageVisit

log = structlog.get_logger(__name__)


async def record_view(
    session_factory: async_sessionmaker[AsyncSession],
    experience_id: uuid.UUID,
    ip_address: str,
    user_id: Optional[uuid.UUID] = None,
    window_hours: Optional[int] = None,
) -> bool:
    """Record a view unless this IP already viewed the experience inside the window.

    Returns True when a new view row was written, False for duplicates and
    failures. Never raises.
    """
    if window_hours is None:
        window_hours = settings.view_dedup_window_hours
    cutoff = datetime.now(timezone.utc) - timedelta(hours=window_hours)

    try:
        async with session_factory() as session:
            existing = await session.execute(
                select(ExperienceView.id)
                .where(
                    ExperienceView.experience_id == experience_id,
                    ExperienceView.ip_address == ip_address,
                    ExperienceView.created_at > cutoff,
                )
                .limit(1)
            )
            if existing.first() is not None:
                views_recorded.labels(status="duplicate").inc()
                return False

            session.add(
                ExperienceView(
                    experience_id=experience_id,
                    user_id=user_id,
                    ip_address=ip_address,
                )
            )
            await session.commit()
    except Exception as exc:
        views_recorded.labels(status="error").inc()
        log.warning(
            "view_tracking_failed",
            experience_id=str(experience_id),
            error=str(exc),
        )
        return False

    views_recorded.labels(status="recorded").inc()
    return True


async def record_page_visit(
    session_factory: async_sessionmaker[AsyncSession],
    *,
    ip_address: str,
    page_url: str,
    user_agent: str = "",
    referrer: str = "",
    session_id: str = "",
    user_id: Optional[uuid.UUID] = None,
) -> bool:
    """Append one website-analytics row. Returns False (and logs) on failure."""
    try:
        async with session_factory() as session:
            session.add(
                PageVisit(
                    user_id=user_id,
                    ip_address=ip_address,
                    user_agent=user_agent[:1000],
                    page_url=page_url[:2000],
                    referrer=referrer[:2000],
                    session_id=session_id[:200],
                )
            )
            await session.commit()
    except Exception as exc:
        log.warning("page_visit_tracking_failed", page_url=page_url, error=str(exc))
        return False
    return True
