from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from interviewhub.config import Settings


def create_engine(app_settings: Settings) -> AsyncEngine:
    """Build the async engine (and its connection pool) for the configured database."""
    return create_async_engine(app_settings.database_url, echo=app_settings.debug)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        expire_on_commit=False,
        class_=AsyncSession,
    )


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    """FastAPI dependency: the session factory created during lifespan startup.

    The engine lives on app.state rather than at module level so tests and
    scripts can point the app at a different database without re-importing.
    """
    return request.app.state.session_factory


async def get_db(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    """FastAPI dependency: yields AsyncSession per request."""
    async with session_factory() as session:
        yield session
