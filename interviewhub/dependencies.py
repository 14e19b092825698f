import hashlib
from typing import Annotated, Optional

import redis.asyncio as aioredis
from fastapi import Depends, HTTPException, Request, Security
from fastapi.security import APIKeyHeader
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from interviewhub.config import settings
from interviewhub.database import get_db, get_session_factory
from interviewhub.models.user import User

DbSession = Annotated[AsyncSession, Depends(get_db)]
SessionFactory = Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)]

# API key security scheme, registered in the OpenAPI security definition.
# auto_error is off so a missing key is reported as 401 like an invalid one.
api_key_header = APIKeyHeader(name=settings.api_key_header_name, auto_error=False)


def hash_api_key(raw_key: str) -> str:
    return hashlib.sha256(raw_key.encode()).hexdigest()


async def get_redis(request: Request) -> aioredis.Redis:
    """Inject the Redis client from app.state (set during lifespan startup)."""
    return request.app.state.redis


async def _lookup_user(db: AsyncSession, raw_key: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.api_key_hash == hash_api_key(raw_key)))
    return result.scalar_one_or_none()


async def get_current_user(
    raw_key: Optional[str] = Security(api_key_header),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Authenticate a request via X-API-Key header.

    Computes SHA-256 hash of the raw key and looks it up in users.api_key_hash.
    Raises 401 for both missing and invalid keys (no distinction, so keys cannot be enumerated).
    """
    user = await _lookup_user(db, raw_key) if raw_key else None
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid API key")
    return user


async def get_optional_user(
    raw_key: Optional[str] = Security(api_key_header),
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """Like get_current_user, but anonymous (or unknown-key) callers get None."""
    if not raw_key:
        return None
    return await _lookup_user(db, raw_key)


def get_client_ip(request: Request) -> str:
    """Best-effort client address used for view dedup and read rate limiting."""
    if settings.trust_forwarded_for:
        forwarded = request.headers.get("X-Forwarded-For", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    if request.client is not None and request.client.host:
        return request.client.host
    return "unknown"


# Annotated type aliases for clean endpoint signatures
CurrentUser = Annotated[User, Depends(get_current_user)]
OptionalUser = Annotated[Optional[User], Depends(get_optional_user)]
RedisClient = Annotated[aioredis.Redis, Depends(get_redis)]
ClientIP = Annotated[str, Depends(get_client_ip)]
