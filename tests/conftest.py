"""Shared fixtures for API tests.

The app runs unmodified except for two dependency overrides:
- get_session_factory -> a file-backed SQLite database (aiosqlite) per test
- get_redis           -> an AsyncMock whose eval() always allows the request

NullPool keeps every connection local to the event loop that opened it, so
fixtures can use asyncio.run() while TestClient runs the app on its own loop.
"""

import asyncio
import uuid
from datetime import datetime
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from interviewhub.database import get_session_factory
from interviewhub.dependencies import get_redis
from interviewhub.main import app
from interviewhub.models import Base


@pytest.fixture
def session_factory(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'interviewhub.db'}",
        poolclass=NullPool,
    )

    async def _create_schema():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(_create_schema())
    yield async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    asyncio.run(engine.dispose())


@pytest.fixture
def redis_mock():
    client = AsyncMock()
    client.eval = AsyncMock(return_value=1)
    return client


@pytest.fixture
def client(session_factory, redis_mock):
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_redis] = lambda: redis_mock
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Direct database helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def count_rows(session_factory):
    """Count rows of a model, optionally filtered by column equality."""

    def _count(model, **filters) -> int:
        async def _run():
            stmt = select(func.count()).select_from(model)
            for column, value in filters.items():
                stmt = stmt.where(getattr(model, column) == value)
            async with session_factory() as session:
                return (await session.execute(stmt)).scalar_one()

        return asyncio.run(_run())

    return _count


@pytest.fixture
def fetch_rows(session_factory):
    def _fetch(model, **filters) -> list:
        async def _run():
            stmt = select(model)
            for column, value in filters.items():
                stmt = stmt.where(getattr(model, column) == value)
            async with session_factory() as session:
                return list((await session.execute(stmt)).scalars().all())

        return asyncio.run(_run())

    return _fetch


@pytest.fixture
def add_rows(session_factory):
    def _add(*rows) -> None:
        async def _run():
            async with session_factory() as session:
                session.add_all(rows)
                await session.commit()

        asyncio.run(_run())

    return _add


@pytest.fixture
def set_created_at(session_factory):
    """Pin created_at on a row; server-side timestamps tie within one second."""

    def _set(model, row_id, created_at: datetime) -> None:
        async def _run():
            async with session_factory() as session:
                await session.execute(
                    update(model)
                    .where(model.id == uuid.UUID(str(row_id)))
                    .values(created_at=created_at)
                )
                await session.commit()

        asyncio.run(_run())

    return _set


# ---------------------------------------------------------------------------
# API-level builders
# ---------------------------------------------------------------------------


@pytest.fixture
def register_user(client):
    """Register a user through POST /api/v1/keys and return its id and auth headers."""

    def _register(full_name: str = "Asha Rao", **extra) -> dict:
        response = client.post("/api/v1/keys", json={"full_name": full_name, **extra})
        assert response.status_code == 201, response.text
        body = response.json()
        return {
            "id": body["user_id"],
            "full_name": full_name,
            "headers": {"X-API-Key": body["api_key"]},
        }

    return _register


@pytest.fixture
def author(register_user):
    return register_user("Asha Rao", email="asha@example.com", year_of_passing=2025, branch="CSE")


@pytest.fixture
def make_company(client, author):
    def _make(name: str = "Google", **extra) -> dict:
        response = client.post(
            "/api/v1/companies",
            json={"name": name, **extra},
            headers=author["headers"],
        )
        assert response.status_code == 201, response.text
        return response.json()["company"]

    return _make


@pytest.fixture
def company(make_company):
    return make_company("Google", industry="Technology")


@pytest.fixture
def experience_payload(company):
    def _payload(**overrides) -> dict:
        payload = {
            "company_id": company["id"],
            "position": "Software Engineer Intern",
            "interview_date": "2026-08-14",
            "result": "selected",
            "overall_rating": 4,
            "difficulty_level": 3,
            "interview_process": "Online assessment followed by two technical rounds.",
            "preparation_time": "2 months",
            "advice": "Practice graphs and explain your thinking out loud.",
            "is_anonymous": False,
            "rounds": [],
        }
        payload.update(overrides)
        return payload

    return _payload


@pytest.fixture
def create_experience(client, author, experience_payload):
    def _create(headers=None, **overrides) -> dict:
        response = client.post(
            "/api/v1/experiences",
            json=experience_payload(**overrides),
            headers=headers or author["headers"],
        )
        assert response.status_code == 201, response.text
        return response.json()["experience"]

    return _create


def make_round(round_number: int, questions: int = 1, links: int = 1, **extra) -> dict:
    """A round payload with ``questions`` coding questions of ``links`` links each."""
    return {
        "round_number": round_number,
        "round_type": "coding",
        "round_name": f"Round {round_number}",
        "duration": 60,
        "difficulty": 3,
        "result": "passed",
        "coding_questions": [
            {
                "title": f"Question {round_number}.{q}",
                "difficulty": "medium",
                "topics": ["Arrays", "Hashing"],
                "time_complexity": "O(n)",
                "space_complexity": "O(n)",
                "platform_links": [
                    {
                        "platform": "leetcode",
                        "url": f"https://leetcode.com/problems/q-{round_number}-{q}-{n}/",
                        "problem_id": f"{round_number}{q}{n}",
                    }
                    for n in range(links)
                ],
            }
            for q in range(questions)
        ],
        **extra,
    }
