"""Coding question browser.

GET /api/v1/questions -- coding questions across all experiences, newest first
"""

from typing import Optional

from fastapi import APIRouter, Query
from sqlalchemy import Select, func, select
from sqlalchemy.orm import selectinload

from interviewhub.config import settings
from interviewhub.dependencies import DbSession
from interviewhub.errors import translate_db_errors
from interviewhub.middleware.rate_limiter import ReadRateLimit
from interviewhub.models.coding_question import CodingQuestion, QuestionDifficulty
from interviewhub.models.company import Company
from interviewhub.models.experience import Experience
from interviewhub.models.round import InterviewRound
from interviewhub.schemas.common import Pagination
from interviewhub.schemas.experience import PlatformLinkResponse
from interviewhub.schemas.question import QuestionListItem, QuestionListResponse

router = APIRouter(prefix="/api/v1", tags=["questions"])


def _with_joins(stmt: Select) -> Select:
    return (
        stmt.join(InterviewRound, CodingQuestion.round_id == InterviewRound.id)
        .join(Experience, InterviewRound.experience_id == Experience.id)
        .join(Company, Experience.company_id == Company.id)
    )


def _apply_filters(
    stmt: Select, difficulty: Optional[QuestionDifficulty], search: Optional[str]
) -> Select:
    if difficulty is not None:
        stmt = stmt.where(CodingQuestion.difficulty == difficulty.value)
    if search:
        stmt = stmt.where(CodingQuestion.title.icontains(search, autoescape=True))
    return stmt


@router.get("/questions", response_model=QuestionListResponse)
async def list_questions(
    db: DbSession,
    _rate: ReadRateLimit,
    difficulty: Optional[QuestionDifficulty] = Query(None),
    search: Optional[str] = Query(None, max_length=200),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
) -> QuestionListResponse:
    """List coding questions with their links, company and position."""
    search = search.strip() if search else None

    stmt = _with_joins(
        select(
            CodingQuestion,
            InterviewRound.round_type,
            Experience.id.label("experience_id"),
            Experience.position,
            Company.name.label("company_name"),
        )
    ).options(selectinload(CodingQuestion.platform_links))
    stmt = (
        _apply_filters(stmt, difficulty, search)
        .order_by(CodingQuestion.created_at.desc(), CodingQuestion.id)
        .limit(limit)
        .offset((page - 1) * limit)
    )
    count_stmt = _apply_filters(
        _with_joins(select(func.count(CodingQuestion.id)).select_from(CodingQuestion)),
        difficulty,
        search,
    )

    with translate_db_errors("Failed to fetch questions"):
        rows = (await db.execute(stmt)).all()
        total = (await db.execute(count_stmt)).scalar_one()

    questions = [
        QuestionListItem(
            id=row.CodingQuestion.id,
            title=row.CodingQuestion.title,
            description=row.CodingQuestion.description,
            difficulty=row.CodingQuestion.difficulty,
            topics=row.CodingQuestion.topics or [],
            solution_approach=row.CodingQuestion.solution_approach,
            time_complexity=row.CodingQuestion.time_complexity,
            space_complexity=row.CodingQuestion.space_complexity,
            platform_links=[
                PlatformLinkResponse.model_validate(link)
                for link in row.CodingQuestion.platform_links
            ],
            round_type=row.round_type,
            experience_id=row.experience_id,
            company_name=row.company_name,
            position=row.position,
            created_at=row.CodingQuestion.created_at,
        )
        for row in rows
    ]

    return QuestionListResponse(
        questions=questions,
        pagination=Pagination(
            page=page,
            limit=limit,
            has_more=page * limit < total,
            total=total,
        ),
    )
