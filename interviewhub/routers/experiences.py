"""Interview experience endpoints.

GET  /api/v1/experiences                   -- filtered, paginated listing
GET  /api/v1/experiences/{id}              -- full detail (records a view)
POST /api/v1/experiences                   -- share an experience (auth)
POST /api/v1/experiences/{id}/vote         -- toggle an up/downvote (auth)
POST /api/v1/experiences/{id}/comment      -- add a comment (auth)
"""

import uuid
from typing import Annotated, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.exc import IntegrityError

from interviewhub.config import settings
from interviewhub.dependencies import ClientIP, CurrentUser, DbSession, OptionalUser, SessionFactory
from interviewhub.errors import translate_db_errors
from interviewhub.middleware.rate_limiter import ReadRateLimit, WriteRateLimit
from interviewhub.models.comment import Comment
from interviewhub.models.company import Company
from interviewhub.schemas.comment import CommentCreate, CommentCreated, CommentResponse
from interviewhub.schemas.common import ErrorResponse
from interviewhub.schemas.experience import (
    ExperienceCreate,
    ExperienceCreated,
    ExperienceDetail,
    ExperienceListResponse,
    ExperienceResponse,
)
from interviewhub.schemas.vote import VoteCreate, VoteResult
from interviewhub.services.experiences import (
    ExperienceFilters,
    create_experience,
    experience_exists,
    get_experience_detail,
    list_experiences,
)
from interviewhub.services.tracking import record_page_visit, record_view
from interviewhub.services.votes import VOTE_MESSAGES, VoteAction, toggle_vote

router = APIRouter(
    prefix="/api/v1",
    tags=["experiences"],
    responses={
        400: {"model": ErrorResponse, "description": "Validation failed"},
        429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
    },
)

EXPERIENCE_NOT_FOUND = "Experience not found"

ResultFilter = Literal["all", "selected", "rejected", "pending"]


def parse_experience_id(experience_id: str) -> uuid.UUID:
    """Path id -> UUID. Malformed ids cannot exist, so they are a 404 like unknown ones."""
    try:
        return uuid.UUID(experience_id)
    except ValueError:
        raise HTTPException(status_code=404, detail=EXPERIENCE_NOT_FOUND)


ExperienceId = Annotated[uuid.UUID, Depends(parse_experience_id)]


@router.get("/experiences", response_model=ExperienceListResponse)
async def get_experiences(
    request: Request,
    db: DbSession,
    session_factory: SessionFactory,
    user: OptionalUser,
    client_ip: ClientIP,
    _rate: ReadRateLimit,
    search: Optional[str] = Query(None, max_length=200),
    result: Optional[ResultFilter] = Query(None),
    company: Optional[str] = Query(None, max_length=200),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
) -> ExperienceListResponse:
    """List experiences newest first with vote, comment and view counts.

    ``search`` matches company name, position or (non-anonymous) author name,
    case-insensitively. ``result=all`` is the same as omitting the filter.
    """
    page_url = request.url.path
    if request.url.query:
        page_url = f"{page_url}?{request.url.query}"
    await record_page_visit(
        session_factory,
        ip_address=client_ip,
        page_url=page_url,
        user_agent=request.headers.get("User-Agent", ""),
        referrer=request.headers.get("Referer", ""),
        session_id=request.headers.get("X-Session-ID", ""),
        user_id=user.id if user is not None else None,
    )

    filters = ExperienceFilters(
        search=search.strip() if search else None,
        result=result,
        company=company.strip() if company else None,
        page=page,
        limit=limit,
    )
    with translate_db_errors("Failed to fetch experiences"):
        experience_page = await list_experiences(db, filters)

    return ExperienceListResponse(
        experiences=experience_page.items,
        pagination=experience_page.pagination,
    )


@router.get(
    "/experiences/{experience_id}",
    response_model=ExperienceDetail,
    responses={404: {"model": ErrorResponse}},
)
async def get_experience(
    experience_id: ExperienceId,
    db: DbSession,
    session_factory: SessionFactory,
    user: OptionalUser,
    client_ip: ClientIP,
    _rate: ReadRateLimit,
) -> ExperienceDetail:
    """Retrieve one experience with rounds, coding questions, links, comments and votes.

    Records a view for the caller's IP (deduplicated over a rolling window)
    before responding; tracking failures never fail the request.
    """
    with translate_db_errors("Failed to fetch experience"):
        detail = await get_experience_detail(db, experience_id)
    if detail is None:
        raise HTTPException(status_code=404, detail=EXPERIENCE_NOT_FOUND)

    await record_view(
        session_factory,
        experience_id,
        client_ip,
        user_id=user.id if user is not None else None,
    )
    return detail


@router.post("/experiences", response_model=ExperienceCreated, status_code=201)
async def share_experience(
    body: ExperienceCreate,
    user: CurrentUser,
    db: DbSession,
    _rate: WriteRateLimit,
) -> ExperienceCreated:
    """Share a new interview experience with its rounds, questions and links.

    Validation happens in ExperienceCreate before this function runs; the
    company must additionally exist (400 otherwise). Everything is written
    atomically: a failure at any nesting level leaves no rows behind.
    """
    with translate_db_errors("Failed to create experience"):
        company = await db.get(Company, body.company_id)
        if company is None:
            raise HTTPException(status_code=400, detail="Invalid company ID")

        experience = await create_experience(db, user.id, body)

    return ExperienceCreated(experience=ExperienceResponse.model_validate(experience))


@router.post("/experiences/{experience_id}/vote", response_model=VoteResult)
async def vote_on_experience(
    experience_id: ExperienceId,
    body: VoteCreate,
    user: CurrentUser,
    db: DbSession,
    _rate: WriteRateLimit,
) -> VoteResult:
    """Toggle the caller's vote: add, remove (same type again) or switch type."""
    with translate_db_errors("Failed to process vote"):
        if not await experience_exists(db, experience_id):
            raise HTTPException(status_code=404, detail=EXPERIENCE_NOT_FOUND)

        try:
            action = await toggle_vote(db, experience_id, user.id, body.vote_type)
            await db.commit()
        except IntegrityError:
            # Lost a race with a concurrent toggle by the same user
            await db.rollback()
            raise HTTPException(status_code=409, detail="Vote conflict, please retry")

    return VoteResult(
        message=VOTE_MESSAGES[action],
        action=action.value,
        vote_type=None if action is VoteAction.removed else body.vote_type,
    )


@router.post(
    "/experiences/{experience_id}/comment",
    response_model=CommentCreated,
    status_code=201,
)
async def comment_on_experience(
    experience_id: ExperienceId,
    body: CommentCreate,
    user: CurrentUser,
    db: DbSession,
    _rate: WriteRateLimit,
) -> CommentCreated:
    """Append a comment; the response carries the author's display name."""
    with translate_db_errors("Failed to add comment"):
        if not await experience_exists(db, experience_id):
            raise HTTPException(status_code=404, detail=EXPERIENCE_NOT_FOUND)

        comment = Comment(experience_id=experience_id, user_id=user.id, content=body.content)
        db.add(comment)
        await db.commit()
        await db.refresh(comment)

    return CommentCreated(
        comment=CommentResponse(
            id=comment.id,
            experience_id=comment.experience_id,
            user_id=comment.user_id,
            content=comment.content,
            created_at=comment.created_at,
            user_name=user.full_name,
        )
    )
