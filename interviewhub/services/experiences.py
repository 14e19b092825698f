"""Experience read and write paths.

Read side:
- list_experiences: filtered, paginated listing with vote/comment/view
  counts joined from grouped sub-aggregates.
- get_experience_detail: one experience with rounds -> coding questions ->
  platform links eager-loaded in submission order, plus comments and a vote
  tally.

Write side:
- create_experience: inserts the experience and its nested rows in a single
  transaction. Any failure rolls back everything; callers never observe a
  partially written experience.

Filters are applied by one helper shared by the page query and the count
query so ``total`` always describes the same row set as the page.
"""

import uuid
from dataclasses import dataclass
from typing import Optional

import structlog
from sqlalchemy import Select, and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload, selectinload

from interviewhub.metrics import experience_create_failures, experiences_created
from interviewhub.models.coding_question import CodingQuestion
from interviewhub.models.comment import Comment
from interviewhub.models.company import Company
from interviewhub.models.experience import Experience
from interviewhub.models.platform_link import PlatformLink
from interviewhub.models.round import InterviewRound
from interviewhub.models.user import User
from interviewhub.models.view import ExperienceView
from interviewhub.models.vote import Vote, VoteType
from interviewhub.schemas.comment import CommentResponse
from interviewhub.schemas.common import Pagination
from interviewhub.schemas.experience import (
    ANONYMOUS_NAME,
    AuthorSummary,
    CompanySummary,
    ExperienceCounts,
    ExperienceCreate,
    ExperienceDetail,
    ExperienceListItem,
    ExperienceResponse,
    RoundResponse,
    VoteTally,
)

log = structlog.get_logger(__name__)

RESULT_FILTER_ALL = "all"


@dataclass
class ExperienceFilters:
    search: Optional[str] = None
    result: Optional[str] = None
    company: Optional[str] = None
    page: int = 1
    limit: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class ExperiencePage:
    items: list[ExperienceListItem]
    pagination: Pagination


def author_summary(user: User, is_anonymous: bool) -> AuthorSummary:
    """Public author block; anonymous experiences reveal nothing but the placeholder name."""
    if is_anonymous:
        return AuthorSummary(full_name=ANONYMOUS_NAME)
    return AuthorSummary(
        id=user.id,
        full_name=user.full_name,
        year_of_passing=user.year_of_passing,
        branch=user.branch,
    )


def _experience_columns(experience: Experience) -> dict:
    data = ExperienceResponse.model_validate(experience).model_dump()
    if experience.is_anonymous:
        data["user_id"] = None
    return data


def apply_listing_filters(stmt: Select, filters: ExperienceFilters) -> Select:
    """Add WHERE clauses for search/result/company filters.

    ``stmt`` must already join User and Company. Author names only match
    non-anonymous experiences so searching cannot unmask an author.
    """
    if filters.search:
        term = filters.search
        stmt = stmt.where(
            or_(
                Company.name.icontains(term, autoescape=True),
                Experience.position.icontains(term, autoescape=True),
                and_(
                    Experience.is_anonymous.is_(False),
                    User.full_name.icontains(term, autoescape=True),
                ),
            )
        )

    if filters.result and filters.result != RESULT_FILTER_ALL:
        stmt = stmt.where(Experience.result == filters.result)

    if filters.company:
        stmt = stmt.where(Company.name.icontains(filters.company, autoescape=True))

    return stmt


def build_listing_query(filters: ExperienceFilters) -> Select:
    """Page query: experience + author + company + three count sub-aggregates."""
    vote_counts = (
        select(Vote.experience_id, func.count().label("n"))
        .where(Vote.vote_type == VoteType.upvote.value)
        .group_by(Vote.experience_id)
        .subquery("vote_counts")
    )
    comment_counts = (
        select(Comment.experience_id, func.count().label("n"))
        .group_by(Comment.experience_id)
        .subquery("comment_counts")
    )
    view_counts = (
        select(ExperienceView.experience_id, func.count().label("n"))
        .group_by(ExperienceView.experience_id)
        .subquery("view_counts")
    )

    stmt = (
        select(
            Experience,
            User,
            Company,
            func.coalesce(vote_counts.c.n, 0).label("vote_count"),
            func.coalesce(comment_counts.c.n, 0).label("comment_count"),
            func.coalesce(view_counts.c.n, 0).label("view_count"),
        )
        .join(User, Experience.user_id == User.id)
        .join(Company, Experience.company_id == Company.id)
        .outerjoin(vote_counts, vote_counts.c.experience_id == Experience.id)
        .outerjoin(comment_counts, comment_counts.c.experience_id == Experience.id)
        .outerjoin(view_counts, view_counts.c.experience_id == Experience.id)
    )
    stmt = apply_listing_filters(stmt, filters)

    # id breaks created_at ties so pages never overlap
    return (
        stmt.order_by(Experience.created_at.desc(), Experience.id)
        .limit(filters.limit)
        .offset(filters.offset)
    )


def build_count_query(filters: ExperienceFilters) -> Select:
    stmt = (
        select(func.count(Experience.id))
        .select_from(Experience)
        .join(User, Experience.user_id == User.id)
        .join(Company, Experience.company_id == Company.id)
    )
    return apply_listing_filters(stmt, filters)


async def list_experiences(db: AsyncSession, filters: ExperienceFilters) -> ExperiencePage:
    result = await db.execute(build_listing_query(filters))
    rows = result.all()
    total = (await db.execute(build_count_query(filters))).scalar_one()

    items = [
        ExperienceListItem(
            **_experience_columns(row.Experience),
            user_name=ANONYMOUS_NAME if row.Experience.is_anonymous else row.User.full_name,
            user=author_summary(row.User, row.Experience.is_anonymous),
            company=CompanySummary.model_validate(row.Company),
            counts=ExperienceCounts(
                votes=int(row.vote_count),
                comments=int(row.comment_count),
                views=int(row.view_count),
            ),
        )
        for row in rows
    ]

    log.info(
        "experiences_listed",
        page=filters.page,
        limit=filters.limit,
        returned=len(items),
        total=total,
    )

    return ExperiencePage(
        items=items,
        pagination=Pagination(
            page=filters.page,
            limit=filters.limit,
            has_more=filters.page * filters.limit < total,
            total=total,
        ),
    )


async def experience_exists(db: AsyncSession, experience_id: uuid.UUID) -> bool:
    result = await db.execute(select(Experience.id).where(Experience.id == experience_id))
    return result.scalar_one_or_none() is not None


async def get_experience_detail(
    db: AsyncSession, experience_id: uuid.UUID
) -> Optional[ExperienceDetail]:
    """Load one experience with its full nested tree, or None if it does not exist."""
    result = await db.execute(
        select(Experience)
        .where(Experience.id == experience_id)
        .options(
            joinedload(Experience.user),
            joinedload(Experience.company),
            selectinload(Experience.rounds)
            .selectinload(InterviewRound.coding_questions)
            .selectinload(CodingQuestion.platform_links),
        )
    )
    experience = result.scalar_one_or_none()
    if experience is None:
        return None

    # Comments newest first, each with its own author's name
    comment_result = await db.execute(
        select(Comment, User.full_name)
        .join(User, Comment.user_id == User.id)
        .where(Comment.experience_id == experience_id)
        .order_by(Comment.created_at.desc(), Comment.id)
    )
    comments = [
        CommentResponse(
            id=comment.id,
            experience_id=comment.experience_id,
            user_id=comment.user_id,
            content=comment.content,
            created_at=comment.created_at,
            user_name=full_name,
        )
        for comment, full_name in comment_result.all()
    ]

    vote_result = await db.execute(
        select(Vote.vote_type, func.count())
        .where(Vote.experience_id == experience_id)
        .group_by(Vote.vote_type)
    )
    tally = {vote_type.value: 0 for vote_type in VoteType}
    for vote_type, count in vote_result.all():
        tally[vote_type] = int(count)

    return ExperienceDetail(
        **_experience_columns(experience),
        user_name=ANONYMOUS_NAME if experience.is_anonymous else experience.user.full_name,
        user=author_summary(experience.user, experience.is_anonymous),
        company=CompanySummary.model_validate(experience.company),
        rounds=[RoundResponse.model_validate(round_row) for round_row in experience.rounds],
        comments=comments,
        votes=VoteTally(**tally),
    )


async def create_experience(
    db: AsyncSession, author_id: uuid.UUID, payload: ExperienceCreate
) -> Experience:
    """Insert an experience with its rounds, coding questions and platform links.

    The whole tree is written inside one transaction: experience -> each
    round -> each question of that round -> each link of that question.
    On any failure the transaction is rolled back and the error re-raised.

    The caller is responsible for validating that the company exists.
    """
    experience = Experience(user_id=author_id, **payload.model_dump(exclude={"rounds"}))

    question_count = 0
    link_count = 0
    try:
        db.add(experience)
        # Flush to get experience.id before inserting rounds
        await db.flush()

        for round_in in payload.rounds:
            round_row = InterviewRound(
                experience_id=experience.id,
                **round_in.model_dump(exclude={"coding_questions"}),
            )
            db.add(round_row)
            await db.flush()

            for question_pos, question_in in enumerate(round_in.coding_questions):
                question = CodingQuestion(
                    round_id=round_row.id,
                    position=question_pos,
                    **question_in.model_dump(exclude={"platform_links"}),
                )
                db.add(question)
                await db.flush()
                question_count += 1

                for link_pos, link_in in enumerate(question_in.platform_links):
                    db.add(
                        PlatformLink(
                            question_id=question.id,
                            position=link_pos,
                            **link_in.model_dump(),
                        )
                    )
                    link_count += 1

        await db.commit()
    except Exception:
        await db.rollback()
        experience_create_failures.inc()
        raise

    await db.refresh(experience)
    experiences_created.inc()
    log.info(
        "experience_created",
        experience_id=str(experience.id),
        rounds=len(payload.rounds),
        coding_questions=question_count,
        platform_links=link_count,
    )
    return experience
