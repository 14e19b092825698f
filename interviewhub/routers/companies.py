"""Company endpoints.

GET  /api/v1/companies        -- list companies (optional name search)
GET  /api/v1/companies/{id}   -- one company
POST /api/v1/companies        -- add a company (auth)
"""

import uuid
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from interviewhub.dependencies import CurrentUser, DbSession
from interviewhub.errors import translate_db_errors
from interviewhub.middleware.rate_limiter import ReadRateLimit, WriteRateLimit
from interviewhub.models.company import Company
from interviewhub.models.experience import Experience
from interviewhub.schemas.company import (
    CompanyCreate,
    CompanyCreated,
    CompanyListResponse,
    CompanyResponse,
)

router = APIRouter(prefix="/api/v1", tags=["companies"])

COMPANY_NOT_FOUND = "Company not found"


def parse_company_id(company_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(company_id)
    except ValueError:
        raise HTTPException(status_code=404, detail=COMPANY_NOT_FOUND)


CompanyId = Annotated[uuid.UUID, Depends(parse_company_id)]


def _company_response(company: Company, experience_count: int = 0) -> CompanyResponse:
    return CompanyResponse(
        id=company.id,
        name=company.name,
        logo_url=company.logo_url,
        website=company.website,
        industry=company.industry,
        created_at=company.created_at,
        experience_count=experience_count,
    )


def _companies_with_counts():
    return (
        select(Company, func.count(Experience.id).label("experience_count"))
        .outerjoin(Experience, Experience.company_id == Company.id)
        .group_by(Company.id)
    )


@router.get("/companies", response_model=CompanyListResponse)
async def list_companies(
    db: DbSession,
    _rate: ReadRateLimit,
    search: Optional[str] = Query(None, max_length=200),
) -> CompanyListResponse:
    """Return companies alphabetically, each with its number of shared experiences."""
    stmt = _companies_with_counts().order_by(Company.name)
    if search and search.strip():
        stmt = stmt.where(Company.name.icontains(search.strip(), autoescape=True))

    with translate_db_errors("Failed to fetch companies"):
        result = await db.execute(stmt)
        rows = result.all()

    return CompanyListResponse(
        companies=[_company_response(row.Company, row.experience_count) for row in rows]
    )


@router.get("/companies/{company_id}", response_model=CompanyResponse)
async def get_company(
    company_id: CompanyId,
    db: DbSession,
    _rate: ReadRateLimit,
) -> CompanyResponse:
    with translate_db_errors("Failed to fetch company"):
        result = await db.execute(_companies_with_counts().where(Company.id == company_id))
        row = result.first()
    if row is None:
        raise HTTPException(status_code=404, detail=COMPANY_NOT_FOUND)
    return _company_response(row.Company, row.experience_count)


@router.post("/companies", response_model=CompanyCreated, status_code=201)
async def create_company(
    body: CompanyCreate,
    user: CurrentUser,
    db: DbSession,
    _rate: WriteRateLimit,
) -> CompanyCreated:
    """Add a company so experiences can reference it.

    Names are unique case-insensitively; a duplicate returns 409.
    """
    with translate_db_errors("Failed to create company"):
        result = await db.execute(
            select(Company.id).where(func.lower(Company.name) == body.name.lower())
        )
        if result.scalar_one_or_none() is not None:
            raise HTTPException(status_code=409, detail="Company already exists")

        company = Company(
            name=body.name,
            logo_url=body.logo_url,
            website=body.website,
            industry=body.industry,
        )
        db.add(company)
        try:
            await db.commit()
        except IntegrityError:
            # Concurrent insert of the same name won the unique constraint
            await db.rollback()
            raise HTTPException(status_code=409, detail="Company already exists")
        await db.refresh(company)

    return CompanyCreated(company=_company_response(company))
