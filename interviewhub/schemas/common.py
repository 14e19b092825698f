"""Common shared schema types used across the API."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Standard error response envelope."""

    error: str
    details: Optional[str] = None


class Pagination(BaseModel):
    """Pagination block shared by list endpoints.

    ``total`` is the number of rows matching the filters (not just this page).
    """

    model_config = ConfigDict(populate_by_name=True)

    page: int
    limit: int
    has_more: bool = Field(alias="hasMore")
    total: int
