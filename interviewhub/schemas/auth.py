"""Pydantic schemas for API key management and authentication."""

import uuid
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class APIKeyCreate(BaseModel):
    """Request schema for creating a new API key / user registration."""

    full_name: str = Field(max_length=150)
    email: Optional[str] = Field(None, max_length=255)
    year_of_passing: Optional[int] = Field(None, ge=1950, le=2100)
    branch: Optional[str] = Field(None, max_length=100)

    @field_validator("full_name")
    @classmethod
    def full_name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Full name is required")
        return value

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip().lower()
        return value or None


class APIKeyResponse(BaseModel):
    """Response schema after a new API key is generated.

    The api_key is shown exactly once. It is stored only as a hash in the
    database and cannot be retrieved again after this response.
    """

    api_key: str
    user_id: uuid.UUID
    message: str = "Store this key securely -- it cannot be retrieved again"
