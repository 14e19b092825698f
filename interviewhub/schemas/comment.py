"""Pydantic schemas for experience comments."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CommentCreate(BaseModel):
    content: str = Field(max_length=5000)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Comment content is required")
        return value


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    experience_id: uuid.UUID
    user_id: uuid.UUID
    content: str
    created_at: datetime
    user_name: str


class CommentCreated(BaseModel):
    message: str = "Comment added successfully"
    comment: CommentResponse
