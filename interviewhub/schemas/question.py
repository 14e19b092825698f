from pydantic import BaseModel
import uuid
from datetime import datetime

from interviewhub.schemas.common import Pagination
from interviewhub.schemas.experience import CodingQuestionResponse


class QuestionListItem(CodingQuestionResponse):
    round_type: str
    experience_id: uuid.UUID
    company_name: str
    position: str
    created_at: datetime


class QuestionListResponse(BaseModel):
    questions: list[QuestionListItem]
    pagination: Pagination
