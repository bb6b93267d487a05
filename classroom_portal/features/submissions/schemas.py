from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, Field, field_validator

from classroom_portal.core.schemas import Pagination
from classroom_portal.features.users.schemas import UserSummary

SubmissionStatus = Literal["submitted", "late", "graded", "missing"]


class SubmissionItem(BaseModel):
    type: Literal["link", "file"]
    value: str
    path: Optional[str] = None
    mimetype: Optional[str] = None
    size: Optional[int] = None


class Grade(BaseModel):
    score: float
    max: int
    rubric: Optional[str] = None


class Comment(BaseModel):
    author_id: str
    text: str
    created_at: Optional[datetime] = None


class AssignmentSummary(BaseModel):
    id: str
    title: Optional[str] = None
    due_at: Optional[datetime] = None
    max_score: Optional[int] = None
    class_id: Optional[str] = None
    class_title: Optional[str] = None


class SubmissionResponse(BaseModel):
    id: str
    assignment_id: str
    student_id: str
    link_or_files: List[SubmissionItem] = []
    submitted_at: Optional[datetime] = None
    status: SubmissionStatus = "submitted"
    grade: Optional[Grade] = None
    feedback: Optional[str] = None
    comments: List[Comment] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    student: Optional[UserSummary] = None
    assignment: Optional[AssignmentSummary] = None


class SubmissionCreatedResponse(BaseModel):
    message: str
    submission: SubmissionResponse


class SubmissionListResponse(BaseModel):
    submissions: List[SubmissionResponse]
    pagination: Pagination


class GradeRequest(BaseModel):
    score: float = Field(..., ge=0)
    feedback: Optional[str] = Field(None, max_length=1000)
    rubric: Optional[str] = None


class CommentRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=1000)

    @field_validator("text")
    @classmethod
    def strip_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Comment text is required")
        return value
