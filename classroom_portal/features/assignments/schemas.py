from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, Field

from classroom_portal.core.schemas import Pagination
from classroom_portal.features.users.schemas import UserSummary

Visibility = Literal["visible", "hidden"]


class Attachment(BaseModel):
    filename: str
    path: str
    mimetype: Optional[str] = None
    size: Optional[int] = None
    uploaded_at: Optional[datetime] = None


class ClassSummary(BaseModel):
    id: str
    title: Optional[str] = None
    code: Optional[str] = None
    description: Optional[str] = None


class AssignmentUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    due_at: Optional[datetime] = None
    visibility: Optional[Visibility] = None
    max_score: Optional[int] = Field(None, ge=1)
    locked: Optional[bool] = None


class AssignmentResponse(BaseModel):
    id: str
    class_id: str
    title: str
    description: str
    due_at: datetime
    attachments: List[Attachment] = []
    created_by: str
    creator: Optional[UserSummary] = None
    class_info: Optional[ClassSummary] = None
    visibility: Visibility = "visible"
    max_score: int = 100
    locked: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Role-dependent listing fields
    submission_count: Optional[int] = None
    is_submitted: Optional[bool] = None
    submission_status: Optional[str] = None


class AssignmentListResponse(BaseModel):
    assignments: List[AssignmentResponse]
    pagination: Pagination
