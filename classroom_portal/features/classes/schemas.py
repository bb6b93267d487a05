from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, Field, field_validator

from classroom_portal.core.schemas import Pagination
from classroom_portal.features.users.schemas import UserSummary


class ClassMember(BaseModel):
    user_id: str
    role_in_class: Literal["student", "teacher"] = "student"
    enrolled_at: Optional[datetime] = None
    user: Optional[UserSummary] = None


class ClassCreate(BaseModel):
    """Schema for creating a new class record."""
    title: str = Field(..., max_length=100)
    code: str = Field(..., min_length=3, max_length=20)
    description: Optional[str] = Field(None, max_length=500)

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Class title is required")
        return value

    @field_validator("code")
    @classmethod
    def normalize_code(cls, value: str) -> str:
        value = value.strip().upper()
        if len(value) < 3:
            raise ValueError("Code must be 3-20 characters")
        return value


class ClassUpdate(BaseModel):
    """Schema for updating a class record."""
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    archived: Optional[bool] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("Class title is required")
        return value


class ClassResponse(BaseModel):
    id: str
    title: str
    code: str
    description: Optional[str] = None
    teacher_id: str
    teacher: Optional[UserSummary] = None
    members: List[ClassMember] = []
    archived: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ClassListResponse(BaseModel):
    classes: List[ClassResponse]
    pagination: Pagination


class JoinClassRequest(BaseModel):
    code: Optional[str] = None


class EnrollStudentRequest(BaseModel):
    student_id: str
