from datetime import datetime
from typing import Any, Dict, Literal, Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

Role = Literal["student", "teacher", "admin"]


class UserSummary(BaseModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None


class UserResponse(BaseModel):
    """Public user record. Never carries the password hash."""
    id: str
    name: str
    email: str
    role: Role
    profile: Dict[str, Any] = {}
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: Optional[Role] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    role: Optional[Role] = None


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    profile: Optional[Dict[str, Any]] = None
