from pydantic import BaseModel, EmailStr, field_validator

from classroom_portal.features.users.schemas import Role, UserResponse


class UserLogin(BaseModel):
    email: EmailStr
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("password")
    @classmethod
    def password_required(cls, value: str) -> str:
        if not value:
            raise ValueError("Password is required")
        return value


class TokenResponse(BaseModel):
    message: str
    token: str
    token_type: str = "bearer"
    user: UserResponse


class WhoAmIResponse(BaseModel):
    user_id: str
    user_role: Role
    user_name: str
    user_email: str
    message: str
