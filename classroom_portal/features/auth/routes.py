import logging
from typing import Dict
from fastapi import APIRouter, Depends, HTTPException, status

from classroom_portal.features.auth.auth_helpers import (
    create_access_token,
    hash_password,
    validate_user_email_login,
)
from classroom_portal.features.auth.permissions import require_user_access
from classroom_portal.features.auth.schemas import TokenResponse, UserLogin, WhoAmIResponse
from classroom_portal.features.users.crud import create_user, get_user_by_email, update_user
from classroom_portal.features.users.schemas import ProfileUpdate, UserCreate, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(user_data: UserCreate):
    """Register a new user. Users without an explicit role become students."""
    if get_user_by_email(user_data.email):
        raise HTTPException(status_code=400, detail="User with this email already exists")

    user = create_user(
        name=user_data.name,
        email=user_data.email,
        password_hash=hash_password(user_data.password),
        role=user_data.role or "student",
    )

    return TokenResponse(
        message="User registered successfully",
        token=create_access_token(user),
        user=user,
    )


@router.post("/login", response_model=TokenResponse)
def login(credentials: UserLogin):
    user = validate_user_email_login(credentials.email, credentials.password)
    logger.info("User %s logged in", user["id"])
    return TokenResponse(
        message="Login successful",
        token=create_access_token(user),
        user=user,
    )


@router.post("/logout")
def logout(_user: Dict = Depends(require_user_access)):
    # Tokens are stateless; the client discards its copy.
    return {"message": "Logout successful"}


@router.get("/me", response_model=UserResponse)
def get_me(user: Dict = Depends(require_user_access)):
    return user


@router.patch("/me", response_model=UserResponse)
def update_me(
    update_data: ProfileUpdate,
    user: Dict = Depends(require_user_access)
):
    """Update the current user's name and/or profile."""
    changes = update_data.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        return user

    updated = update_user(user["id"], changes)
    if not updated:
        raise HTTPException(status_code=404, detail="User not found")
    return updated


@router.get("/whoami", response_model=WhoAmIResponse)
def whoami(user: Dict = Depends(require_user_access)):
    return WhoAmIResponse(
        user_id=user["id"],
        user_role=user["role"],
        user_name=user["name"],
        user_email=user["email"],
        message=f"You are currently logged in as: {user['role']}",
    )
