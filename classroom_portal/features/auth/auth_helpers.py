from typing import Dict
from passlib.context import CryptContext
from fastapi import HTTPException

from classroom_portal.features.auth.jwt_handler import create_jwt_token
from classroom_portal.features.users.crud import get_user_by_email, public_user

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, password_hash: str) -> bool:
    """Check a login password against the stored bcrypt hash."""
    return pwd_context.verify(plain_password, password_hash)


def hash_password(password: str) -> str:
    """
    Hash a password for storage on the user document.

    :param password: the password as typed at registration
    :returns: bcrypt hash, salted per call
    """
    return pwd_context.hash(password)


def create_access_token(user: Dict) -> str:
    return create_jwt_token({
        "user_id": user["id"],
        "email": user["email"],
        "role": user["role"],
    })


def validate_user_email_login(email: str, password: str) -> Dict:
    """
    Check for email and password. The email must exist in the database and
    have a matching hashed password with what is passed in.

    :returns: the public user record
    :raises HTTPException: 401 for an unknown email or a wrong password
    """
    user = get_user_by_email(email, get_password=True)

    if not user or not user.get("password_hash"):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if not verify_password(password, user["password_hash"]):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    return public_user(user)
