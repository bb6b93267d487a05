import datetime
import logging
from typing import Optional
import jwt
from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from classroom_portal.core.config import get_settings

logger = logging.getLogger(__name__)

# Bearer token utility. Missing tokens are reported by verify_jwt_token.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/auth/login", auto_error=False)


def create_jwt_token(data: dict, expires_delta: Optional[int] = None) -> str:
    """
    Generate a JSON Web Token (JWT)

    :param data: Dictionary containing payload in JWT. Ex: {"user_id": "ab12", "role": "student"}
    :type data: dict
    :param expires_delta: time span in minutes for token to expire. Defaults to
        the configured JWT lifetime (7 days)
    :type expires_delta: int
    :return: encoded JWT token
    :rtype: str
    """
    settings = get_settings()
    minutes = expires_delta if expires_delta is not None else settings.jwt_expire_minutes
    expire = datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(minutes=minutes)
    data_to_encode = data.copy()
    data_to_encode.update({"exp": expire})

    return jwt.encode(data_to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_jwt_token(token: Optional[str] = Depends(oauth2_scheme)) -> dict:
    """
    Decodes and verifies JSON Web Token (JWT).

    :param token: encoded JWT taken from the ``Authorization: Bearer`` header
    :type token: str
    :returns: decoded JWT payload
    :rtype: dict
    :raises HTTPException: 401 error if token is missing, expired or invalid
    """
    if not token:
        raise HTTPException(status_code=401, detail="Access denied. No token provided.")

    settings = get_settings()
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        logger.warning("Rejected expired token")
        raise HTTPException(status_code=401, detail="Invalid or expired token.")
    except jwt.InvalidTokenError as e:
        logger.warning("Rejected invalid token: %s", e)
        raise HTTPException(status_code=401, detail="Invalid or expired token.")
