import logging
from typing import Dict, List, Optional
from fastapi import Depends, HTTPException, status
from classroom_portal.features.auth.jwt_handler import verify_jwt_token
from classroom_portal.features.users.crud import get_user_by_id

logger = logging.getLogger(__name__)

ADMIN = "admin"
TEACHER = "teacher"
STUDENT = "student"
STAFF_ROLES = [TEACHER, ADMIN]


def get_current_user(payload: Dict = Depends(verify_jwt_token)) -> Dict:
    """
    Resolve the token payload to the stored user. The role comes from the
    user record, so role changes apply without a new token.
    """
    user_id = payload.get("user_id")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload: missing user_id."
        )

    user = get_user_by_id(user_id)
    if not user:
        logger.warning("Token for unknown user %s", user_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token. User not found."
        )
    return user


def _check_user_role(user: Dict, required_roles: Optional[List[str]] = None):
    role = user.get("role")
    if not role:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. No role found in token."
        )

    if required_roles and role not in required_roles:
        logger.info("Denied %s (%s); required roles %s", user.get("id"), role, required_roles)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Insufficient permissions."
        )


def require_user_access(user: Dict = Depends(get_current_user)) -> Dict:
    _check_user_role(user)
    return user


def require_student_access(user: Dict = Depends(get_current_user)) -> Dict:
    _check_user_role(user, required_roles=[STUDENT])
    return user


def require_teacher_access(user: Dict = Depends(get_current_user)) -> Dict:
    """
    Confirms users' RBAC access as a *Teacher only*.
    """
    _check_user_role(user, required_roles=[TEACHER])
    return user


def require_staff_access(user: Dict = Depends(get_current_user)) -> Dict:
    _check_user_role(user, required_roles=STAFF_ROLES)
    return user


def require_admin_access(user: Dict = Depends(get_current_user)) -> Dict:
    _check_user_role(user, required_roles=[ADMIN])
    return user
