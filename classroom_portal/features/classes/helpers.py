from typing import Dict
from fastapi import HTTPException, status

from classroom_portal.features.classes.crud import get_class_by_id


def is_class_member(class_doc: Dict, user_id: str) -> bool:
    return any(member.get("user_id") == user_id for member in class_doc.get("members", []))


def is_class_teacher(class_doc: Dict, user: Dict) -> bool:
    return class_doc.get("teacher_id") == user.get("id")


def can_access_class(class_doc: Dict, user: Dict) -> bool:
    if user.get("role") == "admin":
        return True
    return is_class_teacher(class_doc, user) or is_class_member(class_doc, user.get("id"))


def can_manage_class(class_doc: Dict, user: Dict) -> bool:
    return user.get("role") == "admin" or is_class_teacher(class_doc, user)


def get_class_or_404(class_id: str) -> Dict:
    class_doc = get_class_by_id(class_id)
    if not class_doc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Class not found")
    return class_doc


def ensure_class_access(class_doc: Dict, user: Dict):
    if not can_access_class(class_doc, user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. You are not a member of this class."
        )


def ensure_class_manager(class_doc: Dict, user: Dict):
    if not can_manage_class(class_doc, user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. You do not teach this class."
        )
