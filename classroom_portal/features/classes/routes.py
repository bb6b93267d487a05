from typing import Dict, Optional
from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from classroom_portal.features.auth.permissions import (
    require_staff_access,
    require_student_access,
    require_user_access,
)
from classroom_portal.features.classes.crud import (
    add_class,
    add_member,
    attach_people,
    get_class_by_code,
    list_classes,
    remove_member,
    update_class as crud_update_class,
)
from classroom_portal.features.classes.helpers import (
    ensure_class_access,
    ensure_class_manager,
    get_class_or_404,
    is_class_member,
)
from classroom_portal.features.classes.schemas import (
    ClassCreate,
    ClassListResponse,
    ClassResponse,
    ClassUpdate,
    EnrollStudentRequest,
    JoinClassRequest,
)
from classroom_portal.features.users.crud import get_user_by_id

router = APIRouter()


# Declared before /{class_id} so "join" is never read as an id
@router.post("/join", response_model=ClassResponse)
def join_class_by_code(
    join_data: JoinClassRequest,
    user: Dict = Depends(require_student_access)
):
    """Student self-enrollment with a class code."""
    if not join_data.code or not join_data.code.strip():
        raise HTTPException(status_code=400, detail="Class code is required")

    class_doc = get_class_by_code(join_data.code)
    if not class_doc:
        raise HTTPException(status_code=404, detail="Class not found with this code")

    if is_class_member(class_doc, user["id"]):
        raise HTTPException(status_code=400, detail="You are already enrolled in this class")

    updated = add_member(class_doc, user["id"])
    return attach_people([updated])[0]


@router.post("", response_model=ClassResponse, status_code=status.HTTP_201_CREATED)
def create_class(
    class_data: ClassCreate,
    user: Dict = Depends(require_staff_access)
):
    """Create a new class owned by the caller."""
    if get_class_by_code(class_data.code):
        raise HTTPException(status_code=400, detail="Class code already exists")

    created_class = add_class(class_data.model_dump(), teacher_id=user["id"])
    return attach_people([created_class])[0]


@router.get("", response_model=ClassListResponse)
def fetch_classes(
    q: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: Dict = Depends(require_user_access)
):
    """Retrieve the classes visible to the caller, newest first."""
    classes, pagination = list_classes(user, q=q, page=page, limit=limit)
    return {"classes": classes, "pagination": pagination}


@router.get("/{class_id}", response_model=ClassResponse)
def fetch_class_by_id(
    class_id: str,
    user: Dict = Depends(require_user_access)
):
    class_doc = get_class_or_404(class_id)
    ensure_class_access(class_doc, user)
    return attach_people([class_doc])[0]


@router.patch("/{class_id}", response_model=ClassResponse)
def update_class_route(
    class_id: str,
    data: ClassUpdate = Body(...),
    user: Dict = Depends(require_staff_access)
):
    """Update a class."""
    class_doc = get_class_or_404(class_id)
    ensure_class_manager(class_doc, user)

    updated_class = crud_update_class(class_id, data.model_dump(exclude_unset=True, exclude_none=True))
    if not updated_class:
        raise HTTPException(status_code=404, detail="Class not found")
    return attach_people([updated_class])[0]


@router.post("/{class_id}/enroll", response_model=ClassResponse)
def enroll_student(
    class_id: str,
    enroll_data: EnrollStudentRequest,
    user: Dict = Depends(require_staff_access)
):
    class_doc = get_class_or_404(class_id)
    ensure_class_manager(class_doc, user)

    student = get_user_by_id(enroll_data.student_id)
    if not student or student.get("role") != "student":
        raise HTTPException(status_code=400, detail="Invalid student ID")

    if is_class_member(class_doc, enroll_data.student_id):
        raise HTTPException(status_code=400, detail="Student already enrolled")

    updated = add_member(class_doc, enroll_data.student_id)
    return attach_people([updated])[0]


@router.delete("/{class_id}/members/{user_id}", response_model=ClassResponse)
def remove_student(
    class_id: str,
    user_id: str,
    user: Dict = Depends(require_staff_access)
):
    class_doc = get_class_or_404(class_id)
    ensure_class_manager(class_doc, user)

    updated = remove_member(class_doc, user_id)
    return attach_people([updated])[0]
