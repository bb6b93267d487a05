from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status

from classroom_portal.core.schemas import MessageResponse
from classroom_portal.database.nosql_crud_helpers import to_iso, utc_now_iso
from classroom_portal.features.assignments.crud import (
    add_assignment,
    delete_assignment as crud_delete_assignment,
    list_class_assignments,
    update_assignment as crud_update_assignment,
)
from classroom_portal.features.assignments.helpers import (
    attach_creators,
    attach_submission_info,
    ensure_assignment_manager,
    get_assignment_or_404,
)
from classroom_portal.features.assignments.schemas import (
    AssignmentListResponse,
    AssignmentResponse,
    AssignmentUpdate,
    Visibility,
)
from classroom_portal.features.auth.permissions import require_staff_access, require_user_access
from classroom_portal.features.classes.crud import get_class_by_id
from classroom_portal.features.classes.helpers import (
    can_access_class,
    ensure_class_access,
    ensure_class_manager,
    get_class_or_404,
)
from classroom_portal.services.upload_to_blob import ASSIGNMENTS_FOLDER, upload_files

router = APIRouter()


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@router.post(
    "/classes/{class_id}/assignments",
    response_model=AssignmentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_assignment(
    class_id: str,
    title: str = Form(..., max_length=200),
    description: str = Form(...),
    due_at: datetime = Form(...),
    max_score: int = Form(100, ge=1),
    visibility: Visibility = Form("visible"),
    attachments: Optional[List[UploadFile]] = File(None),
    user: Dict = Depends(require_staff_access)
):
    """Create an assignment in a class, with up to 5 attached files."""
    if not title.strip():
        raise HTTPException(status_code=400, detail="Assignment title is required")
    if not description.strip():
        raise HTTPException(status_code=400, detail="Description is required")
    if _as_utc(due_at) <= datetime.now(timezone.utc):
        raise HTTPException(status_code=400, detail="Due date must be in the future")

    class_doc = get_class_or_404(class_id)
    ensure_class_manager(class_doc, user)

    uploaded = await upload_files(attachments, ASSIGNMENTS_FOLDER)
    uploaded_at = utc_now_iso()

    assignment = add_assignment({
        "class_id": class_id,
        "title": title.strip(),
        "description": description.strip(),
        "due_at": to_iso(due_at),
        "attachments": [{**file, "uploaded_at": uploaded_at} for file in uploaded],
        "created_by": user["id"],
        "visibility": visibility,
        "max_score": max_score,
    })
    return attach_creators([assignment])[0]


@router.get("/classes/{class_id}/assignments", response_model=AssignmentListResponse)
def fetch_class_assignments(
    class_id: str,
    q: Optional[str] = Query(None),
    status_filter: Optional[Literal["upcoming", "overdue"]] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: Dict = Depends(require_user_access)
):
    """
    List a class's assignments, soonest due first.

    Staff see a submission count on each assignment. Students see whether
    they have submitted, and never see hidden assignments.
    """
    class_doc = get_class_or_404(class_id)
    ensure_class_access(class_doc, user)

    assignments, pagination = list_class_assignments(
        class_id,
        q=q,
        status_filter=status_filter,
        include_hidden=user["role"] != "student",
        page=page,
        limit=limit,
    )
    attach_creators(assignments)
    attach_submission_info(assignments, user)
    return {"assignments": assignments, "pagination": pagination}


@router.get("/assignments/{assignment_id}", response_model=AssignmentResponse)
def fetch_assignment(
    assignment_id: str,
    user: Dict = Depends(require_user_access)
):
    assignment = get_assignment_or_404(assignment_id)
    class_doc = get_class_by_id(assignment["class_id"])

    if user["role"] != "admin" and (not class_doc or not can_access_class(class_doc, user)):
        raise HTTPException(status_code=403, detail="Access denied. You are not a member of this class.")
    if user["role"] == "student" and assignment.get("visibility") == "hidden":
        raise HTTPException(status_code=404, detail="Assignment not found")

    if class_doc:
        assignment["class_info"] = {
            "id": class_doc["id"],
            "title": class_doc.get("title"),
            "code": class_doc.get("code"),
        }
    return attach_creators([assignment])[0]


@router.patch("/assignments/{assignment_id}", response_model=AssignmentResponse)
def update_assignment(
    assignment_id: str,
    update_data: AssignmentUpdate,
    user: Dict = Depends(require_staff_access)
):
    assignment = get_assignment_or_404(assignment_id)
    ensure_assignment_manager(assignment, get_class_by_id(assignment["class_id"]), user)

    changes = update_data.model_dump(exclude_unset=True, exclude_none=True)
    if "due_at" in changes:
        changes["due_at"] = to_iso(changes["due_at"])
    if "title" in changes:
        changes["title"] = changes["title"].strip()

    updated = crud_update_assignment(assignment_id, changes)
    if not updated:
        raise HTTPException(status_code=404, detail="Assignment not found")
    return attach_creators([updated])[0]


@router.delete("/assignments/{assignment_id}", response_model=MessageResponse)
def delete_assignment(
    assignment_id: str,
    user: Dict = Depends(require_staff_access)
):
    assignment = get_assignment_or_404(assignment_id)
    ensure_assignment_manager(assignment, get_class_by_id(assignment["class_id"]), user)

    if not crud_delete_assignment(assignment_id):
        raise HTTPException(status_code=404, detail="Assignment not found")
    return {"message": "Assignment deleted successfully"}
