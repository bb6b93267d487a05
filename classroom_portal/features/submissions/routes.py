import logging
from typing import Dict, List, Optional
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status

from classroom_portal.database.nosql_crud_helpers import utc_now_iso
from classroom_portal.features.assignments.crud import get_assignment_by_id, get_assignments_by_creator
from classroom_portal.features.assignments.helpers import ensure_assignment_manager, get_assignment_or_404
from classroom_portal.features.auth.permissions import (
    require_staff_access,
    require_student_access,
    require_teacher_access,
    require_user_access,
)
from classroom_portal.features.classes.crud import get_class_by_id
from classroom_portal.features.classes.helpers import is_class_member
from classroom_portal.features.submissions.crud import (
    add_comment,
    grade_submission,
    list_assignment_submissions,
    list_student_submissions,
    list_submissions_for_assignments,
    save_submission,
)
from classroom_portal.features.submissions.helpers import (
    attach_assignments,
    attach_students,
    ensure_can_comment,
    ensure_grader,
    get_submission_or_404,
    submission_status_for,
)
from classroom_portal.features.submissions.schemas import (
    CommentRequest,
    GradeRequest,
    SubmissionCreatedResponse,
    SubmissionListResponse,
    SubmissionResponse,
    SubmissionStatus,
)
from classroom_portal.services.upload_to_blob import SUBMISSIONS_FOLDER, upload_files

logger = logging.getLogger(__name__)

router = APIRouter()


'''
*** STUDENT SUBMISSIONS ***
'''
@router.post(
    "/assignments/{assignment_id}/submissions",
    response_model=SubmissionCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_assignment(
    assignment_id: str,
    link: Optional[str] = Form(None),
    files: Optional[List[UploadFile]] = File(None),
    user: Dict = Depends(require_student_access)
):
    """
    Submit a link and/or up to 5 files for an assignment.

    Submitting again replaces the previous contents but keeps any grade,
    feedback and comments already on the submission.
    """
    assignment = get_assignment_by_id(assignment_id)
    if not assignment or assignment.get("visibility") == "hidden":
        raise HTTPException(status_code=404, detail="Assignment not found")

    class_doc = get_class_by_id(assignment["class_id"])
    if not class_doc or not is_class_member(class_doc, user["id"]):
        raise HTTPException(status_code=403, detail="You are not enrolled in this class")

    if assignment.get("locked"):
        raise HTTPException(status_code=400, detail="This assignment is locked and no longer accepts submissions")

    link = (link or "").strip()
    if not link and not any(file.filename for file in (files or [])):
        raise HTTPException(status_code=400, detail="Please provide a link or upload at least one file")

    link_or_files = []
    if link:
        link_or_files.append({"type": "link", "value": link})

    for uploaded in await upload_files(files, SUBMISSIONS_FOLDER):
        link_or_files.append({
            "type": "file",
            "value": uploaded["filename"],
            "path": uploaded["path"],
            "mimetype": uploaded["mimetype"],
            "size": uploaded["size"],
        })

    submission_status = submission_status_for(assignment["due_at"], utc_now_iso())
    submission = save_submission(assignment_id, user["id"], link_or_files, submission_status)
    return {"message": "Assignment submitted successfully", "submission": submission}


@router.get("/submissions/me", response_model=SubmissionListResponse)
def fetch_my_submissions(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: Dict = Depends(require_student_access)
):
    submissions, pagination = list_student_submissions(user["id"], page=page, limit=limit)
    attach_assignments(submissions)
    return {"submissions": submissions, "pagination": pagination}


'''
*** TEACHER REVIEW ***
'''
@router.get("/submissions/teacher", response_model=SubmissionListResponse)
def fetch_teacher_submissions(
    status_filter: Optional[SubmissionStatus] = Query(None, alias="status"),
    class_id: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    user: Dict = Depends(require_teacher_access)
):
    """Submissions to every assignment the teacher has created."""
    assignment_ids = [assignment["id"] for assignment in get_assignments_by_creator(user["id"], class_id)]
    submissions, pagination = list_submissions_for_assignments(
        assignment_ids, status=status_filter, page=page, limit=limit
    )
    attach_students(submissions)
    attach_assignments(submissions, with_class_title=True)
    return {"submissions": submissions, "pagination": pagination}


@router.get("/assignments/{assignment_id}/submissions", response_model=SubmissionListResponse)
def fetch_assignment_submissions(
    assignment_id: str,
    status_filter: Optional[SubmissionStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    user: Dict = Depends(require_staff_access)
):
    assignment = get_assignment_or_404(assignment_id)
    ensure_assignment_manager(assignment, get_class_by_id(assignment["class_id"]), user)

    submissions, pagination = list_assignment_submissions(
        assignment_id, status=status_filter, page=page, limit=limit
    )
    attach_students(submissions)
    return {"submissions": submissions, "pagination": pagination}


@router.patch("/submissions/{submission_id}/grade", response_model=SubmissionResponse)
def grade(
    submission_id: str,
    grade_data: GradeRequest,
    user: Dict = Depends(require_staff_access)
):
    submission = get_submission_or_404(submission_id)
    assignment = get_assignment_or_404(submission["assignment_id"])
    ensure_grader(get_class_by_id(assignment["class_id"]), user)

    max_score = assignment.get("max_score", 100)
    if grade_data.score > max_score:
        raise HTTPException(status_code=400, detail=f"Score cannot exceed the maximum score of {max_score}")

    graded = grade_submission(
        submission,
        score=grade_data.score,
        max_score=max_score,
        rubric=grade_data.rubric,
        feedback=grade_data.feedback,
    )
    logger.info("Submission %s graded %s/%s by %s", submission_id, grade_data.score, max_score, user["id"])
    return attach_students([graded])[0]


@router.post("/submissions/{submission_id}/comments", response_model=SubmissionResponse)
def comment(
    submission_id: str,
    comment_data: CommentRequest,
    user: Dict = Depends(require_user_access)
):
    submission = get_submission_or_404(submission_id)
    assignment = get_assignment_by_id(submission["assignment_id"])
    class_doc = get_class_by_id(assignment["class_id"]) if assignment else None
    ensure_can_comment(submission, class_doc, user)

    return add_comment(submission, user["id"], comment_data.text)
