from typing import Dict, List, Optional
from fastapi import HTTPException, status

from classroom_portal.features.assignments.crud import get_assignment_summaries
from classroom_portal.features.classes.crud import get_class_summaries
from classroom_portal.features.classes.helpers import can_manage_class
from classroom_portal.features.submissions.crud import get_submission_by_id
from classroom_portal.features.users.crud import get_user_summaries


def get_submission_or_404(submission_id: str) -> Dict:
    submission = get_submission_by_id(submission_id)
    if not submission:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Submission not found")
    return submission


def submission_status_for(due_at: str, submitted_at: str) -> str:
    """Both arguments are fixed-width ISO strings, so they compare as times."""
    return "late" if submitted_at > due_at else "submitted"


def ensure_grader(class_doc: Optional[Dict], user: Dict):
    if user.get("role") == "admin":
        return
    if not class_doc or not can_manage_class(class_doc, user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. You do not teach this class."
        )


def ensure_can_comment(submission: Dict, class_doc: Optional[Dict], user: Dict):
    if user.get("role") == "admin" or submission.get("student_id") == user.get("id"):
        return
    if class_doc and can_manage_class(class_doc, user):
        return
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Access denied. You cannot comment on this submission."
    )


def attach_students(submissions: List[Dict]) -> List[Dict]:
    users = get_user_summaries([submission.get("student_id") for submission in submissions])
    for submission in submissions:
        submission["student"] = users.get(submission.get("student_id"))
    return submissions


def attach_assignments(submissions: List[Dict], with_class_title: bool = False) -> List[Dict]:
    assignments = get_assignment_summaries([submission.get("assignment_id") for submission in submissions])

    classes = {}
    if with_class_title:
        classes = get_class_summaries([assignment.get("class_id") for assignment in assignments.values()])

    for submission in submissions:
        assignment = assignments.get(submission.get("assignment_id"))
        if assignment and with_class_title:
            class_doc = classes.get(assignment.get("class_id")) or {}
            assignment = {**assignment, "class_title": class_doc.get("title")}
        submission["assignment"] = assignment
    return submissions
