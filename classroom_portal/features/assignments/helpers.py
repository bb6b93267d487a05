from typing import Dict, List
from fastapi import HTTPException, status

from classroom_portal.features.assignments.crud import get_assignment_by_id
from classroom_portal.features.classes.helpers import is_class_teacher
from classroom_portal.features.submissions.crud import (
    count_submissions_by_assignment,
    get_student_submission_statuses,
)
from classroom_portal.features.users.crud import get_user_summaries


def get_assignment_or_404(assignment_id: str) -> Dict:
    assignment = get_assignment_by_id(assignment_id)
    if not assignment:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assignment not found")
    return assignment


def can_manage_assignment(assignment: Dict, class_doc: Dict, user: Dict) -> bool:
    """Admins, the assignment's creator and the class teacher may change it."""
    if user.get("role") == "admin":
        return True
    if assignment.get("created_by") == user.get("id"):
        return True
    return class_doc is not None and is_class_teacher(class_doc, user)


def ensure_assignment_manager(assignment: Dict, class_doc: Dict, user: Dict):
    if not can_manage_assignment(assignment, class_doc, user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Only the owning teacher or an admin can change this assignment."
        )


def attach_creators(assignments: List[Dict]) -> List[Dict]:
    users = get_user_summaries([assignment.get("created_by") for assignment in assignments])
    for assignment in assignments:
        assignment["creator"] = users.get(assignment.get("created_by"))
    return assignments


def attach_submission_info(assignments: List[Dict], user: Dict) -> List[Dict]:
    """
    Staff get a submission count per assignment; students get their own
    submission state.
    """
    assignment_ids = [assignment["id"] for assignment in assignments]

    if user.get("role") in ("teacher", "admin"):
        counts = count_submissions_by_assignment(assignment_ids)
        for assignment in assignments:
            assignment["submission_count"] = counts.get(assignment["id"], 0)

    elif user.get("role") == "student":
        statuses = get_student_submission_statuses(user["id"], assignment_ids)
        for assignment in assignments:
            submission_status = statuses.get(assignment["id"])
            assignment["is_submitted"] = submission_status is not None
            assignment["submission_status"] = submission_status or "not_submitted"

    return assignments
