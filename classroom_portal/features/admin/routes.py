import logging
from typing import Dict, List
from fastapi import APIRouter, Depends, HTTPException, status

from classroom_portal.core.schemas import MessageResponse
from classroom_portal.features.admin.schemas import (
    AdminStatsResponse,
    AssignmentAnalyticsResponse,
    ClassAnalyticsResponse,
    UserAnalyticsResponse,
)
from classroom_portal.features.analytics.helpers import count_by_month
from classroom_portal.features.assignments.crud import (
    count_assignments,
    delete_assignment as crud_delete_assignment,
    get_all_assignments,
    get_assignment_created_dates,
    get_assignment_summaries,
    get_assignments_by_class,
    get_assignments_by_creator,
)
from classroom_portal.features.assignments.helpers import attach_creators
from classroom_portal.features.assignments.schemas import AssignmentResponse
from classroom_portal.features.auth.auth_helpers import hash_password
from classroom_portal.features.auth.permissions import require_admin_access
from classroom_portal.features.classes.crud import (
    attach_people,
    count_classes,
    delete_class as crud_delete_class,
    get_all_classes,
    get_class_created_dates,
    get_class_summaries,
    get_classes_by_student,
    get_classes_by_teacher,
)
from classroom_portal.features.classes.helpers import get_class_or_404
from classroom_portal.features.classes.schemas import ClassResponse
from classroom_portal.features.submissions.crud import (
    count_submissions,
    count_submissions_by_assignment,
    get_recent_student_submissions,
    get_submissions_by_assignments,
)
from classroom_portal.features.submissions.helpers import attach_assignments, attach_students
from classroom_portal.features.submissions.schemas import SubmissionResponse
from classroom_portal.features.users.crud import (
    count_users,
    create_user,
    delete_user as crud_delete_user,
    get_all_users,
    get_user_by_email,
    get_user_by_id,
    get_user_created_dates,
    get_users_by_role,
    update_user as crud_update_user,
)
from classroom_portal.features.users.schemas import UserCreate, UserResponse, UserUpdate

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_admin_access)])

RECENT_USERS_LIMIT = 10
USER_SUBMISSIONS_LIMIT = 20


def _get_user_or_404(user_id: str) -> Dict:
    user = get_user_by_id(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def _attach_class_info(assignments: List[Dict]) -> List[Dict]:
    classes = get_class_summaries([assignment.get("class_id") for assignment in assignments])
    for assignment in assignments:
        assignment["class_info"] = classes.get(assignment.get("class_id"))
    return assignments


@router.get("/stats", response_model=AdminStatsResponse)
def fetch_stats():
    return {
        "total_users": count_users(),
        "total_students": count_users("student"),
        "total_teachers": count_users("teacher"),
        "total_classes": count_classes(),
        "total_assignments": count_assignments(),
        "total_submissions": count_submissions(),
    }


'''
*** USERS ***
'''
@router.get("/users", response_model=List[UserResponse])
def fetch_users():
    return get_all_users()


@router.get("/users/recent", response_model=List[UserResponse])
def fetch_recent_users():
    return get_all_users(limit=RECENT_USERS_LIMIT)


@router.get("/users/{user_id}", response_model=UserResponse)
def fetch_user(user_id: str):
    return _get_user_or_404(user_id)


@router.get("/users/{user_id}/classes", response_model=List[ClassResponse])
def fetch_user_classes(user_id: str):
    """Classes a teacher owns, or classes a student is enrolled in."""
    user = _get_user_or_404(user_id)
    if user["role"] == "teacher":
        classes = get_classes_by_teacher(user_id)
    elif user["role"] == "student":
        classes = get_classes_by_student(user_id)
    else:
        classes = []
    return attach_people(classes)


@router.get("/users/{user_id}/assignments", response_model=List[AssignmentResponse])
def fetch_user_assignments(user_id: str):
    _get_user_or_404(user_id)
    return _attach_class_info(get_assignments_by_creator(user_id))


@router.get("/users/{user_id}/submissions", response_model=List[SubmissionResponse])
def fetch_user_submissions(user_id: str):
    _get_user_or_404(user_id)
    return attach_assignments(get_recent_student_submissions(user_id, limit=USER_SUBMISSIONS_LIMIT))


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_new_user(user_data: UserCreate):
    if get_user_by_email(user_data.email):
        raise HTTPException(status_code=400, detail="User with this email already exists")

    return create_user(
        name=user_data.name,
        email=user_data.email,
        password_hash=hash_password(user_data.password),
        role=user_data.role or "student",
    )


@router.put("/users/{user_id}", response_model=UserResponse)
def update_user(user_id: str, update_data: UserUpdate):
    user = _get_user_or_404(user_id)
    changes = update_data.model_dump(exclude_unset=True, exclude_none=True)
    if "name" in changes:
        changes["name"] = changes["name"].strip()
    if not changes:
        return user

    updated = crud_update_user(user_id, changes)
    if not updated:
        raise HTTPException(status_code=404, detail="User not found")
    return updated


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(user_id: str, admin: Dict = Depends(require_admin_access)):
    if user_id == admin["id"]:
        raise HTTPException(status_code=400, detail="Cannot delete your own account")

    # Classes, assignments and submissions referencing the user are kept
    if not crud_delete_user(user_id):
        raise HTTPException(status_code=404, detail="User not found")
    return {"message": "User deleted successfully"}


'''
*** CLASSES ***
'''
@router.get("/classes", response_model=List[ClassResponse])
def fetch_classes():
    return attach_people(get_all_classes())


@router.get("/classes/{class_id}", response_model=ClassResponse)
def fetch_class(class_id: str):
    return attach_people([get_class_or_404(class_id)])[0]


@router.get("/classes/{class_id}/assignments", response_model=List[AssignmentResponse])
def fetch_class_assignments(class_id: str):
    get_class_or_404(class_id)
    return attach_creators(get_assignments_by_class(class_id))


@router.get("/classes/{class_id}/submissions", response_model=List[SubmissionResponse])
def fetch_class_submissions(class_id: str):
    get_class_or_404(class_id)
    assignment_ids = [assignment["id"] for assignment in get_assignments_by_class(class_id)]
    submissions = get_submissions_by_assignments(assignment_ids)
    attach_students(submissions)
    return attach_assignments(submissions)


@router.delete("/classes/{class_id}", response_model=MessageResponse)
def delete_class(class_id: str):
    if not crud_delete_class(class_id):
        raise HTTPException(status_code=404, detail="Class not found")
    return {"message": "Class deleted successfully"}


'''
*** ASSIGNMENTS ***
'''
@router.get("/assignments", response_model=List[AssignmentResponse])
def fetch_assignments():
    assignments = get_all_assignments()
    _attach_class_info(assignments)
    return attach_creators(assignments)


@router.delete("/assignments/{assignment_id}", response_model=MessageResponse)
def delete_assignment(assignment_id: str):
    if not crud_delete_assignment(assignment_id):
        raise HTTPException(status_code=404, detail="Assignment not found")
    return {"message": "Assignment deleted successfully"}


'''
*** ANALYTICS ***
'''
@router.get("/analytics/users", response_model=UserAnalyticsResponse)
def fetch_user_analytics():
    return {
        "users_by_role": get_users_by_role(),
        "users_by_month": count_by_month(get_user_created_dates()),
    }


@router.get("/analytics/classes", response_model=ClassAnalyticsResponse)
def fetch_class_analytics():
    classes_with_student_count = [
        {
            "id": class_doc["id"],
            "title": class_doc["title"],
            "code": class_doc["code"],
            "student_count": sum(
                1 for member in class_doc.get("members", []) if member.get("role_in_class") == "student"
            ),
        }
        for class_doc in get_all_classes()
    ]
    return {
        "classes_by_month": count_by_month(get_class_created_dates()),
        "classes_with_student_count": classes_with_student_count,
    }


@router.get("/analytics/assignments", response_model=AssignmentAnalyticsResponse)
def fetch_assignment_analytics():
    """
    Monthly assignment creation and submission counts per assignment.
    Counts for deleted assignments are dropped.
    """
    counts = count_submissions_by_assignment()
    assignments = get_assignment_summaries(list(counts))

    submissions_by_assignment = [
        {"assignment_id": assignment_id, "title": assignments[assignment_id].get("title"), "count": count}
        for assignment_id, count in counts.items()
        if assignment_id in assignments
    ]
    submissions_by_assignment.sort(key=lambda row: row["count"], reverse=True)

    return {
        "assignments_by_month": count_by_month(get_assignment_created_dates()),
        "submissions_by_assignment": submissions_by_assignment,
    }
