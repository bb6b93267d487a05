from unittest.mock import patch

import pytest

from classroom_portal.features.auth.jwt_handler import create_jwt_token

STUDENT = {"id": "student-1", "name": "Student One", "email": "student1@demo.com", "role": "student", "profile": {}}
OTHER_STUDENT = {"id": "student-2", "name": "Student Two", "email": "student2@demo.com", "role": "student", "profile": {}}
TEACHER = {"id": "teacher-1", "name": "Teacher One", "email": "teacher1@demo.com", "role": "teacher", "profile": {}}
OTHER_TEACHER = {"id": "teacher-2", "name": "Teacher Two", "email": "teacher2@demo.com", "role": "teacher", "profile": {}}
ADMIN = {"id": "admin-1", "name": "System Administrator", "email": "admin@demo.com", "role": "admin", "profile": {}}

USERS = {user["id"]: user for user in (STUDENT, OTHER_STUDENT, TEACHER, OTHER_TEACHER, ADMIN)}


def auth_headers(user):
    token = create_jwt_token({"user_id": user["id"], "email": user["email"], "role": user["role"]})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(autouse=True)
def known_users():
    """Resolve bearer tokens against the in-memory users above."""
    with patch(
        "classroom_portal.features.auth.permissions.get_user_by_id",
        side_effect=lambda user_id: USERS.get(user_id),
    ) as mock_get_user:
        yield mock_get_user


@pytest.fixture(autouse=True)
def no_enrichment_lookups():
    """Summary lookups that only decorate responses return nothing."""
    with patch("classroom_portal.features.classes.crud.get_user_summaries", return_value={}), \
         patch("classroom_portal.features.assignments.helpers.get_user_summaries", return_value={}), \
         patch("classroom_portal.features.submissions.helpers.get_user_summaries", return_value={}), \
         patch("classroom_portal.features.submissions.helpers.get_assignment_summaries", return_value={}), \
         patch("classroom_portal.features.submissions.helpers.get_class_summaries", return_value={}):
        yield


@pytest.fixture
def student():
    return dict(STUDENT)


@pytest.fixture
def teacher():
    return dict(TEACHER)


@pytest.fixture
def admin():
    return dict(ADMIN)


@pytest.fixture
def student_headers():
    return auth_headers(STUDENT)


@pytest.fixture
def other_student_headers():
    return auth_headers(OTHER_STUDENT)


@pytest.fixture
def teacher_headers():
    return auth_headers(TEACHER)


@pytest.fixture
def other_teacher_headers():
    return auth_headers(OTHER_TEACHER)


@pytest.fixture
def admin_headers():
    return auth_headers(ADMIN)


@pytest.fixture
def class_doc():
    return {
        "id": "class-1",
        "title": "Mathematics 101",
        "code": "MATH101",
        "description": "Algebra and geometry",
        "teacher_id": TEACHER["id"],
        "members": [
            {"user_id": STUDENT["id"], "role_in_class": "student", "enrolled_at": "2024-09-01T10:00:00.000000Z"},
        ],
        "archived": False,
        "created_at": "2024-09-01T09:00:00.000000Z",
        "updated_at": "2024-09-01T09:00:00.000000Z",
    }


@pytest.fixture
def assignment_doc():
    return {
        "id": "assignment-1",
        "class_id": "class-1",
        "title": "Homework 1",
        "description": "Solve the exercises in chapter 1",
        "due_at": "2999-01-01T00:00:00.000000Z",
        "attachments": [],
        "created_by": TEACHER["id"],
        "visibility": "visible",
        "max_score": 100,
        "locked": False,
        "created_at": "2024-09-02T09:00:00.000000Z",
        "updated_at": "2024-09-02T09:00:00.000000Z",
    }


@pytest.fixture
def submission_doc():
    return {
        "id": "assignment-1-student-1",
        "assignment_id": "assignment-1",
        "student_id": STUDENT["id"],
        "link_or_files": [{"type": "link", "value": "https://example.com/work"}],
        "submitted_at": "2024-09-03T09:00:00.000000Z",
        "status": "submitted",
        "grade": None,
        "feedback": None,
        "comments": [],
        "created_at": "2024-09-03T09:00:00.000000Z",
        "updated_at": "2024-09-03T09:00:00.000000Z",
    }
