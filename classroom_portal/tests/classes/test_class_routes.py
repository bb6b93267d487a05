import pytest
from fastapi.testclient import TestClient
from unittest.mock import MagicMock, patch

from classroom_portal.app import application

client = TestClient(application)


@pytest.fixture
def mock_get_class(class_doc):
    with patch("classroom_portal.features.classes.helpers.get_class_by_id", return_value=class_doc) as mock_get:
        yield mock_get


@pytest.fixture
def mock_class_container():
    container = MagicMock()
    container.replace_item.side_effect = lambda item, body: body
    with patch("classroom_portal.features.classes.crud.get_container", return_value=container):
        yield container


def test_create_class_uppercases_code(teacher, teacher_headers):
    with patch("classroom_portal.features.classes.routes.get_class_by_code", return_value=None), \
         patch("classroom_portal.features.classes.routes.add_class") as mock_add:
        mock_add.side_effect = lambda data, teacher_id: {
            "id": "class-9", "members": [], "archived": False, "teacher_id": teacher_id, **data,
        }
        response = client.post(
            "/api/classes",
            json={"title": "Physics 201", "code": " phys201 ", "description": "Mechanics"},
            headers=teacher_headers,
        )

    assert response.status_code == 201
    data = response.json()
    assert data["code"] == "PHYS201"
    assert data["teacher_id"] == teacher["id"]


def test_create_class_duplicate_code(class_doc, teacher_headers):
    with patch("classroom_portal.features.classes.routes.get_class_by_code", return_value=class_doc), \
         patch("classroom_portal.features.classes.routes.add_class") as mock_add:
        response = client.post(
            "/api/classes",
            json={"title": "Another", "code": "math101"},
            headers=teacher_headers,
        )

    assert response.status_code == 400
    assert response.json() == {"error": "Class code already exists"}
    mock_add.assert_not_called()


def test_student_cannot_create_class(student_headers):
    response = client.post("/api/classes", json={"title": "Mine", "code": "MINE1"}, headers=student_headers)
    assert response.status_code == 403


def test_list_classes_uses_caller(student, student_headers):
    pagination = {"total": 0, "page": 1, "pages": 0, "limit": 10}
    with patch("classroom_portal.features.classes.routes.list_classes", return_value=([], pagination)) as mock_list:
        response = client.get("/api/classes?q=math", headers=student_headers)

    assert response.status_code == 200
    assert response.json() == {"classes": [], "pagination": pagination}
    mock_list.assert_called_once_with(student, q="math", page=1, limit=10)


def test_get_class_for_member(mock_get_class, student_headers):
    response = client.get("/api/classes/class-1", headers=student_headers)
    assert response.status_code == 200
    assert response.json()["code"] == "MATH101"


def test_get_class_for_non_member(mock_get_class, other_student_headers):
    response = client.get("/api/classes/class-1", headers=other_student_headers)
    assert response.status_code == 403


def test_get_missing_class(teacher_headers):
    with patch("classroom_portal.features.classes.helpers.get_class_by_id", return_value=None):
        response = client.get("/api/classes/nope", headers=teacher_headers)
    assert response.status_code == 404
    assert response.json() == {"error": "Class not found"}


def test_join_class_by_code(class_doc, other_student_headers):
    with patch("classroom_portal.features.classes.routes.get_class_by_code", return_value=class_doc), \
         patch("classroom_portal.features.classes.routes.add_member") as mock_add_member:
        mock_add_member.side_effect = lambda doc, user_id: {
            **doc, "members": doc["members"] + [{"user_id": user_id, "role_in_class": "student"}],
        }
        response = client.post("/api/classes/join", json={"code": "math101"}, headers=other_student_headers)

    assert response.status_code == 200
    assert [m["user_id"] for m in response.json()["members"]] == ["student-1", "student-2"]


def test_join_class_already_enrolled(class_doc, student_headers):
    with patch("classroom_portal.features.classes.routes.get_class_by_code", return_value=class_doc):
        response = client.post("/api/classes/join", json={"code": "MATH101"}, headers=student_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "You are already enrolled in this class"}


def test_join_class_unknown_code(student_headers):
    with patch("classroom_portal.features.classes.routes.get_class_by_code", return_value=None):
        response = client.post("/api/classes/join", json={"code": "NOPE"}, headers=student_headers)
    assert response.status_code == 404


def test_join_class_requires_code(student_headers):
    response = client.post("/api/classes/join", json={}, headers=student_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Class code is required"}


def test_enroll_by_other_teacher_is_forbidden(mock_get_class, other_teacher_headers):
    response = client.post("/api/classes/class-1/enroll", json={"student_id": "student-2"}, headers=other_teacher_headers)
    assert response.status_code == 403


def test_enroll_invalid_student(mock_get_class, teacher, teacher_headers):
    with patch("classroom_portal.features.classes.routes.get_user_by_id", return_value=teacher):
        response = client.post("/api/classes/class-1/enroll", json={"student_id": teacher["id"]}, headers=teacher_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid student ID"}


def test_enroll_already_enrolled(mock_get_class, student, teacher_headers):
    with patch("classroom_portal.features.classes.routes.get_user_by_id", return_value=student):
        response = client.post("/api/classes/class-1/enroll", json={"student_id": student["id"]}, headers=teacher_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Student already enrolled"}


def test_admin_can_remove_member(mock_get_class, class_doc, admin_headers):
    with patch("classroom_portal.features.classes.routes.remove_member") as mock_remove:
        mock_remove.return_value = {**class_doc, "members": []}
        response = client.delete("/api/classes/class-1/members/student-1", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["members"] == []
    mock_remove.assert_called_once_with(class_doc, "student-1")


def test_update_class(mock_get_class, class_doc, teacher_headers):
    with patch("classroom_portal.features.classes.routes.crud_update_class") as mock_update:
        mock_update.return_value = {**class_doc, "archived": True}
        response = client.patch("/api/classes/class-1", json={"archived": True}, headers=teacher_headers)

    assert response.status_code == 200
    assert response.json()["archived"] is True
    mock_update.assert_called_once_with("class-1", {"archived": True})


def test_update_class_ignores_nulls(mock_class_container, class_doc, teacher_headers):
    mock_class_container.read_item.return_value = dict(class_doc)

    response = client.patch(
        "/api/classes/class-1",
        json={"title": None, "archived": None, "description": "Updated"},
        headers=teacher_headers,
    )

    assert response.status_code == 200
    stored = mock_class_container.replace_item.call_args.kwargs["body"]
    assert stored["title"] == "Mathematics 101"
    assert stored["archived"] is False
    assert stored["description"] == "Updated"
    assert response.json()["title"] == "Mathematics 101"


def test_update_class_strips_title(mock_get_class, class_doc, teacher_headers):
    with patch("classroom_portal.features.classes.routes.crud_update_class") as mock_update:
        mock_update.return_value = {**class_doc, "title": "Algebra"}
        response = client.patch("/api/classes/class-1", json={"title": "  Algebra  "}, headers=teacher_headers)

    assert response.status_code == 200
    mock_update.assert_called_once_with("class-1", {"title": "Algebra"})


def test_update_class_rejects_blank_title(mock_get_class, teacher_headers):
    with patch("classroom_portal.features.classes.routes.crud_update_class") as mock_update:
        response = client.patch("/api/classes/class-1", json={"title": "   "}, headers=teacher_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "Validation failed"
    mock_update.assert_not_called()
