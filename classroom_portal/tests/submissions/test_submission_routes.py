import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, patch

from classroom_portal.app import application

client = TestClient(application)

ROUTES = "classroom_portal.features.submissions.routes"


@pytest.fixture
def mock_lookups(class_doc, assignment_doc, submission_doc):
    with patch(f"{ROUTES}.get_assignment_by_id", return_value=assignment_doc), \
         patch("classroom_portal.features.assignments.helpers.get_assignment_by_id", return_value=assignment_doc), \
         patch(f"{ROUTES}.get_class_by_id", return_value=class_doc), \
         patch("classroom_portal.features.submissions.helpers.get_submission_by_id", return_value=submission_doc):
        yield


@pytest.fixture
def mock_save():
    with patch(f"{ROUTES}.save_submission") as mock_save_submission:
        mock_save_submission.side_effect = lambda assignment_id, student_id, link_or_files, status: {
            "id": f"{assignment_id}-{student_id}",
            "assignment_id": assignment_id,
            "student_id": student_id,
            "link_or_files": link_or_files,
            "status": status,
        }
        yield mock_save_submission


def test_submit_link(mock_lookups, mock_save, student_headers):
    response = client.post(
        "/api/assignments/assignment-1/submissions",
        data={"link": "https://example.com/essay"},
        headers=student_headers,
    )

    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "Assignment submitted successfully"
    assert data["submission"]["id"] == "assignment-1-student-1"
    assert data["submission"]["status"] == "submitted"
    assert data["submission"]["link_or_files"] == [
        {"type": "link", "value": "https://example.com/essay", "path": None, "mimetype": None, "size": None},
    ]


def test_submit_files(mock_lookups, mock_save, student_headers):
    uploaded = [{"filename": "essay.pdf", "path": "https://blob/submissions/essay.pdf", "mimetype": "application/pdf", "size": 4}]
    with patch(f"{ROUTES}.upload_files", new=AsyncMock(return_value=uploaded)) as mock_upload:
        response = client.post(
            "/api/assignments/assignment-1/submissions",
            files=[("files", ("essay.pdf", b"%PDF", "application/pdf"))],
            headers=student_headers,
        )

    assert response.status_code == 201
    [item] = response.json()["submission"]["link_or_files"]
    assert item["type"] == "file"
    assert item["value"] == "essay.pdf"
    assert item["path"] == "https://blob/submissions/essay.pdf"
    assert mock_upload.await_args.args[1] == "submissions"


def test_submit_after_due_date_is_late(mock_lookups, mock_save, assignment_doc, student_headers):
    assignment_doc["due_at"] = "2000-01-01T00:00:00.000000Z"
    response = client.post(
        "/api/assignments/assignment-1/submissions",
        data={"link": "https://example.com/essay"},
        headers=student_headers,
    )
    assert response.status_code == 201
    assert mock_save.call_args.args[3] == "late"


def test_submit_requires_enrollment(mock_lookups, mock_save, other_student_headers):
    response = client.post(
        "/api/assignments/assignment-1/submissions",
        data={"link": "https://example.com/essay"},
        headers=other_student_headers,
    )
    assert response.status_code == 403
    mock_save.assert_not_called()


def test_submit_locked_assignment(mock_lookups, mock_save, assignment_doc, student_headers):
    assignment_doc["locked"] = True
    response = client.post(
        "/api/assignments/assignment-1/submissions",
        data={"link": "https://example.com/essay"},
        headers=student_headers,
    )
    assert response.status_code == 400
    mock_save.assert_not_called()


def test_submit_nothing(mock_lookups, mock_save, student_headers):
    response = client.post(
        "/api/assignments/assignment-1/submissions",
        data={"link": "   "},
        headers=student_headers,
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Please provide a link or upload at least one file"}


def test_submit_missing_assignment(mock_save, student_headers):
    with patch(f"{ROUTES}.get_assignment_by_id", return_value=None):
        response = client.post(
            "/api/assignments/nope/submissions",
            data={"link": "https://example.com/essay"},
            headers=student_headers,
        )
    assert response.status_code == 404


def test_teacher_cannot_submit(mock_lookups, teacher_headers):
    response = client.post(
        "/api/assignments/assignment-1/submissions",
        data={"link": "https://example.com/essay"},
        headers=teacher_headers,
    )
    assert response.status_code == 403


def test_list_assignment_submissions(mock_lookups, submission_doc, teacher_headers):
    pagination = {"total": 1, "page": 1, "pages": 1, "limit": 20}
    with patch(f"{ROUTES}.list_assignment_submissions", return_value=([submission_doc], pagination)) as mock_list:
        response = client.get("/api/assignments/assignment-1/submissions?status=late", headers=teacher_headers)

    assert response.status_code == 200
    assert response.json()["submissions"][0]["id"] == "assignment-1-student-1"
    mock_list.assert_called_once_with("assignment-1", status="late", page=1, limit=20)


def test_list_assignment_submissions_other_teacher(mock_lookups, other_teacher_headers):
    response = client.get("/api/assignments/assignment-1/submissions", headers=other_teacher_headers)
    assert response.status_code == 403


def test_my_submissions(submission_doc, student, student_headers):
    pagination = {"total": 1, "page": 1, "pages": 1, "limit": 10}
    with patch(f"{ROUTES}.list_student_submissions", return_value=([submission_doc], pagination)) as mock_list:
        response = client.get("/api/submissions/me", headers=student_headers)

    assert response.status_code == 200
    assert len(response.json()["submissions"]) == 1
    mock_list.assert_called_once_with(student["id"], page=1, limit=10)


def test_teacher_submissions_without_assignments(teacher_headers):
    with patch(f"{ROUTES}.get_assignments_by_creator", return_value=[]):
        response = client.get("/api/submissions/teacher", headers=teacher_headers)

    assert response.status_code == 200
    assert response.json() == {
        "submissions": [],
        "pagination": {"total": 0, "page": 1, "pages": 0, "limit": 50},
    }


def test_grade_submission(mock_lookups, submission_doc, teacher_headers):
    with patch(f"{ROUTES}.grade_submission") as mock_grade:
        mock_grade.return_value = {
            **submission_doc,
            "status": "graded",
            "grade": {"score": 88, "max": 100, "rubric": None},
            "feedback": "Nice work",
        }
        response = client.patch(
            "/api/submissions/assignment-1-student-1/grade",
            json={"score": 88, "feedback": "Nice work"},
            headers=teacher_headers,
        )

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "graded"
    assert data["grade"]["score"] == 88
    assert mock_grade.call_args.kwargs["max_score"] == 100


def test_grade_above_max_score(mock_lookups, teacher_headers):
    with patch(f"{ROUTES}.grade_submission") as mock_grade:
        response = client.patch(
            "/api/submissions/assignment-1-student-1/grade",
            json={"score": 101},
            headers=teacher_headers,
        )
    assert response.status_code == 400
    assert response.json() == {"error": "Score cannot exceed the maximum score of 100"}
    mock_grade.assert_not_called()


def test_grade_negative_score(mock_lookups, teacher_headers):
    response = client.patch(
        "/api/submissions/assignment-1-student-1/grade",
        json={"score": -1},
        headers=teacher_headers,
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Validation failed"


def test_grade_by_other_teacher(mock_lookups, other_teacher_headers):
    response = client.patch(
        "/api/submissions/assignment-1-student-1/grade",
        json={"score": 50},
        headers=other_teacher_headers,
    )
    assert response.status_code == 403


def test_comment_by_submitter(mock_lookups, submission_doc, student, student_headers):
    with patch(f"{ROUTES}.add_comment") as mock_comment:
        mock_comment.return_value = {
            **submission_doc,
            "comments": [{"author_id": student["id"], "text": "Done", "created_at": "2024-09-03T10:00:00.000000Z"}],
        }
        response = client.post(
            "/api/submissions/assignment-1-student-1/comments",
            json={"text": " Done "},
            headers=student_headers,
        )

    assert response.status_code == 200
    assert response.json()["comments"][0]["text"] == "Done"
    mock_comment.assert_called_once_with(submission_doc, student["id"], "Done")


def test_comment_by_another_student(mock_lookups, other_student_headers):
    response = client.post(
        "/api/submissions/assignment-1-student-1/comments",
        json={"text": "Hello"},
        headers=other_student_headers,
    )
    assert response.status_code == 403


def test_comment_on_missing_submission(student_headers):
    with patch("classroom_portal.features.submissions.helpers.get_submission_by_id", return_value=None):
        response = client.post(
            "/api/submissions/nope/comments",
            json={"text": "Hello"},
            headers=student_headers,
        )
    assert response.status_code == 404
    assert response.json() == {"error": "Submission not found"}
