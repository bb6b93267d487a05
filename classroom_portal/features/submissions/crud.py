import logging
from collections import Counter
from typing import Dict, List, Optional
from azure.cosmos import exceptions
from classroom_portal.database.nosql_connection import SUBMISSIONS_CONTAINER, get_container
from classroom_portal.database.nosql_crud_helpers import (
    build_pagination,
    count_items,
    create_record,
    fetch_by_id,
    paginate,
    query_items,
    replace_record,
    utc_now_iso,
)

logger = logging.getLogger(__name__)


def submission_id_for(assignment_id: str, student_id: str) -> str:
    """
    Submissions are keyed by the (assignment, student) pair, so Cosmos
    rejects a second document for the same pair.
    """
    return f"{assignment_id}-{student_id}"


def get_submission_by_id(submission_id: str) -> Optional[Dict]:
    return fetch_by_id(get_container(SUBMISSIONS_CONTAINER), submission_id)


def get_submission_for_student(assignment_id: str, student_id: str) -> Optional[Dict]:
    return get_submission_by_id(submission_id_for(assignment_id, student_id))


def save_submission(assignment_id: str, student_id: str, link_or_files: List[Dict], status: str) -> Dict:
    """
    Create the student's submission, or overwrite its contents if one exists.
    Grade, feedback and comments on an existing submission are kept.
    """
    container = get_container(SUBMISSIONS_CONTAINER)
    submission_id = submission_id_for(assignment_id, student_id)
    content = {
        "link_or_files": link_or_files,
        "submitted_at": utc_now_iso(),
        "status": status,
    }

    existing = fetch_by_id(container, submission_id)
    if not existing:
        try:
            created = create_record(container, {
                "id": submission_id,
                "assignment_id": assignment_id,
                "student_id": student_id,
                "grade": None,
                "feedback": None,
                "comments": [],
                **content,
            })
            logger.info("Student %s submitted assignment %s", student_id, assignment_id)
            return created
        except exceptions.CosmosResourceExistsError:
            # Lost a race with a concurrent first submission; overwrite it.
            existing = fetch_by_id(container, submission_id)

    logger.info("Student %s resubmitted assignment %s", student_id, assignment_id)
    return replace_record(container, {**existing, **content})


def grade_submission(submission: Dict, score: float, max_score: int,
                     rubric: Optional[str] = None, feedback: Optional[str] = None) -> Dict:
    graded = {
        **submission,
        "grade": {"score": score, "max": max_score, "rubric": rubric},
        "feedback": feedback,
        "status": "graded",
    }
    return replace_record(get_container(SUBMISSIONS_CONTAINER), graded)


def add_comment(submission: Dict, author_id: str, text: str) -> Dict:
    comments = list(submission.get("comments") or [])
    comments.append({"author_id": author_id, "text": text, "created_at": utc_now_iso()})
    return replace_record(get_container(SUBMISSIONS_CONTAINER), {**submission, "comments": comments})


def list_assignment_submissions(assignment_id: str, status: Optional[str] = None,
                                page: int = 1, limit: int = 20):
    return list_submissions_for_assignments([assignment_id], status=status, page=page, limit=limit)


def list_submissions_for_assignments(assignment_ids: List[str], status: Optional[str] = None,
                                     page: int = 1, limit: int = 50):
    if not assignment_ids:
        return [], build_pagination(0, page, limit)

    conditions = ["ARRAY_CONTAINS(@assignment_ids, c.assignment_id)"]
    params = [{"name": "@assignment_ids", "value": assignment_ids}]
    if status:
        conditions.append("c.status = @status")
        params.append({"name": "@status", "value": status})

    return paginate(
        get_container(SUBMISSIONS_CONTAINER),
        where=" AND ".join(conditions),
        parameters=params,
        order_by="c.submitted_at DESC",
        page=page,
        limit=limit,
    )


def list_student_submissions(student_id: str, page: int = 1, limit: int = 10):
    return paginate(
        get_container(SUBMISSIONS_CONTAINER),
        where="c.student_id = @student_id",
        parameters=[{"name": "@student_id", "value": student_id}],
        order_by="c.submitted_at DESC",
        page=page,
        limit=limit,
    )


def get_recent_student_submissions(student_id: str, limit: int = 20) -> List[Dict]:
    submissions, _ = list_student_submissions(student_id, page=1, limit=limit)
    return submissions


def get_submissions_by_assignments(assignment_ids: List[str]) -> List[Dict]:
    if not assignment_ids:
        return []
    return query_items(
        get_container(SUBMISSIONS_CONTAINER),
        "SELECT * FROM c WHERE ARRAY_CONTAINS(@assignment_ids, c.assignment_id) "
        "ORDER BY c.created_at DESC",
        [{"name": "@assignment_ids", "value": assignment_ids}],
    )


def count_submissions(assignment_ids: Optional[List[str]] = None, status: Optional[str] = None) -> int:
    conditions = []
    params = []
    if assignment_ids is not None:
        if not assignment_ids:
            return 0
        conditions.append("ARRAY_CONTAINS(@assignment_ids, c.assignment_id)")
        params.append({"name": "@assignment_ids", "value": assignment_ids})
    if status:
        conditions.append("c.status = @status")
        params.append({"name": "@status", "value": status})
    return count_items(get_container(SUBMISSIONS_CONTAINER), " AND ".join(conditions), params)


def count_submissions_by_assignment(assignment_ids: Optional[List[str]] = None) -> Dict[str, int]:
    """
    Map assignment id -> number of submissions. Cross-partition GROUP BY is
    not available through the SDK, so the ids are counted here.
    """
    query = "SELECT VALUE c.assignment_id FROM c"
    params = []
    if assignment_ids is not None:
        if not assignment_ids:
            return {}
        query += " WHERE ARRAY_CONTAINS(@assignment_ids, c.assignment_id)"
        params.append({"name": "@assignment_ids", "value": assignment_ids})

    return dict(Counter(query_items(get_container(SUBMISSIONS_CONTAINER), query, params)))


def get_student_submission_statuses(student_id: str, assignment_ids: List[str]) -> Dict[str, str]:
    """Map assignment id -> status of the student's submission."""
    if not assignment_ids:
        return {}
    rows = query_items(
        get_container(SUBMISSIONS_CONTAINER),
        "SELECT c.assignment_id, c.status FROM c "
        "WHERE c.student_id = @student_id AND ARRAY_CONTAINS(@assignment_ids, c.assignment_id)",
        [
            {"name": "@student_id", "value": student_id},
            {"name": "@assignment_ids", "value": assignment_ids},
        ],
    )
    return {row["assignment_id"]: row["status"] for row in rows}


def get_graded_scores(assignment_ids: List[str]) -> List[float]:
    if not assignment_ids:
        return []
    return query_items(
        get_container(SUBMISSIONS_CONTAINER),
        "SELECT VALUE c.grade.score FROM c "
        "WHERE ARRAY_CONTAINS(@assignment_ids, c.assignment_id) AND c.status = 'graded'",
        [{"name": "@assignment_ids", "value": assignment_ids}],
    )
