import logging
from typing import Dict, List, Optional
from classroom_portal.database.nosql_connection import ASSIGNMENTS_CONTAINER, get_container
from classroom_portal.database.nosql_crud_helpers import (
    count_items,
    create_record,
    delete_record,
    fetch_all,
    fetch_by_id,
    fetch_many_by_ids,
    paginate,
    query_items,
    update_record,
    utc_now_iso,
)

logger = logging.getLogger(__name__)


def add_assignment(data: Dict) -> Dict:
    assignment = create_record(get_container(ASSIGNMENTS_CONTAINER), {
        "class_id": data["class_id"],
        "title": data["title"],
        "description": data["description"],
        "due_at": data["due_at"],
        "attachments": data.get("attachments", []),
        "created_by": data["created_by"],
        "visibility": data.get("visibility") or "visible",
        "max_score": data.get("max_score") or 100,
        "locked": False,
    })
    logger.info("Created assignment %s in class %s", assignment["id"], assignment["class_id"])
    return assignment


def get_assignment_by_id(assignment_id: str) -> Optional[Dict]:
    return fetch_by_id(get_container(ASSIGNMENTS_CONTAINER), assignment_id)


def update_assignment(assignment_id: str, data: Dict) -> Optional[Dict]:
    return update_record(get_container(ASSIGNMENTS_CONTAINER), assignment_id, data)


def delete_assignment(assignment_id: str) -> bool:
    # Submissions to the assignment are left in place
    deleted = delete_record(get_container(ASSIGNMENTS_CONTAINER), assignment_id)
    if deleted:
        logger.info("Deleted assignment %s", assignment_id)
    return deleted


def list_class_assignments(
    class_id: str,
    q: Optional[str] = None,
    status_filter: Optional[str] = None,
    include_hidden: bool = True,
    page: int = 1,
    limit: int = 10,
):
    """
    Page through a class's assignments, soonest due first.

    :param q: case-insensitive search on the title
    :param status_filter: ``upcoming`` (due now or later) or ``overdue``
    :param include_hidden: False drops assignments with hidden visibility
    """
    conditions = ["c.class_id = @class_id"]
    params = [{"name": "@class_id", "value": class_id}]

    if q:
        conditions.append("CONTAINS(c.title, @q, true)")
        params.append({"name": "@q", "value": q})

    if status_filter in ("upcoming", "overdue"):
        operator = ">=" if status_filter == "upcoming" else "<"
        conditions.append(f"c.due_at {operator} @now")
        params.append({"name": "@now", "value": utc_now_iso()})

    if not include_hidden:
        conditions.append("c.visibility != 'hidden'")

    return paginate(
        get_container(ASSIGNMENTS_CONTAINER),
        where=" AND ".join(conditions),
        parameters=params,
        order_by="c.due_at ASC",
        page=page,
        limit=limit,
    )


def get_assignments_by_class(class_id: str) -> List[Dict]:
    return query_items(
        get_container(ASSIGNMENTS_CONTAINER),
        "SELECT * FROM c WHERE c.class_id = @class_id ORDER BY c.created_at DESC",
        [{"name": "@class_id", "value": class_id}],
    )


def get_assignments_by_classes(class_ids: List[str]) -> List[Dict]:
    if not class_ids:
        return []
    return query_items(
        get_container(ASSIGNMENTS_CONTAINER),
        "SELECT * FROM c WHERE ARRAY_CONTAINS(@class_ids, c.class_id)",
        [{"name": "@class_ids", "value": class_ids}],
    )


def get_assignments_by_creator(user_id: str, class_id: Optional[str] = None) -> List[Dict]:
    query = "SELECT * FROM c WHERE c.created_by = @user_id"
    params = [{"name": "@user_id", "value": user_id}]
    if class_id:
        query += " AND c.class_id = @class_id"
        params.append({"name": "@class_id", "value": class_id})
    query += " ORDER BY c.created_at DESC"
    return query_items(get_container(ASSIGNMENTS_CONTAINER), query, params)


def get_all_assignments() -> List[Dict]:
    return fetch_all(get_container(ASSIGNMENTS_CONTAINER))


def count_assignments() -> int:
    return count_items(get_container(ASSIGNMENTS_CONTAINER))


def get_assignment_created_dates() -> List[str]:
    return query_items(get_container(ASSIGNMENTS_CONTAINER), "SELECT VALUE c.created_at FROM c")


def get_assignment_summaries(assignment_ids: List[str]) -> Dict[str, Dict]:
    return fetch_many_by_ids(
        get_container(ASSIGNMENTS_CONTAINER),
        assignment_ids,
        fields=["title", "due_at", "max_score", "class_id"],
    )
