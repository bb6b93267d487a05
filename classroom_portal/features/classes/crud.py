import logging
from typing import Dict, List, Optional, Tuple
from classroom_portal.database.nosql_connection import CLASSES_CONTAINER, get_container
from classroom_portal.database.nosql_crud_helpers import (
    count_items,
    create_record,
    delete_record,
    fetch_all,
    fetch_by_id,
    fetch_many_by_ids,
    paginate,
    query_items,
    query_one,
    replace_record,
    update_record,
    utc_now_iso,
)
from classroom_portal.features.users.crud import get_user_summaries

logger = logging.getLogger(__name__)

SEARCH_CONDITION = "(CONTAINS(c.title, @q, true) OR CONTAINS(c.code, @q, true))"
MEMBER_CONDITION = "EXISTS(SELECT VALUE m FROM m IN c.members WHERE m.user_id = @user_id)"


'''
*** GET CLASSES ***
Role-conditional listing of classes
'''
def build_class_filter(user: Dict, q: Optional[str] = None) -> Tuple[str, List[Dict]]:
    """
    Build the WHERE clause for a user's class listing.

    Admins see everything, teachers see the classes they own, and students
    see the classes they are enrolled in. A search term lets a student look
    across all classes to find one to join.
    """
    conditions = []
    params = []
    role = user.get("role")

    if q:
        params.append({"name": "@q", "value": q})

    if role == "admin":
        if q:
            conditions.append(SEARCH_CONDITION)
    elif role == "teacher":
        conditions.append("c.teacher_id = @user_id")
        params.append({"name": "@user_id", "value": user["id"]})
        if q:
            conditions.append(SEARCH_CONDITION)
    else:
        if q:
            conditions.append(SEARCH_CONDITION)
        else:
            conditions.append(MEMBER_CONDITION)
            params.append({"name": "@user_id", "value": user["id"]})

    return " AND ".join(conditions), params


def list_classes(user: Dict, q: Optional[str] = None, page: int = 1, limit: int = 10):
    where, params = build_class_filter(user, q)
    classes, pagination = paginate(
        get_container(CLASSES_CONTAINER),
        where=where,
        parameters=params,
        order_by="c.created_at DESC",
        page=page,
        limit=limit,
    )
    return attach_people(classes), pagination


def get_all_classes() -> List[Dict]:
    return fetch_all(get_container(CLASSES_CONTAINER))


def get_classes_by_teacher(teacher_id: str) -> List[Dict]:
    return query_items(
        get_container(CLASSES_CONTAINER),
        "SELECT * FROM c WHERE c.teacher_id = @teacher_id ORDER BY c.created_at DESC",
        [{"name": "@teacher_id", "value": teacher_id}],
    )


def get_classes_by_student(student_id: str) -> List[Dict]:
    return query_items(
        get_container(CLASSES_CONTAINER),
        "SELECT * FROM c WHERE EXISTS(SELECT VALUE m FROM m IN c.members "
        "WHERE m.user_id = @user_id AND m.role_in_class = 'student') "
        "ORDER BY c.created_at DESC",
        [{"name": "@user_id", "value": student_id}],
    )


def count_classes() -> int:
    return count_items(get_container(CLASSES_CONTAINER))


def get_class_created_dates() -> List[str]:
    return query_items(get_container(CLASSES_CONTAINER), "SELECT VALUE c.created_at FROM c")


'''
*** GET CLASS BY ID / CODE ***
'''
def get_class_by_id(class_id: str) -> Optional[Dict]:
    return fetch_by_id(get_container(CLASSES_CONTAINER), class_id)


def get_class_by_code(code: str) -> Optional[Dict]:
    return query_one(
        get_container(CLASSES_CONTAINER),
        "SELECT * FROM c WHERE c.code = @code",
        [{"name": "@code", "value": code.strip().upper()}],
    )


def get_class_summaries(class_ids: List[str]) -> Dict[str, Dict]:
    return fetch_many_by_ids(
        get_container(CLASSES_CONTAINER),
        class_ids,
        fields=["title", "code", "teacher_id"],
    )


'''
*** CREATE / UPDATE / DELETE CLASS ***
'''
def add_class(data: Dict, teacher_id: str) -> Dict:
    created = create_record(get_container(CLASSES_CONTAINER), {
        "title": data["title"],
        "code": data["code"].upper(),
        "description": data.get("description"),
        "teacher_id": teacher_id,
        "members": [],
        "archived": False,
    })
    logger.info("Created class %s (%s)", created["id"], created["code"])
    return created


def update_class(class_id: str, data: Dict) -> Optional[Dict]:
    return update_record(get_container(CLASSES_CONTAINER), class_id, data)


def delete_class(class_id: str) -> bool:
    # TODO: remove the class's assignments and their submissions as well
    deleted = delete_record(get_container(CLASSES_CONTAINER), class_id)
    if deleted:
        logger.info("Deleted class %s", class_id)
    return deleted


'''
*** MEMBERSHIP ***
'''
def add_member(class_doc: Dict, user_id: str, role_in_class: str = "student") -> Dict:
    members = list(class_doc.get("members", []))
    members.append({
        "user_id": user_id,
        "role_in_class": role_in_class,
        "enrolled_at": utc_now_iso(),
    })
    return replace_record(get_container(CLASSES_CONTAINER), {**class_doc, "members": members})


def remove_member(class_doc: Dict, user_id: str) -> Dict:
    members = [member for member in class_doc.get("members", []) if member.get("user_id") != user_id]
    return replace_record(get_container(CLASSES_CONTAINER), {**class_doc, "members": members})


def attach_people(classes: List[Dict]) -> List[Dict]:
    """Attach teacher and member summaries (name, email) to each class."""
    user_ids = []
    for class_doc in classes:
        user_ids.append(class_doc.get("teacher_id"))
        user_ids.extend(member.get("user_id") for member in class_doc.get("members", []))

    users = get_user_summaries(user_ids)

    for class_doc in classes:
        class_doc["teacher"] = users.get(class_doc.get("teacher_id"))
        class_doc["members"] = [
            {**member, "user": users.get(member.get("user_id"))}
            for member in class_doc.get("members", [])
        ]
    return classes
