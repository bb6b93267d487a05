import logging
from collections import Counter
from typing import Any, Dict, List, Optional
from classroom_portal.database.nosql_connection import USERS_CONTAINER, get_container
from classroom_portal.database.nosql_crud_helpers import (
    count_items,
    create_record,
    delete_record,
    fetch_all,
    fetch_by_id,
    fetch_many_by_ids,
    query_items,
    query_one,
    update_record,
)

logger = logging.getLogger(__name__)


def public_user(user: Optional[Dict]) -> Optional[Dict]:
    """Strip the password hash from a user document."""
    if user is None:
        return None
    return {key: value for key, value in user.items() if key != "password_hash"}


def get_user_by_id(user_id: str, get_password: bool = False) -> Optional[Dict]:
    user = fetch_by_id(get_container(USERS_CONTAINER), user_id)
    return user if get_password else public_user(user)


def get_user_by_email(email: str, get_password: bool = False) -> Optional[Dict]:
    """
    Fetch a single user by email. Emails are stored lowercased.

    :param email: email address of the user
    :param get_password: True to include the password hash in the result
    """
    user = query_one(
        get_container(USERS_CONTAINER),
        "SELECT * FROM c WHERE c.email = @email",
        [{"name": "@email", "value": email.lower()}],
    )
    return user if get_password else public_user(user)


def create_user(
    name: str,
    email: str,
    password_hash: str,
    role: str = "student",
    profile: Optional[Dict[str, Any]] = None,
) -> Dict:
    user = create_record(get_container(USERS_CONTAINER), {
        "name": name,
        "email": email.lower(),
        "password_hash": password_hash,
        "role": role,
        "profile": profile or {},
    })
    logger.info("Created %s user %s", role, user["id"])
    return public_user(user)


def update_user(user_id: str, data: Dict[str, Any]) -> Optional[Dict]:
    return public_user(update_record(get_container(USERS_CONTAINER), user_id, data))


def delete_user(user_id: str) -> bool:
    deleted = delete_record(get_container(USERS_CONTAINER), user_id)
    if deleted:
        logger.info("Deleted user %s", user_id)
    return deleted


def get_all_users(limit: Optional[int] = None) -> List[Dict]:
    container = get_container(USERS_CONTAINER)
    if limit:
        users = query_items(
            container,
            "SELECT * FROM c ORDER BY c.created_at DESC OFFSET 0 LIMIT @limit",
            [{"name": "@limit", "value": limit}],
        )
    else:
        users = fetch_all(container)
    return [public_user(user) for user in users]


def count_users(role: Optional[str] = None) -> int:
    container = get_container(USERS_CONTAINER)
    if role:
        return count_items(container, "c.role = @role", [{"name": "@role", "value": role}])
    return count_items(container)


def get_user_summaries(user_ids: List[str]) -> Dict[str, Dict]:
    """Map user id -> {id, name, email} for attaching to other documents."""
    return fetch_many_by_ids(get_container(USERS_CONTAINER), user_ids, fields=["name", "email"])


def get_users_by_role() -> List[Dict]:
    """``{role, count}`` rows, counted from the projected roles."""
    roles = Counter(query_items(get_container(USERS_CONTAINER), "SELECT VALUE c.role FROM c"))
    return [{"role": role, "count": count} for role, count in sorted(roles.items())]


def get_user_created_dates() -> List[str]:
    return query_items(get_container(USERS_CONTAINER), "SELECT VALUE c.created_at FROM c")
