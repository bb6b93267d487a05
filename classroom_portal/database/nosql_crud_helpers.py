import math
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
from azure.cosmos import exceptions

ISO_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"

# Cosmos adds these to every stored document
SYSTEM_FIELDS = ("_rid", "_self", "_etag", "_attachments", "_ts")


def to_iso(value: datetime) -> str:
    """Fixed-width UTC timestamp, so string order matches time order."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(ISO_FORMAT)


def utc_now_iso() -> str:
    return to_iso(datetime.now(timezone.utc))


def new_id() -> str:
    return uuid.uuid4().hex


def clean_document(doc: Optional[Dict]) -> Optional[Dict]:
    if doc is None:
        return None
    return {key: value for key, value in doc.items() if key not in SYSTEM_FIELDS}


def query_items(container, query: str, parameters: Optional[List[Dict]] = None) -> List[Dict]:
    """Run a cross-partition query and return plain documents."""
    items = container.query_items(
        query=query,
        parameters=parameters or [],
        enable_cross_partition_query=True,
    )
    return [clean_document(item) if isinstance(item, dict) else item for item in items]


def query_one(container, query: str, parameters: Optional[List[Dict]] = None) -> Optional[Dict]:
    items = query_items(container, query, parameters)
    return items[0] if items else None


def count_items(container, where: str = "", parameters: Optional[List[Dict]] = None) -> int:
    query = "SELECT VALUE COUNT(1) FROM c"
    if where:
        query += f" WHERE {where}"
    result = query_items(container, query, parameters)
    return result[0] if result else 0


def fetch_all(container, order_by: str = "c.created_at DESC") -> List[Dict]:
    return query_items(container, f"SELECT * FROM c ORDER BY {order_by}")


def fetch_by_id(container, record_id: str) -> Optional[Dict]:
    try:
        return clean_document(container.read_item(item=record_id, partition_key=record_id))
    except exceptions.CosmosResourceNotFoundError:
        return None


def fetch_many_by_ids(container, record_ids: List[str], fields: Optional[List[str]] = None) -> Dict[str, Dict]:
    """Fetch documents by id in one query, keyed by id."""
    record_ids = list({record_id for record_id in record_ids if record_id})
    if not record_ids:
        return {}

    projection = "*"
    if fields:
        projection = ", ".join(f"c.{field}" for field in ["id", *fields])

    records = query_items(
        container,
        f"SELECT {projection} FROM c WHERE ARRAY_CONTAINS(@ids, c.id)",
        [{"name": "@ids", "value": record_ids}],
    )
    return {record["id"]: record for record in records}


def create_record(container, data: Dict[str, Any]) -> Dict:
    """
    Insert a new document and return it. An id and timestamps are added
    unless the caller supplies them.

    :raises CosmosResourceExistsError: if a document with the same id exists
    """
    now = utc_now_iso()
    doc = {"id": new_id(), "created_at": now, "updated_at": now, **data}
    return clean_document(container.create_item(body=doc))


def replace_record(container, record: Dict[str, Any]) -> Dict:
    record = {**record, "updated_at": utc_now_iso()}
    return clean_document(container.replace_item(item=record["id"], body=record))


def update_record(container, record_id: str, update_data: Dict[str, Any]) -> Optional[Dict]:
    """Merge update_data into an existing document. Returns None if missing."""
    existing = fetch_by_id(container, record_id)
    if not existing:
        return None
    existing.update(update_data)
    return replace_record(container, existing)


def delete_record(container, record_id: str) -> bool:
    try:
        container.delete_item(item=record_id, partition_key=record_id)
        return True
    except exceptions.CosmosResourceNotFoundError:
        return False


def build_pagination(total: int, page: int, limit: int) -> Dict[str, int]:
    return {
        "total": total,
        "page": page,
        "pages": math.ceil(total / limit) if limit else 0,
        "limit": limit,
    }


def paginate(
    container,
    where: str = "",
    parameters: Optional[List[Dict]] = None,
    order_by: str = "c.created_at DESC",
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[Dict], Dict[str, int]]:
    """
    Run a filtered, sorted query one page at a time.

    :returns: the page of documents and a pagination summary
        ``{total, page, pages, limit}``
    """
    parameters = list(parameters or [])
    where_clause = f" WHERE {where}" if where else ""
    query = (
        f"SELECT * FROM c{where_clause} ORDER BY {order_by} "
        "OFFSET @offset LIMIT @limit"
    )
    page_params = parameters + [
        {"name": "@offset", "value": (page - 1) * limit},
        {"name": "@limit", "value": limit},
    ]
    items = query_items(container, query, page_params)
    total = count_items(container, where, parameters)
    return items, build_pagination(total, page, limit)
