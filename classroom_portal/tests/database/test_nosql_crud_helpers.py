from datetime import datetime, timedelta, timezone

from azure.cosmos import exceptions
from unittest.mock import MagicMock

from classroom_portal.database.nosql_crud_helpers import (
    build_pagination,
    clean_document,
    fetch_by_id,
    fetch_many_by_ids,
    paginate,
    to_iso,
    update_record,
)


def test_to_iso_is_fixed_width_utc():
    local = datetime(2024, 5, 1, 14, 30, tzinfo=timezone(timedelta(hours=2)))
    assert to_iso(local) == "2024-05-01T12:30:00.000000Z"
    assert to_iso(datetime(2024, 5, 1)) == "2024-05-01T00:00:00.000000Z"


def test_clean_document_drops_cosmos_fields():
    assert clean_document({"id": "1", "_rid": "x", "_etag": "y", "_ts": 1}) == {"id": "1"}


def test_build_pagination():
    assert build_pagination(21, 2, 10) == {"total": 21, "page": 2, "pages": 3, "limit": 10}
    assert build_pagination(0, 1, 10)["pages"] == 0


def test_fetch_by_id_missing_returns_none():
    container = MagicMock()
    container.read_item.side_effect = exceptions.CosmosResourceNotFoundError(message="missing")
    assert fetch_by_id(container, "nope") is None


def test_fetch_many_by_ids_skips_blank_ids():
    container = MagicMock()
    container.query_items.return_value = [{"id": "u1", "name": "One"}]

    result = fetch_many_by_ids(container, ["u1", None, "u1"], fields=["name"])

    assert result == {"u1": {"id": "u1", "name": "One"}}
    kwargs = container.query_items.call_args.kwargs
    assert kwargs["query"].startswith("SELECT c.id, c.name FROM c")
    assert kwargs["parameters"] == [{"name": "@ids", "value": ["u1"]}]


def test_fetch_many_by_ids_without_ids():
    container = MagicMock()
    assert fetch_many_by_ids(container, [None]) == {}
    container.query_items.assert_not_called()


def test_paginate_queries_page_and_total():
    container = MagicMock()
    container.query_items.side_effect = [[{"id": "a"}], [11]]

    items, pagination = paginate(
        container,
        where="c.class_id = @class_id",
        parameters=[{"name": "@class_id", "value": "class-1"}],
        page=2,
        limit=5,
    )

    assert items == [{"id": "a"}]
    assert pagination == {"total": 11, "page": 2, "pages": 3, "limit": 5}
    page_call, count_call = container.query_items.call_args_list
    assert "OFFSET @offset LIMIT @limit" in page_call.kwargs["query"]
    assert count_call.kwargs["query"] == "SELECT VALUE COUNT(1) FROM c WHERE c.class_id = @class_id"


def test_update_record_merges():
    container = MagicMock()
    container.read_item.return_value = {"id": "1", "title": "Old", "locked": False}
    container.replace_item.side_effect = lambda item, body: body

    updated = update_record(container, "1", {"locked": True})

    assert updated["title"] == "Old"
    assert updated["locked"] is True
    assert updated["updated_at"].endswith("Z")
