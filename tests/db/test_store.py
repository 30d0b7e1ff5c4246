from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from app.core.exceptions import StoreError
from app.db.store import ResourceStore
from app.schemas.resources import ResourceFilters

pytestmark = pytest.mark.asyncio


async def test_insert_sets_defaults_and_timestamps(store: ResourceStore) -> None:
    resource_id = await store.insert({"name": "first"})

    resource = await store.get_by_id(resource_id)

    assert resource is not None
    assert resource.name == "first"
    assert resource.status == "active"
    assert resource.description is None
    assert resource.created_at == resource.updated_at


async def test_insert_ignores_unknown_columns(store: ResourceStore) -> None:
    resource_id = await store.insert({"name": "n", "id": 999, "created_at": None})

    assert resource_id != 999


async def test_get_by_id_missing_returns_none(store: ResourceStore) -> None:
    assert await store.get_by_id(12345) is None


async def test_update_by_id_applies_pairs_and_bumps_updated_at(store: ResourceStore) -> None:
    resource_id = await store.insert({"name": "before", "category": "c1"})
    original = await store.get_by_id(resource_id)
    created_at = original.created_at

    affected = await store.update_by_id(resource_id, [("name", "after"), ("status", "archived")])
    resource = await store.get_by_id(resource_id)

    assert affected == 1
    assert resource.name == "after"
    assert resource.status == "archived"
    assert resource.category == "c1"
    assert resource.created_at == created_at
    assert resource.updated_at >= created_at


async def test_update_by_id_missing_row_affects_nothing(store: ResourceStore) -> None:
    assert await store.update_by_id(404, [("name", "x")]) == 0


async def test_update_by_id_rejects_unknown_fields(store: ResourceStore) -> None:
    resource_id = await store.insert({"name": "n"})

    with pytest.raises(ValueError):
        await store.update_by_id(resource_id, [("created_at", None)])


async def test_delete_by_id_reports_rows_affected(store: ResourceStore) -> None:
    resource_id = await store.insert({"name": "n"})

    assert await store.delete_by_id(resource_id) == 1
    assert await store.delete_by_id(resource_id) == 0
    assert await store.get_by_id(resource_id) is None


async def test_query_and_count_share_the_predicate(store: ResourceStore) -> None:
    for name, category in [("a", "x"), ("b", "y"), ("c", "x"), ("d", None)]:
        await store.insert({"name": name, "category": category})

    filters = ResourceFilters(category="x", limit=1)

    assert await store.count(filters) == 2
    assert [r.name for r in await store.query(filters)] == ["a"]


async def test_aggregates(store: ResourceStore) -> None:
    await store.insert({"name": "a", "category": "x", "status": "inactive"})
    await store.insert({"name": "b", "category": "x"})
    await store.insert({"name": "c"})

    assert await store.count_by_status() == {"active": 2, "inactive": 1}
    assert await store.count_by_category() == {"x": 2}


async def test_driver_errors_become_store_errors() -> None:
    session = AsyncMock()
    session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("disk I/O error"))
    store = ResourceStore(session)

    with pytest.raises(StoreError, match="Failed to fetch resource"):
        await store.get_by_id(1)

    session.rollback.assert_awaited_once()


async def test_ids_beyond_integer_range_match_no_row() -> None:
    session = AsyncMock()
    store = ResourceStore(session)
    too_large = 2**63

    assert await store.get_by_id(too_large) is None
    assert await store.update_by_id(too_large, [("name", "x")]) == 0
    assert await store.delete_by_id(too_large) == 0
    session.execute.assert_not_awaited()
