import asyncio

import pytest

from taxonomy_admin.schemas.outcome import OutcomeStatus
from taxonomy_admin.services.hierarchy_cache import HierarchyCache
from taxonomy_admin.services.workspace import TaxonomyWorkspace
from taxonomy_admin.store.base import Row, StoreFailure, StoreOperation, Table

from conftest import FakeStore


class GatedStore(FakeStore):
    """Holds the first categories fetch until ``gate`` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.gate = asyncio.Event()
        self.entered = asyncio.Event()
        self._held = False

    async def list_all(self, table: Table, order_by: str = "name") -> list[Row]:
        rows = await super().list_all(table, order_by)
        if table == Table.CATEGORIES and not self._held:
            self._held = True
            self.entered.set()
            await self.gate.wait()
        return rows


@pytest.mark.asyncio
async def test_refresh_builds_tree_from_both_tables(fake_store: FakeStore) -> None:
    decals = fake_store.seed(Table.CATEGORIES, name="Decals")
    fake_store.seed(Table.CATEGORIES, name="Art")
    fake_store.seed(Table.SUBCATEGORIES, name="Wall Decals", category_id=decals["id"])
    fake_store.seed(Table.SUBCATEGORIES, name="Car Decals", category_id=decals["id"])

    cache = HierarchyCache(fake_store)
    snapshot = await cache.refresh()

    assert [item.name for item in snapshot.categories] == ["Art", "Decals"]
    node = snapshot.find_category(decals["id"])
    assert [sub.name for sub in node.subcategories] == ["Car Decals", "Wall Decals"]
    assert cache.snapshot == snapshot
    assert fake_store.calls == [
        (StoreOperation.LIST, Table.CATEGORIES),
        (StoreOperation.LIST, Table.SUBCATEGORIES),
    ]


@pytest.mark.asyncio
async def test_failed_fetch_keeps_previous_snapshot(fake_store: FakeStore) -> None:
    fake_store.seed(Table.CATEGORIES, name="Decals")
    cache = HierarchyCache(fake_store)
    before = await cache.refresh()

    fake_store.seed(Table.CATEGORIES, name="Posters")
    fake_store.fail(StoreOperation.LIST, Table.SUBCATEGORIES, "network down")

    with pytest.raises(StoreFailure) as exc_info:
        await cache.refresh()

    assert exc_info.value.detail == "network down"
    assert cache.snapshot == before
    assert [item.name for item in cache.snapshot.categories] == ["Decals"]
    assert cache.loading is False


@pytest.mark.asyncio
async def test_malformed_rows_fail_the_whole_refresh(fake_store: FakeStore) -> None:
    fake_store.seed(Table.CATEGORIES, name="Decals")
    cache = HierarchyCache(fake_store)
    await cache.refresh()

    fake_store.rows[Table.SUBCATEGORIES]["bad"] = {"id": None, "name": "aaa", "category_id": "c"}

    with pytest.raises(StoreFailure) as exc_info:
        await cache.refresh()

    assert exc_info.value.table == Table.SUBCATEGORIES
    assert [item.name for item in cache.snapshot.categories] == ["Decals"]


@pytest.mark.asyncio
async def test_loading_flag_tracks_in_flight_refresh() -> None:
    store = GatedStore()
    cache = HierarchyCache(store)

    task = asyncio.create_task(cache.refresh())
    await store.entered.wait()
    assert cache.loading is True

    store.gate.set()
    await task
    assert cache.loading is False


@pytest.mark.asyncio
async def test_superseded_refresh_is_discarded() -> None:
    store = GatedStore()
    store.seed(Table.CATEGORIES, name="Old")
    cache = HierarchyCache(store)

    stale = asyncio.create_task(cache.refresh())
    await store.entered.wait()

    store.rows[Table.CATEGORIES].clear()
    store.seed(Table.CATEGORIES, name="New")
    await cache.refresh()

    store.gate.set()
    await stale

    assert [item.name for item in cache.snapshot.categories] == ["New"]


class HeldSubcategoriesStore(FakeStore):
    """Holds the first subcategories fetch until ``gate`` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.gate = asyncio.Event()
        self.entered = asyncio.Event()
        self._held = False

    async def list_all(self, table: Table, order_by: str = "name") -> list[Row]:
        rows = await super().list_all(table, order_by)
        if table == Table.SUBCATEGORIES and not self._held:
            self._held = True
            self.entered.set()
            await self.gate.wait()
        return rows


@pytest.mark.asyncio
async def test_failed_newer_refresh_does_not_discard_confirmed_mutation() -> None:
    store = HeldSubcategoriesStore()
    workspace = TaxonomyWorkspace(store)

    pending = asyncio.create_task(workspace.commands.create_category("Decals"))
    await store.entered.wait()

    store.fail(StoreOperation.LIST, Table.CATEGORIES, "timeout")
    failed = await workspace.commands.refresh()
    assert failed is not None
    assert failed.status == OutcomeStatus.STORE_FAILURE

    store.clear_failures()
    store.gate.set()
    outcome = await pending

    assert outcome.ok
    assert [item.name for item in workspace.cache.snapshot.categories] == ["Decals"]
