from __future__ import annotations

import logging

from pydantic import ValidationError as RowValidationError

from taxonomy_admin.schemas.taxonomy import CategoryRow, SubcategoryRow, TaxonomySnapshot
from taxonomy_admin.services.taxonomy_service import build_taxonomy_tree
from taxonomy_admin.store.base import RemoteStore, Row, StoreFailure, StoreOperation, Table

logger = logging.getLogger(__name__)


def _parse_rows(rows: list[Row], model: type, table: Table) -> list:
    try:
        return [model.model_validate(row) for row in rows]
    except RowValidationError as exc:
        raise StoreFailure(
            f"Malformed {table.value} row: {exc.errors()[0]['msg']}",
            table=table,
            operation=StoreOperation.LIST,
        ) from exc


class HierarchyCache:
    """Owns the reconciled two-level tree.

    ``refresh()`` reloads both tables and swaps the snapshot in one
    assignment. A failed fetch leaves the previous snapshot in place. A
    refresh that completes after a newer one has already been applied is
    discarded.
    """

    def __init__(self, store: RemoteStore):
        self.store = store
        self._snapshot = TaxonomySnapshot()
        self._generation = 0
        self._applied_generation = 0
        self._in_flight = 0

    @property
    def snapshot(self) -> TaxonomySnapshot:
        return self._snapshot

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    async def refresh(self) -> TaxonomySnapshot:
        self._generation += 1
        generation = self._generation
        self._in_flight += 1
        try:
            category_rows = await self.store.list_all(Table.CATEGORIES, order_by="name")
            subcategory_rows = await self.store.list_all(Table.SUBCATEGORIES, order_by="name")
            categories = _parse_rows(category_rows, CategoryRow, Table.CATEGORIES)
            subcategories = _parse_rows(subcategory_rows, SubcategoryRow, Table.SUBCATEGORIES)
        except StoreFailure as exc:
            logger.warning(
                "Refresh failed on %s %s: %s", exc.table.value, exc.operation.value, exc.detail
            )
            raise
        finally:
            self._in_flight -= 1

        snapshot, orphaned = build_taxonomy_tree(categories, subcategories)
        if generation < self._applied_generation:
            logger.debug(
                "Discarding refresh %s superseded by %s", generation, self._applied_generation
            )
            return self._snapshot

        self._snapshot = snapshot
        self._applied_generation = generation
        logger.debug(
            "Refreshed taxonomy: %s categories, %s subcategories, %s orphaned rows dropped",
            len(categories),
            len(subcategories) - orphaned,
            orphaned,
        )
        return snapshot
