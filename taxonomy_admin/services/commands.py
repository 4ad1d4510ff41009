"""Mutating intents against the taxonomy.

Each handler validates its input, performs one store call and, on success,
refreshes the hierarchy cache. The result is always a single ``Outcome``
published on the outcome channel; handlers never raise validation or store
errors to their caller and never retry.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable

from taxonomy_admin.schemas.outcome import CommandAction, Outcome, OutcomeStatus
from taxonomy_admin.schemas.taxonomy import EntityKind
from taxonomy_admin.services.errors import ValidationError
from taxonomy_admin.services.hierarchy_cache import HierarchyCache
from taxonomy_admin.services.outcomes import OutcomeChannel
from taxonomy_admin.services.taxonomy_service import validate_taxonomy_name
from taxonomy_admin.store.base import RemoteStore, StoreFailure, Table

logger = logging.getLogger(__name__)

SUCCESS_MESSAGES: dict[CommandAction, str] = {
    CommandAction.CREATE_CATEGORY: "Category created successfully.",
    CommandAction.UPDATE_CATEGORY: "Category updated successfully.",
    CommandAction.DELETE_CATEGORY: "Category deleted successfully.",
    CommandAction.CREATE_SUBCATEGORY: "Subcategory created successfully.",
    CommandAction.UPDATE_SUBCATEGORY: "Subcategory updated successfully.",
    CommandAction.DELETE_SUBCATEGORY: "Subcategory deleted successfully.",
}

FAILURE_PREFIXES: dict[CommandAction, str] = {
    CommandAction.CREATE_CATEGORY: "Error creating category",
    CommandAction.UPDATE_CATEGORY: "Error updating category",
    CommandAction.DELETE_CATEGORY: "Error deleting category",
    CommandAction.CREATE_SUBCATEGORY: "Error creating subcategory",
    CommandAction.UPDATE_SUBCATEGORY: "Error updating subcategory",
    CommandAction.DELETE_SUBCATEGORY: "Error deleting subcategory",
    CommandAction.REFRESH: "Error loading categories",
}

MISSING_PARENT_MESSAGE = "Select a category for the subcategory."


def _require_id(value: str | None, kind: EntityKind) -> str:
    cleaned = str(value or "").strip()
    if not cleaned:
        raise ValidationError(f"No {kind.value} selected.")
    return cleaned


def store_failure_outcome(action: CommandAction, exc: StoreFailure) -> Outcome:
    return Outcome(
        status=OutcomeStatus.STORE_FAILURE,
        action=action,
        message=f"{FAILURE_PREFIXES[action]}: {exc.detail}",
        detail=exc.detail,
    )


class TaxonomyCommands:
    def __init__(self, store: RemoteStore, cache: HierarchyCache, channel: OutcomeChannel):
        self.store = store
        self.cache = cache
        self.channel = channel

    def _reject(self, action: CommandAction, exc: ValidationError) -> Outcome:
        return self.channel.publish(
            Outcome(status=OutcomeStatus.VALIDATION_ERROR, action=action, message=exc.message)
        )

    async def _apply(self, action: CommandAction, call: Awaitable[object]) -> Outcome:
        try:
            await call
        except StoreFailure as exc:
            logger.warning(
                "Store %s on %s failed: %s", exc.operation.value, exc.table.value, exc.detail
            )
            return self.channel.publish(store_failure_outcome(action, exc))

        outcome = self.channel.publish(
            Outcome(status=OutcomeStatus.SUCCESS, action=action, message=SUCCESS_MESSAGES[action])
        )
        await self.refresh()
        return outcome

    async def refresh(self) -> Outcome | None:
        """Reload the cache; a failure is published as a ``refresh`` outcome."""
        try:
            await self.cache.refresh()
        except StoreFailure as exc:
            return self.channel.publish(store_failure_outcome(CommandAction.REFRESH, exc))
        return None

    async def create_category(self, name: str | None) -> Outcome:
        action = CommandAction.CREATE_CATEGORY
        try:
            cleaned = validate_taxonomy_name(EntityKind.CATEGORY, name)
        except ValidationError as exc:
            return self._reject(action, exc)
        return await self._apply(action, self.store.insert(Table.CATEGORIES, {"name": cleaned}))

    async def update_category(self, category_id: str | None, name: str | None) -> Outcome:
        action = CommandAction.UPDATE_CATEGORY
        try:
            target = _require_id(category_id, EntityKind.CATEGORY)
            cleaned = validate_taxonomy_name(EntityKind.CATEGORY, name)
        except ValidationError as exc:
            return self._reject(action, exc)
        return await self._apply(
            action, self.store.update(Table.CATEGORIES, target, {"name": cleaned})
        )

    async def delete_category(self, category_id: str | None) -> Outcome:
        action = CommandAction.DELETE_CATEGORY
        try:
            target = _require_id(category_id, EntityKind.CATEGORY)
        except ValidationError as exc:
            return self._reject(action, exc)
        # Dependent subcategories are removed by the store; the refresh picks that up.
        return await self._apply(action, self.store.delete(Table.CATEGORIES, target))

    async def create_subcategory(self, name: str | None, parent_id: str | None) -> Outcome:
        action = CommandAction.CREATE_SUBCATEGORY
        try:
            cleaned = validate_taxonomy_name(EntityKind.SUBCATEGORY, name)
            parent = str(parent_id or "").strip()
            if not parent:
                raise ValidationError(MISSING_PARENT_MESSAGE)
        except ValidationError as exc:
            return self._reject(action, exc)
        return await self._apply(
            action,
            self.store.insert(Table.SUBCATEGORIES, {"name": cleaned, "category_id": parent}),
        )

    async def update_subcategory(self, subcategory_id: str | None, name: str | None) -> Outcome:
        action = CommandAction.UPDATE_SUBCATEGORY
        try:
            target = _require_id(subcategory_id, EntityKind.SUBCATEGORY)
            cleaned = validate_taxonomy_name(EntityKind.SUBCATEGORY, name)
        except ValidationError as exc:
            return self._reject(action, exc)
        return await self._apply(
            action, self.store.update(Table.SUBCATEGORIES, target, {"name": cleaned})
        )

    async def delete_subcategory(self, subcategory_id: str | None) -> Outcome:
        action = CommandAction.DELETE_SUBCATEGORY
        try:
            target = _require_id(subcategory_id, EntityKind.SUBCATEGORY)
        except ValidationError as exc:
            return self._reject(action, exc)
        return await self._apply(action, self.store.delete(Table.SUBCATEGORIES, target))
