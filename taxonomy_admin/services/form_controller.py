from __future__ import annotations

import logging

from taxonomy_admin.schemas.outcome import Outcome
from taxonomy_admin.schemas.taxonomy import (
    CategoryNode,
    EntityKind,
    FormMode,
    FormState,
    SubcategoryNode,
)
from taxonomy_admin.services.commands import TaxonomyCommands

logger = logging.getLogger(__name__)


class EntityFormController:
    """One create/edit dialog shared by categories and subcategories.

    The controller holds only copies of the target's id and name. ``submit``
    dispatches on ``(kind, mode)`` to the matching command handler and closes
    the dialog only when that handler succeeds. If the dialog was cancelled or
    re-opened while the handler was running, the late result still lands in
    the store and cache but leaves the newer dialog alone.
    """

    def __init__(self, commands: TaxonomyCommands):
        self.commands = commands
        self._state = FormState()
        self._session = 0

    @property
    def state(self) -> FormState:
        return self._state.model_copy()

    @property
    def is_open(self) -> bool:
        return self._state.open

    def _reset(self, **fields: object) -> None:
        self._session += 1
        self._state = FormState(**fields)

    def open_for_create(self, kind: EntityKind, parent_id: str | None = None) -> FormState:
        if kind == EntityKind.SUBCATEGORY and not parent_id:
            logger.warning("Subcategory form opened without a parent category")
        self._reset(
            open=True,
            mode=FormMode.CREATE,
            kind=kind,
            parent_id=parent_id if kind == EntityKind.SUBCATEGORY else None,
        )
        return self.state

    def open_for_edit(self, kind: EntityKind, entity: CategoryNode | SubcategoryNode) -> FormState:
        self._reset(
            open=True,
            mode=FormMode.EDIT,
            kind=kind,
            name_input=entity.name,
            target_id=entity.id,
            parent_id=getattr(entity, "category_id", None),
        )
        return self.state

    def set_name(self, name: str) -> FormState:
        self._state.name_input = name
        return self.state

    def cancel(self) -> FormState:
        self._reset()
        return self.state

    async def submit(self) -> Outcome:
        state = self._state.model_copy()
        session = self._session
        outcome = await self._dispatch(state)
        if outcome.ok and session == self._session:
            self._reset()
        return outcome

    async def _dispatch(self, state: FormState) -> Outcome:
        if state.kind == EntityKind.CATEGORY:
            if state.mode == FormMode.CREATE:
                return await self.commands.create_category(state.name_input)
            return await self.commands.update_category(state.target_id, state.name_input)
        if state.mode == FormMode.CREATE:
            return await self.commands.create_subcategory(state.name_input, state.parent_id)
        return await self.commands.update_subcategory(state.target_id, state.name_input)
