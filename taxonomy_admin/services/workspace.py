from __future__ import annotations

from taxonomy_admin.schemas.outcome import Outcome
from taxonomy_admin.schemas.taxonomy import CategoryViewItem, TaxonomyView
from taxonomy_admin.services.commands import TaxonomyCommands
from taxonomy_admin.services.expansion import ExpansionTracker
from taxonomy_admin.services.form_controller import EntityFormController
from taxonomy_admin.services.hierarchy_cache import HierarchyCache
from taxonomy_admin.services.outcomes import OutcomeChannel
from taxonomy_admin.store.base import RemoteStore


class TaxonomyWorkspace:
    def __init__(self, store: RemoteStore, channel: OutcomeChannel | None = None):
        self.store = store
        self.channel = channel or OutcomeChannel()
        self.cache = HierarchyCache(store)
        self.expansion = ExpansionTracker()
        self.commands = TaxonomyCommands(store, self.cache, self.channel)
        self.form = EntityFormController(self.commands)

    async def load(self) -> Outcome | None:
        return await self.commands.refresh()

    def view(self) -> TaxonomyView:
        return TaxonomyView(
            categories=[
                CategoryViewItem(
                    id=category.id,
                    name=category.name,
                    subcategories=category.subcategories,
                    expanded=self.expansion.is_expanded(category.id),
                )
                for category in self.cache.snapshot.categories
            ],
            loading=self.cache.loading,
            form=self.form.state,
            outcomes=self.channel.drain(),
        )

    async def close(self) -> None:
        await self.store.close()
