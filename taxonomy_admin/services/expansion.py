from collections.abc import Iterable


class ExpansionTracker:
    """Category ids currently shown expanded.

    Independent of the hierarchy snapshot: refreshes never clear it, and ids
    of deleted categories simply match no rendered row.
    """

    def __init__(self) -> None:
        self._expanded: set[str] = set()

    def toggle(self, category_id: str) -> bool:
        if category_id in self._expanded:
            self._expanded.discard(category_id)
            return False
        self._expanded.add(category_id)
        return True

    def is_expanded(self, category_id: str) -> bool:
        return category_id in self._expanded

    def prune(self, live_ids: Iterable[str]) -> int:
        stale = self._expanded - set(live_ids)
        self._expanded -= stale
        return len(stale)

    @property
    def expanded_ids(self) -> frozenset[str]:
        return frozenset(self._expanded)
