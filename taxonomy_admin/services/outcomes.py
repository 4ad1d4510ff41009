from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable

from taxonomy_admin.schemas.outcome import Outcome

logger = logging.getLogger(__name__)

OutcomeCallback = Callable[[Outcome], None]


class OutcomeChannel:
    """Collects the outcomes the presentation layer turns into notifications.

    Outcomes wait in a bounded buffer until ``drain()`` is called; callers that
    only use ``subscribe()`` never drain, so the oldest entries are dropped once
    ``max_pending`` is reached.
    """

    def __init__(self, max_pending: int = 100) -> None:
        self._pending: deque[Outcome] = deque(maxlen=max_pending)
        self._subscribers: list[OutcomeCallback] = []

    def subscribe(self, callback: OutcomeCallback) -> None:
        self._subscribers.append(callback)

    def publish(self, outcome: Outcome) -> Outcome:
        if outcome.ok:
            logger.info("%s: %s", outcome.action.value, outcome.message)
        else:
            logger.warning(
                "%s failed (%s): %s", outcome.action.value, outcome.status.value, outcome.message
            )
        self._pending.append(outcome)
        for callback in list(self._subscribers):
            try:
                callback(outcome)
            except Exception:
                logger.exception("Outcome subscriber %r raised", callback)
        return outcome

    def drain(self) -> list[Outcome]:
        pending = list(self._pending)
        self._pending.clear()
        return pending

    @property
    def pending(self) -> list[Outcome]:
        return list(self._pending)
