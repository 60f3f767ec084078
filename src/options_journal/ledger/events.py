"""Explicit change notifications for the trade collection.

Views that show trades subscribe when they start and unsubscribe when they
are torn down; the journal service publishes after each successful write.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterator

from options_journal.core.models import TradesChanged

logger = logging.getLogger(__name__)

Listener = Callable[[TradesChanged], None]


class TradeEvents:
    """Synchronous publish/subscribe hub for ``TradesChanged``."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            self.unsubscribe(listener)

        return unsubscribe

    def unsubscribe(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    @contextmanager
    def subscription(self, listener: Listener) -> Iterator[None]:
        unsubscribe = self.subscribe(listener)
        try:
            yield
        finally:
            unsubscribe()

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def publish(self, event: TradesChanged) -> None:
        logger.debug("Publishing %s for %s to %d listener(s)", event.action, event.owner_id, len(self._listeners))
        for listener in list(self._listeners):
            listener(event)
