"""Re-query on remote mutation events."""

from __future__ import annotations

from typing import Any, Callable, List

from pagesync.events.bus import SERVICE_EVENTS, Subscription
from pagesync.utils.logging import get_logger

LOGGER = get_logger(__name__)


class RealtimeInvalidator:
    """Trigger a full re-fetch whenever the service reports a mutation.

    Any ``created``, ``patched`` or ``removed`` event invalidates the active
    query, whether or not the mutated item is on the current page.
    """

    def __init__(self, emitter: Any, invalidate: Callable[[], Any]) -> None:
        self._emitter = emitter
        self._invalidate = invalidate
        self._subscriptions: List[Subscription] = []

    @property
    def active(self) -> bool:
        return bool(self._subscriptions)

    def start(self) -> None:
        if self._subscriptions:
            return
        for event_name in SERVICE_EVENTS:
            self._subscriptions.append(
                self._emitter.on(event_name, self._handler_for(event_name))
            )

    def stop(self) -> None:
        for sub in self._subscriptions:
            sub.cancel()
        self._subscriptions.clear()

    def _handler_for(self, event_name: str) -> Callable[[Any], None]:
        def handler(_payload: Any = None) -> None:
            LOGGER.debug("Service event %r, re-querying", event_name)
            self._invalidate()

        return handler
