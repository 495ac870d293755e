import logging
import threading
import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

CREATED = "created"
PATCHED = "patched"
REMOVED = "removed"

SERVICE_EVENTS = (CREATED, PATCHED, REMOVED)


@dataclass
class Subscription:
    """Handle returned by on(); can be used to unsubscribe."""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    event_name: str = ""
    handler: Callable = field(default=lambda payload: None)
    active: bool = True
    bus: Optional["EventBus"] = field(default=None, repr=False, compare=False)

    def cancel(self):
        self.active = False
        if self.bus is not None:
            self.bus.off(self)


class EventBus:
    """Name-keyed event emitter with the ``on(name, handler)`` surface of a service.

    Handlers receive the event payload.  A failing handler is logged and does
    not stop the remaining handlers.
    """

    def __init__(self, logger: logging.Logger = None):
        self._logger = logger or logging.getLogger(__name__)
        self._handlers: Dict[str, List[Subscription]] = defaultdict(list)
        self._lock = threading.Lock()

    def on(self, event_name: str, handler: Callable) -> Subscription:
        sub = Subscription(event_name=event_name, handler=handler, bus=self)
        with self._lock:
            self._handlers[event_name].append(sub)
        return sub

    def off(self, subscription: Subscription):
        subscription.active = False
        with self._lock:
            try:
                self._handlers[subscription.event_name].remove(subscription)
            except ValueError:
                pass

    def handler_count(self, event_name: str) -> int:
        with self._lock:
            return len(self._handlers[event_name])

    def emit(self, event_name: str, payload: Any = None) -> int:
        """Deliver *payload* to the handlers of *event_name*; return how many ran cleanly."""
        with self._lock:
            subs = list(self._handlers[event_name])

        delivered = 0
        for sub in subs:
            if not sub.active:
                continue
            try:
                sub.handler(payload)
                delivered += 1
            except Exception as e:
                self._logger.error(f"Handler failed for {event_name}: {e}")
        return delivered
