from .bus import (
    CREATED,
    PATCHED,
    REMOVED,
    SERVICE_EVENTS,
    EventBus,
    Subscription,
)

__all__ = [
    "CREATED",
    "PATCHED",
    "REMOVED",
    "SERVICE_EVENTS",
    "EventBus",
    "Subscription",
]
