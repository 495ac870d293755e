from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from pagesync.events.bus import Subscription

Paginated = Dict[str, Any]
FindResult = Union[Paginated, List[Dict[str, Any]]]


class IRemoteService(ABC):
    """Interface for the server side of a paginated collection."""

    @abstractmethod
    async def find(self, params: Optional[Mapping[str, Any]] = None) -> FindResult:
        """
        Query the server.
        Returns ``{"data", "total", "limit", "skip"}`` for paginated queries or a plain list otherwise.
        """
        pass

    @abstractmethod
    def on(self, event_name: str, handler: Callable[[Any], None]) -> Subscription:
        """Register *handler* for one of the ``created``/``patched``/``removed`` events."""
        pass
