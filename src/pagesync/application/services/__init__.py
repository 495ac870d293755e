from .debounce import Debouncer
from .pagination_window import PaginationWindow
from .projection import LocalProjection
from .realtime import RealtimeInvalidator
from .request_coordinator import QueryHistory, RequestCoordinator, RequestState

__all__ = [
    "Debouncer",
    "LocalProjection",
    "PaginationWindow",
    "QueryHistory",
    "RealtimeInvalidator",
    "RequestCoordinator",
    "RequestState",
]
