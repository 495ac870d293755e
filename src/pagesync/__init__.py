"""Keep a client-side view of a paginated remote collection in sync."""

from .cache import ExtendedQueryInfo, QueryCacheIndex
from .domain import get_query_info, params_with_pagination, params_without_pagination, query_fingerprint
from .errors import PageSyncError
from .events import EventBus
from .infrastructure import InMemoryService
from .reactive import Computed, ObservableProperty, Signal
from .settings import FindOptions, PaginationState
from .store import ItemStore
from .viewmodels import FindViewModel, use_find

__version__ = "0.1.0"

__all__ = [
    "Computed",
    "EventBus",
    "ExtendedQueryInfo",
    "FindOptions",
    "FindViewModel",
    "InMemoryService",
    "ItemStore",
    "ObservableProperty",
    "PageSyncError",
    "PaginationState",
    "QueryCacheIndex",
    "Signal",
    "get_query_info",
    "params_with_pagination",
    "params_without_pagination",
    "query_fingerprint",
    "use_find",
]
