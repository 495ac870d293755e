"""Debounced, gated dispatch of ``find`` requests and their lifecycle state.

The coordinator is the only writer of the request flags, the query history,
the ``cached_params`` pointer and (through the store's write API) the
pagination index.
"""

from __future__ import annotations

import asyncio
import itertools
from copy import deepcopy
from typing import Any, Callable, Mapping, Optional, Set

from pagesync.application.interfaces import FindResult, IRemoteService
from pagesync.application.services.debounce import Debouncer
from pagesync.cache.query_cache import ExtendedQueryInfo, QueryCacheIndex
from pagesync.config import DEFAULT_DEBOUNCE_MS, QUERY_HISTORY_SIZE
from pagesync.domain.query import get_query_info
from pagesync.reactive.signal import Computed, ObservableProperty
from pagesync.store.item_store import ItemStore
from pagesync.utils.hashutils import stable_stringify
from pagesync.utils.logging import get_logger

LOGGER = get_logger(__name__)

# Shared by every coordinator so that writes to a shared store can be
# ordered across view models.
_REQUEST_SEQUENCE = itertools.count(1)


class RequestState:
    """Observable lifecycle flags of one view model's requests."""

    def __init__(self) -> None:
        self.is_pending = ObservableProperty(False)
        self.has_been_requested = ObservableProperty(False)
        self.has_loaded = ObservableProperty(False)
        self.error = ObservableProperty(None)
        self.request_count = ObservableProperty(0)

    def clear_error(self) -> None:
        self.error.value = None


class QueryHistory:
    """The most recent :data:`QUERY_HISTORY_SIZE` totaled query results."""

    def __init__(self, size: int = QUERY_HISTORY_SIZE) -> None:
        self.size = size
        self.entries = ObservableProperty(())

    def push(self, info: ExtendedQueryInfo) -> None:
        self.entries.value = (self.entries.value + (info,))[-self.size:]

    @property
    def latest(self) -> Optional[ExtendedQueryInfo]:
        entries = self.entries.value
        return entries[-1] if entries else None

    @property
    def previous(self) -> Optional[ExtendedQueryInfo]:
        entries = self.entries.value
        return entries[-2] if len(entries) > 1 else None

    def __len__(self) -> int:
        return len(self.entries.value)


class RequestCoordinator:
    def __init__(
        self,
        service: IRemoteService,
        store: ItemStore,
        cache: QueryCacheIndex,
        *,
        params: ObservableProperty,
        params_with_pagination: Computed,
        current_query: Computed,
        cached_params: ObservableProperty,
        paginate_on_server: bool = False,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
    ) -> None:
        self._service = service
        self._store = store
        self._cache = cache
        self._params = params
        self._params_with_pagination = params_with_pagination
        self._current_query = current_query
        self._cached_params = cached_params
        self._paginate_on_server = paginate_on_server
        self._query_when: Callable[[], bool] = lambda: True

        self.state = RequestState()
        self.history = QueryHistory()
        self.find_debounced = Debouncer(self.find, debounce_ms)
        self.request: Optional[asyncio.Future] = None
        self.last_scheduled: Optional[asyncio.Task] = None
        self._scheduled: Set[asyncio.Task] = set()
        self._in_flight = 0
        # Set when a request was triggered with no running loop to run it on.
        self.deferred = False

    # -- gating ---------------------------------------------------------------

    def query_when(self, predicate: Callable[[], bool]) -> None:
        """Install the predicate every request must pass before dispatch."""
        self._query_when = predicate

    def setup_pending_state(self) -> None:
        # A server-rendered page is already on screen: don't flash a spinner.
        current = self._current_query.value
        if current is not None and current.ssr:
            return
        state = self.state
        if not state.has_been_requested.value:
            state.has_been_requested.value = True
        state.clear_error()
        state.is_pending.value = True
        state.has_loaded.value = False

    # -- requests -------------------------------------------------------------

    async def find(self, params: Optional[Mapping[str, Any]] = None) -> FindResult:
        """Fetch from the service and record the response in the store.

        In server-pagination mode the live paginated params are always used
        and *params* is ignored.
        """

        if self._paginate_on_server or params is None:
            dispatched = self._params_with_pagination.value
        else:
            dispatched = deepcopy(dict(params))

        if not self._query_when():
            return {"data": []}

        if self._paginate_on_server:
            self.deferred = False
        self.setup_pending_state()
        self.state.request_count.value += 1
        seq = next(_REQUEST_SEQUENCE)
        LOGGER.debug("Dispatching find #%s: %s", seq, stable_stringify(dispatched))

        self._in_flight += 1
        try:
            response = await self._service.find(deepcopy(dispatched))
            self._apply_response(dispatched, response, seq)

            if isinstance(response, Mapping) and response.get("total"):
                info = get_query_info(self._params_with_pagination.value)
                extended = self._cache.get_extended_query_info(info)
                if extended is not None:
                    self.history.push(extended)
            self.state.has_loaded.value = True
            return response
        except Exception as exc:
            LOGGER.warning("find #%s failed: %s", seq, exc)
            self.state.error.value = exc
            raise
        finally:
            self._in_flight -= 1
            self.state.is_pending.value = False

    def _apply_response(self, dispatched: Mapping[str, Any], response: FindResult, seq: int) -> None:
        if not isinstance(response, Mapping):
            self._store.upsert(response or [])
            return
        ids = self._store.upsert(response.get("data") or [])
        total = response.get("total")
        if total is not None:
            self._store.update_pagination(get_query_info(dispatched), ids, total, seq=seq)

    async def make_request(self) -> Optional[FindResult]:
        """Fetch the live query in server-pagination mode.

        A cached page for the live query is shown right away; the fetch then
        refreshes it and ``cached_params`` settles on the final params.
        """

        if self._params.value is None:
            return None
        if not self._paginate_on_server:
            return None
        self.deferred = False

        if self._current_query.value is not None:
            self.update_cached_params()

        if self._query_when():
            self.setup_pending_state()

        self.request = self.find_debounced()
        try:
            response = await self.request
        except asyncio.CancelledError:
            self._clear_pending_if_idle()
            raise

        self.update_cached_params()
        return response

    def schedule_request(self) -> Optional[asyncio.Task]:
        """Run :meth:`make_request` in the background of the running loop.

        Without a running loop (a view model built or updated from
        synchronous code) the request is only marked as :attr:`deferred`;
        the next awaited :meth:`make_request` sends it.
        """

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            LOGGER.debug("No running event loop, deferring request")
            self.deferred = True
            return None
        task = loop.create_task(self.make_request())
        self._scheduled.add(task)
        task.add_done_callback(self._on_scheduled_done)
        self.last_scheduled = task
        return task

    def _on_scheduled_done(self, task: asyncio.Task) -> None:
        self._scheduled.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            # Already recorded in ``state.error`` by ``find``.
            LOGGER.debug("Background request failed: %s", exc)

    def update_cached_params(self) -> None:
        latest = self._params_with_pagination.value
        if stable_stringify(self._cached_params.value) != stable_stringify(latest):
            self._cached_params.value = deepcopy(latest)

    def _clear_pending_if_idle(self) -> None:
        # A cancelled burst never reaches ``find``, whose ``finally`` would
        # otherwise reset the flag.
        if not self._in_flight:
            self.state.is_pending.value = False

    def dispose(self) -> None:
        self.find_debounced.cancel()
        self._clear_pending_if_idle()
        self.deferred = False
