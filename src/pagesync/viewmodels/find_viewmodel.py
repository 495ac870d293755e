"""FindViewModel: a live, paginated view of a remote collection.

Wires the pieces together::

    params ─┬─> params_with_pagination ──> current_query ──> total ──> page_count
            │            │                                   ^
            │            └──(watch)──> RequestCoordinator ───┘ (via store)
            │                               │
            └─────────> cached_params <─────┘ ──> cached_query ──> data / all_local_data

``params`` (plus ``limit``/``skip`` when navigation moves them) is the only
input callers write.  Every other field is derived, or written by the
coordinator as requests complete.

In server-pagination mode the server decides which items belong to a page
and the view shows the ids it returned; otherwise items are filtered from
the store locally and no request is made unless ``find()`` is called.
"""

from __future__ import annotations

import asyncio
from copy import deepcopy
from typing import Any, Callable, Mapping, Optional, Union

from pagesync.application.interfaces import FindResult, IRemoteService
from pagesync.application.services.pagination_window import PaginationWindow
from pagesync.application.services.projection import LocalProjection
from pagesync.application.services.realtime import RealtimeInvalidator
from pagesync.application.services.request_coordinator import RequestCoordinator
from pagesync.cache.query_cache import QueryCacheIndex
from pagesync.config import DEFAULT_LIMIT, DEFAULT_QID, DEFAULT_SKIP, LIMIT_KEY, SKIP_KEY
from pagesync.domain.query import params_with_pagination, params_without_pagination
from pagesync.reactive.base import BaseViewModel
from pagesync.reactive.signal import Computed, ObservableProperty
from pagesync.settings.options import FindOptions
from pagesync.store.item_store import ItemStore
from pagesync.utils.logging import get_logger

LOGGER = get_logger(__name__)

ParamsInput = Union[ObservableProperty, Mapping[str, Any], None]


class FindViewModel(BaseViewModel):
    def __init__(
        self,
        params: ParamsInput,
        service: IRemoteService,
        store: ItemStore,
        options: Union[FindOptions, Mapping[str, Any], None] = None,
    ) -> None:
        super().__init__()
        if not isinstance(options, FindOptions):
            options = FindOptions.from_mapping(options)
        self.options = options
        self._service = service
        self._store = store

        # -- params -----------------------------------------------------------
        if isinstance(params, ObservableProperty):
            self.params = params
        else:
            self.params = ObservableProperty(deepcopy(dict(params)) if params is not None else None)

        initial_query = (self.params.value or {}).get("query") or {}
        if options.pagination is not None:
            self.limit = options.pagination.limit
            self.skip = options.pagination.skip
        else:
            self.limit = ObservableProperty(initial_query.get(LIMIT_KEY) or DEFAULT_LIMIT)
            self.skip = ObservableProperty(initial_query.get(SKIP_KEY) or DEFAULT_SKIP)

        self.qid = self.computed(
            lambda: (self.params.value or {}).get("qid") or DEFAULT_QID, (self.params,)
        )
        self.params_with_pagination = self.computed(
            lambda: params_with_pagination(self.params.value, self.limit.value, self.skip.value),
            (self.params, self.limit, self.skip),
        )
        self.params_without_pagination = self.computed(
            lambda: params_without_pagination(self.params.value), (self.params,)
        )

        # -- cache views ------------------------------------------------------
        self._cache = QueryCacheIndex(store)
        self.cached_params = ObservableProperty(deepcopy(self.params.value or {}))
        self.cached_query = self.computed(
            lambda: self._cache.resolve(self.cached_params.value),
            (self.cached_params, store.version),
        )
        self.current_query = self.computed(
            lambda: self._cache.resolve(self.params_with_pagination.value),
            (self.params_with_pagination, store.version),
        )

        # -- requests ---------------------------------------------------------
        self._coordinator = RequestCoordinator(
            service,
            store,
            self._cache,
            params=self.params,
            params_with_pagination=self.params_with_pagination,
            current_query=self.current_query,
            cached_params=self.cached_params,
            paginate_on_server=options.paginate_on_server,
            debounce_ms=options.debounce_ms,
        )
        state = self._coordinator.state
        self.is_pending = self._read_only(state.is_pending)
        self.has_been_requested = self._read_only(state.has_been_requested)
        self.has_loaded = self._read_only(state.has_loaded)
        self.error = self._read_only(state.error)
        self.request_count = self._read_only(state.request_count)

        history = self._coordinator.history
        self.latest_query = self.computed(lambda: history.latest, (history.entries,))
        self.previous_query = self.computed(lambda: history.previous, (history.entries,))

        # -- items ------------------------------------------------------------
        self._projection = LocalProjection(store, self._cache)
        self.data = self.computed(
            self._compute_data,
            (self.params, self.params_with_pagination, self.cached_params, store.version),
        )
        self.all_local_data = self.computed(
            lambda: self._projection.all_local_data(self.cached_query.value),
            (self.cached_query, store.version),
        )

        # -- pagination -------------------------------------------------------
        self.total = self.computed(
            self._compute_total,
            (
                self.current_query,
                self.params_with_pagination,
                self.params_without_pagination,
                store.version,
            ),
        )
        self._window = PaginationWindow(
            self.limit,
            self.skip,
            self.total,
            settle=self._settle_navigation if options.paginate_on_server else None,
        )
        self.page_count = self._window.page_count
        self.current_page = self._window.current_page
        self.can_prev = self._window.can_prev
        self.can_next = self._window.can_next

        # -- watching ---------------------------------------------------------
        self._realtime = RealtimeInvalidator(service, self._coordinator.schedule_request)
        self.add_finalizer(self._window.detach)
        self.add_finalizer(self._realtime.stop)
        self.add_finalizer(self._coordinator.dispose)

        if options.paginate_on_server and options.watch_params:
            self.connect_signal(self.params_with_pagination.changed, self._on_params_changed)
            if options.immediate:
                self._coordinator.schedule_request()
            self._realtime.start()

    # -- derived values -------------------------------------------------------

    def _read_only(self, source: ObservableProperty) -> Computed:
        return self.computed(lambda: source.value, (source,))

    def _compute_data(self) -> list:
        if self.options.paginate_on_server:
            return self._projection.server_page(self.cached_params.value)
        if self.options.pagination is not None:
            return self._projection.local_items(self.params_with_pagination.value)
        return self._projection.local_items(self.params.value or {})

    def _compute_total(self) -> int:
        if self.options.paginate_on_server:
            # The entry's total survives while a newly requested page of
            # the same query is still in flight.
            current = self.current_query.value
            if current is not None:
                return current.total
            return self._cache.total_for(self.params_with_pagination.value)
        return self._store.count_in_store(self.params_without_pagination.value)

    @property
    def is_ssr(self) -> bool:
        return self._store.is_ssr

    @property
    def request_deferred(self) -> bool:
        """``True`` when a request was triggered with no event loop running.

        Awaiting :meth:`make_request` (or any navigation) sends it.
        """
        return self._coordinator.deferred

    @property
    def request(self) -> Optional[asyncio.Future]:
        """The shared future of the latest debounced request, if any."""
        return self._coordinator.request

    # -- requests -------------------------------------------------------------

    async def find(self, params: Optional[Mapping[str, Any]] = None) -> FindResult:
        return await self._coordinator.find(params)

    async def make_request(self) -> Optional[FindResult]:
        return await self._coordinator.make_request()

    def query_when(self, predicate: Callable[[], bool]) -> None:
        self._coordinator.query_when(predicate)

    def clear_error(self) -> None:
        self._coordinator.state.clear_error()

    def _on_params_changed(self, *_args: Any) -> None:
        LOGGER.debug("Params changed for qid=%s, scheduling request", self.qid.value)
        self._coordinator.schedule_request()

    async def _settle_navigation(self) -> None:
        if not self.options.watch_params or self._coordinator.deferred:
            await self._coordinator.make_request()
            return
        task = self._coordinator.last_scheduled
        if task is not None and not task.done():
            await asyncio.shield(task)

    # -- navigation -----------------------------------------------------------

    async def next(self) -> None:
        await self._window.next()

    async def prev(self) -> None:
        await self._window.prev()

    async def to_start(self) -> None:
        await self._window.to_start()

    async def to_end(self) -> None:
        await self._window.to_end()

    async def to_page(self, page: int) -> None:
        await self._window.to_page(page)


def use_find(
    params: ParamsInput,
    options: Union[FindOptions, Mapping[str, Any], None] = None,
    *,
    service: IRemoteService,
    store: ItemStore,
) -> FindViewModel:
    """Create a :class:`FindViewModel` for *params* over *service* and *store*."""
    return FindViewModel(params, service, store, options)
