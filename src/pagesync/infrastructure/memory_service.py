"""In-memory remote service.

Behaves like a Feathers service backed by a list: ``find`` filters, sorts
and paginates server-side, and the mutation methods emit ``created``,
``patched`` and ``removed`` events.  Useful for demos, the CLI and tests.
"""

from __future__ import annotations

import asyncio
import itertools
from copy import deepcopy
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from pagesync.application.interfaces import FindResult, IRemoteService
from pagesync.config import DEFAULT_ID_FIELD, DEFAULT_LIMIT, LIMIT_KEY, SKIP_KEY
from pagesync.domain.matcher import filter_items
from pagesync.errors import MissingIdError
from pagesync.events.bus import CREATED, PATCHED, REMOVED, EventBus, Subscription


class InMemoryService(IRemoteService):
    def __init__(
        self,
        items: Iterable[Mapping[str, Any]] = (),
        *,
        id_field: str = DEFAULT_ID_FIELD,
        paginate: bool = True,
        default_limit: int = DEFAULT_LIMIT,
        max_limit: Optional[int] = None,
        latency: float = 0.0,
        events: Optional[EventBus] = None,
    ) -> None:
        self.id_field = id_field
        self.paginate = paginate
        self.default_limit = default_limit
        self.max_limit = max_limit
        self.latency = latency
        self.events = events or EventBus()
        self.calls: List[Optional[dict]] = []
        self.fail_with: Optional[BaseException] = None
        self._items: Dict[Any, dict] = {}
        self._ids = itertools.count(1)
        for item in items:
            self._items[self._require_id(item)] = dict(item)

    def _require_id(self, item: Mapping[str, Any]) -> Any:
        item_id = item.get(self.id_field)
        if item_id is None:
            raise MissingIdError(f"Item has no {self.id_field!r}: {item!r}")
        return item_id

    @property
    def items(self) -> List[dict]:
        return [dict(item) for item in self._items.values()]

    async def find(self, params: Optional[Mapping[str, Any]] = None) -> FindResult:
        self.calls.append(deepcopy(dict(params)) if params is not None else None)
        if self.latency:
            await asyncio.sleep(self.latency)
        if self.fail_with is not None:
            raise self.fail_with

        query = dict((params or {}).get("query") or {})
        if not self.paginate:
            _total, data = filter_items(self._items.values(), query, id_field=self.id_field)
            return [dict(item) for item in data]

        limit = query.get(LIMIT_KEY)
        limit = self.default_limit if limit is None else int(limit)
        if self.max_limit is not None:
            limit = min(limit, self.max_limit)
        skip = int(query.get(SKIP_KEY) or 0)
        query[LIMIT_KEY] = limit
        query[SKIP_KEY] = skip
        total, data = filter_items(self._items.values(), query, id_field=self.id_field)
        return {
            "total": total,
            "limit": limit,
            "skip": skip,
            "data": [dict(item) for item in data],
        }

    async def create(self, data: Mapping[str, Any]) -> dict:
        item = dict(data)
        if item.get(self.id_field) is None:
            next_id = next(self._ids)
            while next_id in self._items:
                next_id = next(self._ids)
            item[self.id_field] = next_id
        self._items[item[self.id_field]] = item
        self.events.emit(CREATED, dict(item))
        return dict(item)

    async def patch(self, item_id: Any, data: Mapping[str, Any]) -> dict:
        item = self._items[item_id]
        item.update({key: value for key, value in data.items() if key != self.id_field})
        self.events.emit(PATCHED, dict(item))
        return dict(item)

    async def remove(self, item_id: Any) -> dict:
        item = self._items.pop(item_id)
        self.events.emit(REMOVED, dict(item))
        return dict(item)

    def on(self, event_name: str, handler: Callable[[Any], None]) -> Subscription:
        return self.events.on(event_name, handler)
