"""In-memory normalized item store with a per-qid pagination index.

The store keeps every item once, keyed by its id, and remembers which ids
each fetched page of each query returned::

    pagination[qid][fingerprint] -> QueryCacheEntry
    QueryCacheEntry.pages[(limit, skip)] -> PageEntry(ids, ...)

All mutations bump ``version`` so derived views built on top of the store
recompute.  The store is meant to be written from a single event loop.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from pagesync.config import DEFAULT_ID_FIELD, LIMIT_KEY, SKIP_KEY
from pagesync.domain.matcher import filter_items
from pagesync.domain.query import PageKey, QueryInfo, get_query_info, params_without_pagination
from pagesync.errors import MissingIdError
from pagesync.events.bus import CREATED, PATCHED, REMOVED, Subscription
from pagesync.reactive.signal import ObservableProperty
from pagesync.utils.logging import get_logger

LOGGER = get_logger(__name__)

Item = Dict[str, Any]
ItemId = Union[int, str]


@dataclass
class PageEntry:
    """Ids returned by one fetched page."""

    ids: List[ItemId] = field(default_factory=list)
    fetched_at: float = 0.0
    ssr: bool = False
    seq: int = 0


@dataclass
class QueryCacheEntry:
    """Cached metadata for one query fingerprint inside one qid."""

    fingerprint: str
    qid: str
    query_params: dict = field(default_factory=dict)
    total: int = 0
    pages: Dict[PageKey, PageEntry] = field(default_factory=dict)
    fetched_at: float = 0.0
    total_seq: int = 0


class ItemStore:
    """Normalized item store shared by any number of view models."""

    def __init__(
        self,
        id_field: str = DEFAULT_ID_FIELD,
        *,
        convert: Optional[Callable[[Item], Any]] = None,
        is_ssr: bool = False,
    ) -> None:
        self.id_field = id_field
        self.is_ssr = is_ssr
        self._convert = convert
        self.items_by_id: Dict[ItemId, Item] = {}
        self.pagination: Dict[str, Dict[str, QueryCacheEntry]] = {}
        self.version = ObservableProperty(0)

    # -- items --------------------------------------------------------------

    def get_id(self, item: Mapping[str, Any]) -> ItemId:
        item_id = item.get(self.id_field)
        if item_id is None:
            raise MissingIdError(f"Item has no {self.id_field!r}: {item!r}")
        return item_id

    def get(self, item_id: ItemId) -> Optional[Item]:
        return self.items_by_id.get(item_id)

    def upsert(self, items: Union[Mapping[str, Any], Iterable[Mapping[str, Any]]]) -> List[ItemId]:
        """Add or replace one item or a batch of items; return their ids."""

        batch = [items] if isinstance(items, Mapping) else list(items)
        ids = [self.get_id(item) for item in batch]
        for item_id, item in zip(ids, batch):
            self.items_by_id[item_id] = dict(item)
        if ids:
            self._touch()
        return ids

    def remove(self, item_or_id: Union[Mapping[str, Any], ItemId]) -> Optional[Item]:
        item_id = self.get_id(item_or_id) if isinstance(item_or_id, Mapping) else item_or_id
        removed = self.items_by_id.pop(item_id, None)
        if removed is not None:
            self._touch()
        return removed

    def clear(self) -> None:
        self.items_by_id.clear()
        self.pagination.clear()
        self._touch()

    def convert(self, items: Sequence[Item]) -> List[Any]:
        """Turn stored records into the output item shape."""

        if self._convert is None:
            return list(items)
        return [self._convert(item) for item in items]

    def resolve(self, ids: Iterable[ItemId]) -> List[Item]:
        """Map *ids* to stored items, skipping ids with no stored item."""

        return [self.items_by_id[item_id] for item_id in ids if item_id in self.items_by_id]

    # -- local queries ------------------------------------------------------

    def find_in_store(self, params: Optional[Mapping[str, Any]]) -> dict:
        query = (params or {}).get("query") or {}
        total, data = filter_items(self.items_by_id.values(), query, id_field=self.id_field)
        return {
            "total": total,
            "limit": query.get(LIMIT_KEY),
            "skip": query.get(SKIP_KEY) or 0,
            "data": data,
        }

    def count_in_store(self, params: Optional[Mapping[str, Any]]) -> int:
        query = params_without_pagination(params)["query"]
        total, _ = filter_items(
            self.items_by_id.values(), query, id_field=self.id_field, paginate=False
        )
        return total

    # -- pagination index ---------------------------------------------------

    def get_entry(self, qid: str, fingerprint: str) -> Optional[QueryCacheEntry]:
        return self.pagination.get(qid, {}).get(fingerprint)

    def update_pagination(
        self,
        info: QueryInfo,
        ids: Sequence[ItemId],
        total: int,
        *,
        seq: int,
        ssr: bool = False,
    ) -> bool:
        """Record the ids of one fetched page.

        Writes carrying a lower *seq* than the one already applied to the
        page (or to the entry's total) are ignored; returns whether the page
        was written.
        """

        now = time.time()
        qid_state = self.pagination.setdefault(info.qid, {})
        entry = qid_state.get(info.fingerprint)
        if entry is None:
            entry = QueryCacheEntry(
                fingerprint=info.fingerprint,
                qid=info.qid,
                query_params=dict(info.query_params),
            )
            qid_state[info.fingerprint] = entry

        if seq >= entry.total_seq:
            entry.total = int(total)
            entry.total_seq = seq
            entry.fetched_at = now

        written = False
        if info.page_key is not None:
            page = entry.pages.get(info.page_key)
            if page is not None and seq < page.seq:
                LOGGER.debug(
                    "Dropping stale page write qid=%s page=%s seq=%s < %s",
                    info.qid,
                    info.page_key,
                    seq,
                    page.seq,
                )
            else:
                entry.pages[info.page_key] = PageEntry(
                    ids=list(ids), fetched_at=now, ssr=ssr, seq=seq
                )
                written = True
        self._touch()
        return written

    def hydrate(self, params: Optional[Mapping[str, Any]], response: Mapping[str, Any]) -> QueryInfo:
        """Seed a server-rendered page so the first client render is a cache hit."""

        info = get_query_info(params)
        ids = self.upsert(response.get("data") or [])
        self.update_pagination(info, ids, response.get("total") or len(ids), seq=0, ssr=True)
        return info

    # -- realtime -----------------------------------------------------------

    def bind(self, emitter: Any) -> List[Subscription]:
        """Keep the store current from *emitter*'s mutation events."""

        return [
            emitter.on(CREATED, self.upsert),
            emitter.on(PATCHED, self.upsert),
            emitter.on(REMOVED, self.remove),
        ]

    def _touch(self) -> None:
        self.version.value = self.version.value + 1
