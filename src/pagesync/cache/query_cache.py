"""Lookup of cached query metadata in the store's pagination index."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pagesync.domain.query import PageKey, QueryInfo, get_query_info
from pagesync.store.item_store import ItemId, ItemStore


@dataclass(frozen=True)
class ExtendedQueryInfo:
    """A cached page of a query merged with its live total and items."""

    qid: str
    fingerprint: str
    page_key: Optional[PageKey]
    query: dict = field(default_factory=dict)
    query_params: dict = field(default_factory=dict)
    ids: Tuple[ItemId, ...] = ()
    items: Tuple[Any, ...] = ()
    total: int = 0
    fetched_at: float = 0.0
    ssr: bool = False
    # ids of every page cached for this fingerprint, in first-fetched order
    page_ids: Tuple[Tuple[PageKey, Tuple[ItemId, ...]], ...] = ()


class QueryCacheIndex:
    """Resolves query params against the pagination index of *store*."""

    def __init__(self, store: ItemStore) -> None:
        self._store = store

    @staticmethod
    def get_query_info(params: Optional[Mapping[str, Any]]) -> QueryInfo:
        return get_query_info(params)

    def get_extended_query_info(self, info: QueryInfo) -> Optional[ExtendedQueryInfo]:
        """Return the cached state for *info*, or ``None`` on a cache miss."""

        entry = self._store.get_entry(info.qid, info.fingerprint)
        if entry is None or info.page_key is None:
            return None
        page = entry.pages.get(info.page_key)
        if page is None:
            return None
        items = self._store.resolve(page.ids)
        return ExtendedQueryInfo(
            qid=info.qid,
            fingerprint=info.fingerprint,
            page_key=info.page_key,
            query=info.query,
            query_params=info.query_params,
            ids=tuple(page.ids),
            items=tuple(items),
            total=entry.total,
            fetched_at=page.fetched_at,
            ssr=page.ssr,
            page_ids=tuple((key, tuple(p.ids)) for key, p in entry.pages.items()),
        )

    def resolve(self, params: Optional[Mapping[str, Any]]) -> Optional[ExtendedQueryInfo]:
        if params is None:
            return None
        return self.get_extended_query_info(get_query_info(params))

    def total_for(self, params: Optional[Mapping[str, Any]]) -> int:
        """Last known server total for the query of *params*, whatever its page."""

        if params is None:
            return 0
        info = get_query_info(params)
        entry = self._store.get_entry(info.qid, info.fingerprint)
        return entry.total if entry is not None else 0

    def page_items(self, params: Optional[Mapping[str, Any]]) -> List[Any]:
        """Items of the cached page for *params*, converted for output."""

        extended = self.resolve(params)
        if extended is None:
            return []
        return self._store.convert(list(extended.items))

    def all_page_ids(self, extended: Optional[ExtendedQueryInfo]) -> List[ItemId]:
        """Every id cached for *extended*'s fingerprint, deduplicated in first-seen order."""

        if extended is None:
            return []
        seen: Dict[ItemId, None] = {}
        for _key, ids in extended.page_ids:
            for item_id in ids:
                seen.setdefault(item_id, None)
        return list(seen)
