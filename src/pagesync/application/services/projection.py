"""Item lists exposed to the view."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from pagesync.cache.query_cache import ExtendedQueryInfo, QueryCacheIndex
from pagesync.store.item_store import ItemStore


class LocalProjection:
    def __init__(self, store: ItemStore, cache: QueryCacheIndex) -> None:
        self._store = store
        self._cache = cache

    def server_page(self, cached_params: Optional[Mapping[str, Any]]) -> List[Any]:
        """Items of the page the server returned for *cached_params*."""
        return self._cache.page_items(cached_params)

    def local_items(self, params: Optional[Mapping[str, Any]]) -> List[Any]:
        """Items of the store matching *params*, filtered locally."""
        result = self._store.find_in_store(params or {})["data"]
        return self._store.convert([item for item in result if item])

    def all_local_data(self, cached_query: Optional[ExtendedQueryInfo]) -> List[Any]:
        """Every item any cached page of *cached_query*'s query returned.

        Pages are flattened in the order they were first fetched; an id that
        shows up on several pages is kept once, at its first position.
        """
        if cached_query is None:
            return []
        ids = self._cache.all_page_ids(cached_query)
        return self._store.convert(self._store.resolve(ids))
