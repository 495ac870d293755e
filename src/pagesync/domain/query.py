"""Query params helpers: pagination variants and query identity."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple

from pagesync.config import DEFAULT_QID, LIMIT_KEY, PAGINATION_KEYS, SKIP_KEY
from pagesync.utils.hashutils import fingerprint as _fingerprint

PageKey = Tuple[int, int]


def _query_of(params: Optional[Mapping[str, Any]]) -> dict:
    return deepcopy(dict((params or {}).get("query") or {}))


def params_with_pagination(
    params: Optional[Mapping[str, Any]], limit: int, skip: int
) -> dict:
    """Return a copy of *params* whose query carries *limit* and *skip*."""

    query = _query_of(params)
    query[LIMIT_KEY] = limit
    query[SKIP_KEY] = skip
    return {**deepcopy(dict(params or {})), "query": query}


def params_without_pagination(params: Optional[Mapping[str, Any]]) -> dict:
    """Return a copy of *params* whose query has ``$limit``/``$skip`` removed."""

    query = strip_pagination(_query_of(params))
    return {**deepcopy(dict(params or {})), "query": query}


def strip_pagination(query: Mapping[str, Any]) -> dict:
    return {key: value for key, value in query.items() if key not in PAGINATION_KEYS}


def query_fingerprint(query: Optional[Mapping[str, Any]]) -> str:
    """Identity of a query's filtering criteria, ignoring key order and pagination."""

    return _fingerprint(strip_pagination(query or {}))


@dataclass(frozen=True)
class QueryInfo:
    """Identity of one page of one query inside one qid namespace."""

    qid: str
    fingerprint: str
    query: dict = field(default_factory=dict, compare=False)
    query_params: dict = field(default_factory=dict, compare=False)
    page_key: Optional[PageKey] = None

    @property
    def page_params(self) -> Optional[dict]:
        if self.page_key is None:
            return None
        limit, skip = self.page_key
        return {LIMIT_KEY: limit, SKIP_KEY: skip}


def get_query_info(params: Optional[Mapping[str, Any]]) -> QueryInfo:
    """Describe *params* as qid, fingerprint and page key.

    ``page_key`` is ``None`` when the query carries no ``$limit``: such a
    query can be counted but never matched against a cached page.
    """

    params = params or {}
    query = _query_of(params)
    query_params = strip_pagination(query)
    limit = query.get(LIMIT_KEY)
    page_key: Optional[PageKey] = None
    if limit is not None:
        page_key = (int(limit), int(query.get(SKIP_KEY) or 0))
    return QueryInfo(
        qid=params.get("qid") or DEFAULT_QID,
        fingerprint=_fingerprint(query_params),
        query=query,
        query_params=query_params,
        page_key=page_key,
    )
