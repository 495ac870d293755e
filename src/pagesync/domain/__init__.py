from .query import (
    PageKey,
    QueryInfo,
    get_query_info,
    params_with_pagination,
    params_without_pagination,
    query_fingerprint,
)

__all__ = [
    "PageKey",
    "QueryInfo",
    "get_query_info",
    "params_with_pagination",
    "params_without_pagination",
    "query_fingerprint",
]
