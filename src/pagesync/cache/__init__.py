from .query_cache import ExtendedQueryInfo, QueryCacheIndex

__all__ = ["ExtendedQueryInfo", "QueryCacheIndex"]
