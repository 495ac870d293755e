from .item_store import ItemStore, PageEntry, QueryCacheEntry

__all__ = ["ItemStore", "PageEntry", "QueryCacheEntry"]
