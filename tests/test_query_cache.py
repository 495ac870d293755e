from pagesync.cache.query_cache import QueryCacheIndex
from pagesync.domain.query import get_query_info
from pagesync.store.item_store import ItemStore


def _make_cache(pages=((0, [1, 2]),), total=4, limit=2):
    store = ItemStore()
    store.upsert([{"id": i} for i in range(1, 6)])
    for skip, ids in pages:
        info = get_query_info({"query": {"$limit": limit, "$skip": skip}})
        store.update_pagination(info, ids, total, seq=skip + 1)
    return store, QueryCacheIndex(store)


class TestQueryCacheIndex:
    def test_hit_returns_items_and_total(self):
        _, cache = _make_cache()

        extended = cache.resolve({"query": {"$limit": 2, "$skip": 0}})

        assert extended.ids == (1, 2)
        assert extended.items == ({"id": 1}, {"id": 2})
        assert extended.total == 4
        assert extended.qid == "default"
        assert extended.ssr is False

    def test_miss_for_unfetched_page(self):
        _, cache = _make_cache()

        assert cache.resolve({"query": {"$limit": 2, "$skip": 2}}) is None

    def test_miss_without_limit(self):
        _, cache = _make_cache()

        assert cache.resolve({"query": {}}) is None

    def test_miss_for_other_qid(self):
        _, cache = _make_cache()

        assert cache.resolve({"qid": "other", "query": {"$limit": 2, "$skip": 0}}) is None

    def test_none_params(self):
        _, cache = _make_cache()

        assert cache.resolve(None) is None
        assert cache.total_for(None) == 0

    def test_items_skip_ids_missing_from_store(self):
        store, cache = _make_cache()
        store.remove(1)

        extended = cache.resolve({"query": {"$limit": 2, "$skip": 0}})

        assert extended.ids == (1, 2)
        assert extended.items == ({"id": 2},)

    def test_total_for_any_page(self):
        _, cache = _make_cache()

        assert cache.total_for({"query": {"$limit": 2, "$skip": 2}}) == 4
        assert cache.total_for({"query": {"other": 1, "$limit": 2}}) == 0

    def test_all_page_ids_dedups_in_first_seen_order(self):
        _, cache = _make_cache(pages=((0, [1, 2]), (2, [2, 3])))

        extended = cache.resolve({"query": {"$limit": 2, "$skip": 0}})

        assert cache.all_page_ids(extended) == [1, 2, 3]
        assert cache.all_page_ids(None) == []

    def test_page_items_converted(self):
        store = ItemStore(convert=lambda item: item["id"])
        store.upsert([{"id": 1}])
        store.update_pagination(get_query_info({"query": {"$limit": 1}}), [1], 1, seq=1)
        cache = QueryCacheIndex(store)

        assert cache.page_items({"query": {"$limit": 1, "$skip": 0}}) == [1]
        assert cache.page_items({"query": {"$limit": 1, "$skip": 1}}) == []
