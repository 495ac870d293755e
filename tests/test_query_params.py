"""Tests for query params helpers and query identity."""

from pagesync.domain.query import (
    get_query_info,
    params_with_pagination,
    params_without_pagination,
    query_fingerprint,
)


class TestParamsWithPagination:
    def test_merges_limit_and_skip_into_query(self):
        params = {"query": {"group": "odd"}, "qid": "side"}

        result = params_with_pagination(params, 10, 20)

        assert result == {"query": {"group": "odd", "$limit": 10, "$skip": 20}, "qid": "side"}

    def test_overrides_existing_pagination(self):
        result = params_with_pagination({"query": {"$limit": 5, "$skip": 5}}, 10, 0)

        assert result["query"] == {"$limit": 10, "$skip": 0}

    def test_does_not_mutate_input(self):
        params = {"query": {"tags": {"$in": ["a"]}}}

        result = params_with_pagination(params, 10, 0)
        result["query"]["tags"]["$in"].append("b")

        assert params == {"query": {"tags": {"$in": ["a"]}}}

    def test_none_params(self):
        assert params_with_pagination(None, 3, 6) == {"query": {"$limit": 3, "$skip": 6}}


class TestParamsWithoutPagination:
    def test_strips_limit_and_skip(self):
        params = {"query": {"group": "odd", "$limit": 10, "$skip": 10, "$sort": {"id": 1}}}

        result = params_without_pagination(params)

        assert result == {"query": {"group": "odd", "$sort": {"id": 1}}}
        assert params["query"]["$limit"] == 10


class TestQueryFingerprint:
    def test_ignores_key_order(self):
        a = {"name": "x", "age": {"$gt": 3, "$lt": 9}}
        b = {"age": {"$lt": 9, "$gt": 3}, "name": "x"}

        assert query_fingerprint(a) == query_fingerprint(b)

    def test_ignores_pagination(self):
        base = {"group": "odd"}
        paged = {"group": "odd", "$limit": 10, "$skip": 30}

        assert query_fingerprint(base) == query_fingerprint(paged)

    def test_differs_for_different_criteria(self):
        assert query_fingerprint({"group": "odd"}) != query_fingerprint({"group": "even"})

    def test_empty_and_none_match(self):
        assert query_fingerprint(None) == query_fingerprint({})


class TestGetQueryInfo:
    def test_defaults_qid(self):
        info = get_query_info({"query": {"$limit": 10}})

        assert info.qid == "default"
        assert info.page_key == (10, 0)
        assert info.page_params == {"$limit": 10, "$skip": 0}

    def test_custom_qid(self):
        assert get_query_info({"qid": "sidebar", "query": {}}).qid == "sidebar"

    def test_no_limit_means_no_page(self):
        info = get_query_info({"query": {"group": "odd"}})

        assert info.page_key is None
        assert info.page_params is None
        assert info.query_params == {"group": "odd"}

    def test_pages_of_same_query_share_fingerprint(self):
        first = get_query_info(params_with_pagination({"query": {"a": 1}}, 10, 0))
        second = get_query_info(params_with_pagination({"query": {"a": 1}}, 10, 10))

        assert first.fingerprint == second.fingerprint
        assert first.page_key != second.page_key
