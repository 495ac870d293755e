"""Local evaluation of Feathers-style queries against plain dict items.

Supports field equality, the comparison operators ``$in``, ``$nin``,
``$lt``, ``$lte``, ``$gt``, ``$gte``, ``$ne``, the logical ``$or`` and
``$and``, and the result filters ``$sort``, ``$skip``, ``$limit`` and
``$select``.
"""

from __future__ import annotations

import operator
from functools import cmp_to_key
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from pagesync.config import LIMIT_KEY, SKIP_KEY
from pagesync.errors import InvalidQueryError

SORT_KEY = "$sort"
SELECT_KEY = "$select"
FILTER_KEYS = (SORT_KEY, LIMIT_KEY, SKIP_KEY, SELECT_KEY)

_MISSING = object()


def _ordered(op: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def compare(value: Any, expected: Any) -> bool:
        if value is _MISSING or value is None or expected is None:
            return False
        try:
            return op(value, expected)
        except TypeError:
            return False

    return compare


def _in(value: Any, expected: Any) -> bool:
    if value is _MISSING:
        value = None
    if isinstance(value, (list, tuple)):
        return any(entry in expected for entry in value)
    return value in expected


def _ne(value: Any, expected: Any) -> bool:
    if value is _MISSING:
        value = None
    return value != expected


OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "$in": _in,
    "$nin": lambda value, expected: not _in(value, expected),
    "$lt": _ordered(operator.lt),
    "$lte": _ordered(operator.le),
    "$gt": _ordered(operator.gt),
    "$gte": _ordered(operator.ge),
    "$ne": _ne,
}


def split_query(query: Optional[Mapping[str, Any]]) -> Tuple[dict, dict]:
    """Separate *query* into ``(criteria, filters)``."""

    criteria: dict = {}
    filters: dict = {}
    for key, value in (query or {}).items():
        if key in FILTER_KEYS:
            filters[key] = value
        else:
            criteria[key] = value
    return criteria, filters


def _field_matches(value: Any, condition: Any) -> bool:
    if isinstance(condition, Mapping) and any(str(k).startswith("$") for k in condition):
        for op_name, expected in condition.items():
            compare = OPERATORS.get(op_name)
            if compare is None:
                raise InvalidQueryError(f"Unsupported query operator: {op_name}")
            if not compare(value, expected):
                return False
        return True
    if value is _MISSING:
        return False
    if isinstance(value, (list, tuple)) and not isinstance(condition, (list, tuple)):
        return condition in value
    return value == condition


def matches(item: Mapping[str, Any], criteria: Mapping[str, Any]) -> bool:
    """Return ``True`` if *item* satisfies every condition in *criteria*."""

    for key, condition in criteria.items():
        if key == "$or":
            if not any(matches(item, sub) for sub in condition):
                return False
        elif key == "$and":
            if not all(matches(item, sub) for sub in condition):
                return False
        elif key.startswith("$"):
            raise InvalidQueryError(f"Unsupported query operator: {key}")
        elif not _field_matches(item.get(key, _MISSING), condition):
            return False
    return True


def _compare_values(left: Any, right: Any) -> int:
    # ``None`` sorts before everything else so mixed columns stay orderable.
    if left is None and right is None:
        return 0
    if left is None:
        return -1
    if right is None:
        return 1
    try:
        return (left > right) - (left < right)
    except TypeError:
        left_s, right_s = str(left), str(right)
        return (left_s > right_s) - (left_s < right_s)


def sort_items(items: Sequence[Mapping[str, Any]], sort: Mapping[str, Any]) -> List[Mapping[str, Any]]:
    keys = [(name, -1 if int(direction) < 0 else 1) for name, direction in sort.items()]

    def compare(left: Mapping[str, Any], right: Mapping[str, Any]) -> int:
        for name, direction in keys:
            result = _compare_values(left.get(name), right.get(name))
            if result:
                return result * direction
        return 0

    return sorted(items, key=cmp_to_key(compare))


def select_fields(item: Mapping[str, Any], fields: Iterable[str], id_field: str) -> dict:
    wanted = set(fields) | {id_field}
    return {key: value for key, value in item.items() if key in wanted}


def filter_items(
    items: Iterable[Mapping[str, Any]],
    query: Optional[Mapping[str, Any]],
    *,
    id_field: str = "id",
    paginate: bool = True,
) -> Tuple[int, List[Mapping[str, Any]]]:
    """Apply *query* to *items*.

    Returns ``(total, page)`` where *total* counts every match before
    ``$skip``/``$limit`` are applied.  With ``paginate=False`` the window
    filters are ignored and the page is the full sorted match list.
    """

    criteria, filters = split_query(query)
    matched = [item for item in items if item is not None and matches(item, criteria)]
    total = len(matched)

    sort = filters.get(SORT_KEY)
    if sort:
        matched = sort_items(matched, sort)

    if paginate:
        skip = int(filters.get(SKIP_KEY) or 0)
        limit = filters.get(LIMIT_KEY)
        if skip:
            matched = matched[skip:]
        if limit is not None:
            matched = matched[: max(int(limit), 0)]

    select = filters.get(SELECT_KEY)
    if select:
        matched = [select_fields(item, select, id_field) for item in matched]
    return total, matched
