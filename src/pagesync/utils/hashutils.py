"""Hashing utilities."""

from __future__ import annotations

import json
from typing import Any

import xxhash


def stable_stringify(value: Any) -> str:
    """Return a canonical JSON string for *value*.

    Mapping keys are sorted at every depth and separators carry no
    whitespace, so two structurally equal values always serialise
    identically whatever their key order.  Values JSON cannot express
    (dates, UUIDs, ...) fall back to ``str()``.
    """

    return json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )


def fingerprint(value: Any) -> str:
    """Return the XXH3 128-bit hex digest of the canonical form of *value*."""

    return xxhash.xxh3_128_hexdigest(stable_stringify(value).encode("utf-8"))
