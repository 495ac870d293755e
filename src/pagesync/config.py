"""Default configuration values for pagesync."""

from __future__ import annotations

from typing import Final

# Query operators that select a window of the result set rather than
# filtering it.  They are stripped before fingerprinting and counting.
LIMIT_KEY: Final[str] = "$limit"
SKIP_KEY: Final[str] = "$skip"
PAGINATION_KEYS: Final[tuple[str, str]] = (LIMIT_KEY, SKIP_KEY)

DEFAULT_QID: Final[str] = "default"
DEFAULT_LIMIT: Final[int] = 10
DEFAULT_SKIP: Final[int] = 0
DEFAULT_ID_FIELD: Final[str] = "id"

DEFAULT_DEBOUNCE_MS: Final[int] = 100

# ``latest_query`` and ``previous_query`` are the only history the view
# model exposes; older entries are evicted first-in first-out.
QUERY_HISTORY_SIZE: Final[int] = 2
