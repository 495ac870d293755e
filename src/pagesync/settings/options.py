"""Options accepted by :func:`pagesync.use_find`."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..config import DEFAULT_DEBOUNCE_MS, DEFAULT_LIMIT, DEFAULT_SKIP
from ..reactive.signal import ObservableProperty
from .schema import merge_with_defaults, validate_options


@dataclass
class PaginationState:
    """``limit``/``skip`` observables that several view models may share."""

    limit: ObservableProperty
    skip: ObservableProperty

    @classmethod
    def create(cls, limit: int = DEFAULT_LIMIT, skip: int = DEFAULT_SKIP) -> "PaginationState":
        return cls(limit=ObservableProperty(limit), skip=ObservableProperty(skip))


@dataclass(frozen=True)
class FindOptions:
    pagination: Optional[PaginationState] = None
    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    immediate: bool = True
    watch_params: bool = True
    paginate_on_server: bool = False

    def __post_init__(self) -> None:
        validate_options(
            {
                "debounce_ms": self.debounce_ms,
                "immediate": self.immediate,
                "watch_params": self.watch_params,
                "paginate_on_server": self.paginate_on_server,
            }
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "FindOptions":
        """Build options from a plain mapping, filling in defaults."""

        values = dict(data or {})
        pagination = values.pop("pagination", None)
        merged = merge_with_defaults(values)
        return cls(pagination=pagination, **merged)
