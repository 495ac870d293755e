"""Page arithmetic and navigation over ``limit``/``skip`` observables."""

from __future__ import annotations

import math
from typing import Awaitable, Callable, Optional

from pagesync.reactive.signal import Computed, ObservableProperty


def compute_page_count(total: int, limit: int) -> int:
    if not total or limit <= 0:
        return 1
    return max(1, math.ceil(total / limit))


def compute_current_page(skip: int, limit: int) -> int:
    if limit <= 0:
        return 1
    return skip // limit + 1


class PaginationWindow:
    """Navigation over a window of ``limit`` items starting at ``skip``.

    *settle* is awaited after every navigation; the server-paginated view
    model passes a coroutine that waits for the request the move triggered.
    Without it navigation only moves ``skip``.
    """

    def __init__(
        self,
        limit: ObservableProperty,
        skip: ObservableProperty,
        total: Computed,
        settle: Optional[Callable[[], Awaitable[None]]] = None,
    ) -> None:
        self.limit = limit
        self.skip = skip
        self.total = total
        self._settle = settle

        self.page_count = Computed(
            lambda: compute_page_count(self.total.value, self.limit.value),
            (self.total, self.limit),
        )
        self.current_page = Computed(
            lambda: compute_current_page(self.skip.value, self.limit.value),
            (self.skip, self.limit),
        )
        self.can_prev = Computed(lambda: self.current_page.value > 1, (self.current_page,))
        self.can_next = Computed(
            lambda: self.current_page.value < self.page_count.value,
            (self.current_page, self.page_count),
        )

    def detach(self) -> None:
        for node in (self.can_next, self.can_prev, self.current_page, self.page_count):
            node.detach()

    def clamp(self, page: int) -> int:
        return min(max(int(page), 1), self.page_count.value)

    async def to_page(self, page: int) -> None:
        target = self.clamp(page)
        self.skip.value = (target - 1) * self.limit.value
        if self._settle is not None:
            await self._settle()

    async def to_start(self) -> None:
        await self.to_page(1)

    async def to_end(self) -> None:
        await self.to_page(self.page_count.value)

    async def next(self) -> None:
        await self.to_page(self.current_page.value + 1)

    async def prev(self) -> None:
        await self.to_page(self.current_page.value - 1)
