"""Trailing-edge debouncer for coroutine functions."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Optional, Set

from pagesync.utils.logging import get_logger

LOGGER = get_logger(__name__)


class Debouncer:
    """Coalesce rapid calls of an async function into one deferred call.

    Every call within ``delay_ms`` of the previous one restarts the timer and
    replaces the arguments.  When the timer fires, the function runs once
    with the most recent arguments and every coalesced caller receives that
    single result (or exception) through the shared future.

    Only the timer is ever cancelled; once the function has been started it
    runs to completion.
    """

    def __init__(self, func: Callable[..., Awaitable[Any]], delay_ms: int) -> None:
        self._func = func
        self.delay_ms = delay_ms
        self._timer: Optional[asyncio.TimerHandle] = None
        self._latest_args: tuple[tuple, dict] = ((), {})
        self._shared: Optional[asyncio.Future] = None
        self._running: Set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        """``True`` while a call is waiting for the timer to fire."""
        return self._timer is not None

    def __call__(self, *args: Any, **kwargs: Any) -> asyncio.Future:
        loop = asyncio.get_running_loop()
        if self._timer is not None:
            self._timer.cancel()
        self._latest_args = (args, kwargs)
        if self._shared is None or self._shared.done():
            self._shared = loop.create_future()
        self._timer = loop.call_later(self.delay_ms / 1000.0, self._fire)
        return self._shared

    def _fire(self) -> None:
        future = self._shared
        args, kwargs = self._latest_args
        self._timer = None
        self._shared = None
        self._latest_args = ((), {})

        task = asyncio.ensure_future(self._func(*args, **kwargs))
        self._running.add(task)
        task.add_done_callback(self._running.discard)
        task.add_done_callback(lambda done: _settle(future, done))

    def cancel(self) -> None:
        """Drop a not-yet-fired call; its awaiters see ``CancelledError``."""

        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._shared is not None and not self._shared.done():
            self._shared.cancel()
        self._shared = None


def _settle(future: Optional[asyncio.Future], task: asyncio.Task) -> None:
    if future is None or future.done():
        if not task.cancelled() and task.exception() is not None:
            LOGGER.debug("Debounced call failed with no awaiter: %s", task.exception())
        return
    if task.cancelled():
        future.cancel()
    elif task.exception() is not None:
        future.set_exception(task.exception())
    else:
        future.set_result(task.result())
