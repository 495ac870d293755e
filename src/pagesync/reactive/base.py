"""BaseViewModel: subscription lifecycle management.

Concrete view models connect to signals of other observables and start
background collaborators; everything registered through this base is torn
down by ``dispose()``.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable

from pagesync.reactive.signal import Computed, Signal


class BaseViewModel:
    """ViewModel base class."""

    def __init__(self) -> None:
        self._connections: list[tuple[Signal, Callable]] = []
        self._finalizers: list[Callable[[], None]] = []
        self._disposed = False

    def connect_signal(self, signal: Signal, handler: Callable) -> None:
        """Connect *handler* to *signal* and remember it for ``dispose()``."""
        signal.connect(handler)
        self._connections.append((signal, handler))

    def computed(self, compute: Callable[[], Any], sources: Iterable[Any] = ()) -> Computed:
        """Create a :class:`Computed` that ``dispose()`` detaches from its sources."""
        node = Computed(compute, sources)
        self._finalizers.append(node.detach)
        return node

    def add_finalizer(self, finalizer: Callable[[], None]) -> None:
        """Register a callable run once by ``dispose()``."""
        self._finalizers.append(finalizer)

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        """Disconnect tracked signals, then run finalizers newest first."""
        if self._disposed:
            return
        for signal, handler in self._connections:
            try:
                signal.disconnect(handler)
            except ValueError:
                pass
        self._connections.clear()
        for finalizer in reversed(self._finalizers):
            finalizer()
        self._finalizers.clear()
        self._disposed = True
