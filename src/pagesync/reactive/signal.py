"""Pure Python signal system with derived values.

Provides ``Signal`` for observer-pattern callbacks, ``ObservableProperty``
for writable inputs and ``Computed`` for values derived from other
observables.  Together they form a small dependency graph: writing an
``ObservableProperty`` first marks every downstream ``Computed`` dirty and
only then notifies, so a handler reading any derived value during the
notification always sees a value computed from the latest inputs.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Iterable

_logger = logging.getLogger(__name__)


class Signal:
    """Observer callback list.

    Thread-safe: all handler mutations and emissions are protected by a lock.
    Exceptions raised by individual handlers are caught and logged so that one
    failing handler does not prevent subsequent handlers from executing.
    """

    def __init__(self) -> None:
        self._handlers: list[Callable] = []
        self._lock = threading.Lock()

    def connect(self, handler: Callable) -> None:
        with self._lock:
            if handler not in self._handlers:
                self._handlers.append(handler)

    def disconnect(self, handler: Callable) -> None:
        with self._lock:
            self._handlers.remove(handler)

    def emit(self, *args: Any, **kwargs: Any) -> None:
        with self._lock:
            handlers = list(self._handlers)
        for handler in handlers:
            try:
                handler(*args, **kwargs)
            except Exception as exc:
                _logger.error("Signal handler %r failed: %s", handler, exc)

    @property
    def handler_count(self) -> int:
        with self._lock:
            return len(self._handlers)


class _Node:
    """Graph bookkeeping shared by writable and derived observables."""

    def __init__(self) -> None:
        self.changed = Signal()
        self._dependents: list[Computed] = []

    def _add_dependent(self, dependent: Computed) -> None:
        if dependent not in self._dependents:
            self._dependents.append(dependent)

    def _remove_dependent(self, dependent: Computed) -> None:
        if dependent in self._dependents:
            self._dependents.remove(dependent)

    def _invalidate_dependents(self) -> None:
        for dependent in self._dependents:
            dependent._invalidate()


class ObservableProperty(_Node):
    """Writable leaf of the observable graph.

    Emits ``changed(new_value, old_value)`` whenever the value is set to a value
    unequal to the current one.
    """

    def __init__(self, initial_value: Any = None) -> None:
        super().__init__()
        self._value = initial_value

    @property
    def value(self) -> Any:
        return self._value

    @value.setter
    def value(self, new_value: Any) -> None:
        if self._value != new_value:
            old_value = self._value
            self._value = new_value
            self._invalidate_dependents()
            self.changed.emit(new_value, old_value)

    def __repr__(self) -> str:
        return f"ObservableProperty({self._value!r})"


class Computed(_Node):
    """Read-only value derived from other observables.

    *compute* is a zero-argument callable reading ``.value`` of the
    *sources*.  The value is cached and recomputed lazily after any source
    changed; ``changed(new, old)`` is emitted only when the recomputed value
    differs from the last one observers were told about.
    """

    def __init__(self, compute: Callable[[], Any], sources: Iterable[_Node] = ()) -> None:
        super().__init__()
        self._compute = compute
        self._dirty = False
        self._value = compute()
        self._notified = self._value
        self._sources: list[_Node] = list(sources)
        for source in self._sources:
            source._add_dependent(self)
            source.changed.connect(self._on_source_changed)

    def detach(self) -> None:
        """Unhook from every source; the last value stays readable."""
        for source in self._sources:
            source._remove_dependent(self)
            try:
                source.changed.disconnect(self._on_source_changed)
            except ValueError:
                pass
        self._sources = []

    @property
    def value(self) -> Any:
        if self._dirty:
            self._dirty = False
            self._value = self._compute()
        return self._value

    def _invalidate(self) -> None:
        # Always walk downstream: a dependent may have been recomputed
        # without reading this node, which leaves it clean while we are dirty.
        self._dirty = True
        self._invalidate_dependents()

    def _on_source_changed(self, *_args: Any) -> None:
        new_value = self.value
        if new_value != self._notified:
            old_value = self._notified
            self._notified = new_value
            self.changed.emit(new_value, old_value)

    def __repr__(self) -> str:
        return f"Computed({self.value!r})"
