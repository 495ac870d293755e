"""Tests for the pure Python signal graph."""

from unittest.mock import MagicMock

from pagesync.reactive.base import BaseViewModel
from pagesync.reactive.signal import Computed, ObservableProperty, Signal


class TestSignal:
    def test_emit_calls_handlers_in_order(self):
        sig = Signal()
        calls = []
        sig.connect(lambda v: calls.append(("a", v)))
        sig.connect(lambda v: calls.append(("b", v)))

        sig.emit(1)

        assert calls == [("a", 1), ("b", 1)]

    def test_connect_is_idempotent(self):
        sig = Signal()
        handler = MagicMock()
        sig.connect(handler)
        sig.connect(handler)

        sig.emit()

        handler.assert_called_once_with()
        assert sig.handler_count == 1

    def test_disconnect(self):
        sig = Signal()
        handler = MagicMock()
        sig.connect(handler)
        sig.disconnect(handler)

        sig.emit("x")

        handler.assert_not_called()

    def test_failing_handler_does_not_stop_others(self):
        sig = Signal()
        after = MagicMock()
        sig.connect(MagicMock(side_effect=RuntimeError("boom")))
        sig.connect(after)

        sig.emit(5)

        after.assert_called_once_with(5)


class TestObservableProperty:
    def test_emits_new_and_old(self):
        prop = ObservableProperty(1)
        handler = MagicMock()
        prop.changed.connect(handler)

        prop.value = 2

        handler.assert_called_once_with(2, 1)

    def test_equal_value_is_silent(self):
        prop = ObservableProperty({"a": 1})
        handler = MagicMock()
        prop.changed.connect(handler)

        prop.value = {"a": 1}

        handler.assert_not_called()


class TestComputed:
    def test_recomputes_after_source_change(self):
        source = ObservableProperty(2)
        doubled = Computed(lambda: source.value * 2, (source,))

        source.value = 5

        assert doubled.value == 10

    def test_emits_only_when_derived_value_changes(self):
        source = ObservableProperty(3)
        parity = Computed(lambda: source.value % 2, (source,))
        handler = MagicMock()
        parity.changed.connect(handler)

        source.value = 5
        handler.assert_not_called()

        source.value = 6
        handler.assert_called_once_with(0, 1)

    def test_diamond_is_consistent_during_notification(self):
        a = ObservableProperty(1)
        b = Computed(lambda: a.value * 2, (a,))
        c = Computed(lambda: a.value + 1, (a,))
        d = Computed(lambda: b.value + c.value, (b, c))
        seen = []
        d.changed.connect(lambda new, old: seen.append((new, old)))

        a.value = 2

        assert d.value == 7
        # d never reports the mixed state 4 + 2
        assert seen == [(7, 4)]

    def test_handler_of_source_reads_fresh_derived_value(self):
        a = ObservableProperty(1)
        b = Computed(lambda: a.value * 10, (a,))
        observed = []
        a.changed.connect(lambda *_: observed.append(b.value))

        a.value = 4

        assert observed == [40]

    def test_chain_propagates(self):
        a = ObservableProperty(1)
        b = Computed(lambda: a.value + 1, (a,))
        c = Computed(lambda: b.value + 1, (b,))

        a.value = 10

        assert c.value == 12

    def test_detach_freezes_value_and_drops_handlers(self):
        a = ObservableProperty(1)
        c = Computed(lambda: a.value + 1, (a,))
        seen = []
        c.changed.connect(lambda new, old: seen.append(new))

        c.detach()
        a.value = 5

        assert c.value == 2
        assert seen == []
        assert a.changed.handler_count == 0
        assert a._dependents == []
        c.detach()


class TestBaseViewModel:
    def test_dispose_disconnects_and_runs_finalizers(self):
        vm = BaseViewModel()
        sig = Signal()
        handler = MagicMock()
        finalizer = MagicMock()
        vm.connect_signal(sig, handler)
        vm.add_finalizer(finalizer)

        vm.dispose()
        sig.emit()

        handler.assert_not_called()
        finalizer.assert_called_once_with()
        assert vm.disposed is True

    def test_dispose_twice_is_noop(self):
        vm = BaseViewModel()
        finalizer = MagicMock()
        vm.add_finalizer(finalizer)

        vm.dispose()
        vm.dispose()

        finalizer.assert_called_once_with()

    def test_dispose_detaches_computed_values(self):
        vm = BaseViewModel()
        a = ObservableProperty(1)
        doubled = vm.computed(lambda: a.value * 2, (a,))

        vm.dispose()
        a.value = 3

        assert doubled.value == 2
        assert a.changed.handler_count == 0

    def test_finalizers_run_newest_first(self):
        vm = BaseViewModel()
        order = []
        vm.add_finalizer(lambda: order.append("first"))
        vm.add_finalizer(lambda: order.append("second"))

        vm.dispose()

        assert order == ["second", "first"]
