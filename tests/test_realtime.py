from unittest.mock import MagicMock

import pytest

from pagesync.application.services.realtime import RealtimeInvalidator
from pagesync.events.bus import CREATED, PATCHED, REMOVED, SERVICE_EVENTS, EventBus


class TestRealtimeInvalidator:
    @pytest.mark.parametrize("event_name", [CREATED, PATCHED, REMOVED])
    def test_each_event_invalidates(self, event_name):
        bus = EventBus()
        invalidate = MagicMock()
        realtime = RealtimeInvalidator(bus, invalidate)
        realtime.start()

        bus.emit(event_name, {"id": 99})

        invalidate.assert_called_once_with()

    def test_start_is_idempotent(self):
        bus = EventBus()
        realtime = RealtimeInvalidator(bus, MagicMock())

        realtime.start()
        realtime.start()

        assert all(bus.handler_count(name) == 1 for name in SERVICE_EVENTS)
        assert realtime.active is True

    def test_stop_unsubscribes(self):
        bus = EventBus()
        invalidate = MagicMock()
        realtime = RealtimeInvalidator(bus, invalidate)
        realtime.start()

        realtime.stop()
        bus.emit(CREATED, {"id": 1})

        invalidate.assert_not_called()
        assert realtime.active is False
        assert all(bus.handler_count(name) == 0 for name in SERVICE_EVENTS)
