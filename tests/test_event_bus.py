from unittest.mock import MagicMock

from pagesync.events.bus import CREATED, PATCHED, EventBus


def test_emit_reaches_handlers_of_that_event_only():
    bus = EventBus()
    created = MagicMock()
    patched = MagicMock()
    bus.on(CREATED, created)
    bus.on(PATCHED, patched)

    delivered = bus.emit(CREATED, {"id": 1})

    created.assert_called_once_with({"id": 1})
    patched.assert_not_called()
    assert delivered == 1


def test_cancel_unsubscribes():
    bus = EventBus()
    handler = MagicMock()
    sub = bus.on(CREATED, handler)

    sub.cancel()
    bus.emit(CREATED, {})

    handler.assert_not_called()
    assert sub.active is False
    assert bus.handler_count(CREATED) == 0


def test_off_twice_is_harmless():
    bus = EventBus()
    sub = bus.on(CREATED, MagicMock())

    bus.off(sub)
    bus.off(sub)

    assert bus.handler_count(CREATED) == 0


def test_failing_handler_is_logged_and_others_run():
    logger = MagicMock()
    bus = EventBus(logger=logger)
    ok = MagicMock()
    bus.on(CREATED, MagicMock(side_effect=ValueError("bad")))
    bus.on(CREATED, ok)

    delivered = bus.emit(CREATED, 1)

    ok.assert_called_once_with(1)
    logger.error.assert_called_once()
    assert delivered == 1
