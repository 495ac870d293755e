import io
import logging

from pagesync.utils.logging import CONSOLE_HANDLER_NAME, enable_console_logging, get_logger


def _remove_console_handler():
    logger = get_logger()
    for handler in list(logger.handlers):
        if handler.get_name() == CONSOLE_HANDLER_NAME:
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


def test_get_logger_nests_under_package():
    assert get_logger().name == "pagesync"
    assert get_logger("store").name == "pagesync.store"
    assert get_logger("pagesync.cache.query_cache").name == "pagesync.cache.query_cache"


def test_console_logging_is_installed_once():
    stream = io.StringIO()
    try:
        first = enable_console_logging(logging.INFO, stream=stream)
        second = enable_console_logging(logging.DEBUG, stream=stream)

        get_logger("store").debug("page written")

        assert first is second
        assert second.level == logging.DEBUG
        assert "DEBUG pagesync.store: page written" in stream.getvalue()
    finally:
        _remove_console_handler()
