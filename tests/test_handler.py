"""Tests for the logging handler bridge."""

import logging

import pytest

from logflake.handler import LogFlakeHandler
from logflake.models import LogLevel


@pytest.fixture
def app_logger():
    logger = logging.getLogger("tests.app")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    yield logger
    logger.handlers.clear()


class TestLogFlakeHandler:
    def test_forwards_records(self, make_client, transport, app_logger):
        client = make_client(transport, hostname="web-1")
        app_logger.addHandler(LogFlakeHandler(client))

        app_logger.warning("disk at %d%%", 91, extra={"correlation": "req-3"})
        client.shutdown(timeout=5)

        document = transport.record_attempts[0].document
        assert document["content"] == "disk at 91%"
        assert document["level"] == LogLevel.WARN
        assert document["correlation"] == "req-3"
        assert document["params"] == {"logger": "tests.app"}
        assert document["hostname"] == "web-1"

    def test_exceptions_use_exception_level(self, make_client, transport, app_logger):
        client = make_client(transport)
        app_logger.addHandler(LogFlakeHandler(client))

        try:
            1 / 0
        except ZeroDivisionError:
            app_logger.exception("division failed")
        client.shutdown(timeout=5)

        document = transport.record_attempts[0].document
        assert document["level"] == LogLevel.EXCEPTION
        assert "ZeroDivisionError" in document["content"]
        assert '"message": "division failed"' in document["content"]

    def test_respects_handler_level(self, make_client, transport, app_logger):
        client = make_client(transport)
        app_logger.addHandler(LogFlakeHandler(client, level=logging.ERROR))

        app_logger.info("ignored")
        app_logger.error("kept")
        client.shutdown(timeout=5)

        assert [a.document["content"] for a in transport.record_attempts] == ["kept"]

    @pytest.mark.parametrize("name", ["logflake", "logflake.dispatcher", "httpx", "httpcore.connection"])
    def test_ignores_own_loggers(self, make_client, transport, name):
        client = make_client(transport)
        handler = LogFlakeHandler(client)
        record = logging.LogRecord(name, logging.INFO, __file__, 1, "loop", None, None)

        assert not handler.filter(record)

    def test_without_logger_name(self, make_client, transport, app_logger):
        client = make_client(transport)
        app_logger.addHandler(LogFlakeHandler(client, include_logger_name=False))

        app_logger.info("bare")
        client.shutdown(timeout=5)

        assert "params" not in transport.record_attempts[0].document
