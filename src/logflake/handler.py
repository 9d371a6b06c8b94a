"""Bridge from the standard logging module to LogFlake."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .models import LogLevel

if TYPE_CHECKING:
    from .client import LogFlake


# Loggers whose records would feed back into the client
IGNORED_LOGGERS = ("logflake", "httpx", "httpcore")


class LogFlakeHandler(logging.Handler):
    """
    logging.Handler that ships records through a LogFlake client.

    Records carrying exception info are sent with send_exception; a
    `correlation` attribute (e.g. via `extra={"correlation": ...}`) is
    forwarded as the correlation id.

    Usage:
        handler = LogFlakeHandler(logflake, level=logging.INFO)
        logging.getLogger().addHandler(handler)
    """

    def __init__(self, client: LogFlake, level: int = logging.NOTSET, include_logger_name: bool = True):
        super().__init__(level)
        self.client = client
        self.include_logger_name = include_logger_name

    def filter(self, record: logging.LogRecord) -> bool:
        for name in IGNORED_LOGGERS:
            if record.name == name or record.name.startswith(name + "."):
                return False
        return super().filter(record)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            correlation = getattr(record, "correlation", None)
            if record.exc_info and record.exc_info[1] is not None:
                self.client.send_exception(
                    record.exc_info[1],
                    correlation=correlation,
                    data={"message": record.getMessage(), "logger": record.name},
                )
                return

            parameters = None
            if self.include_logger_name:
                parameters = {"logger": record.name}

            self.client.send_log(
                self.format(record),
                parameters,
                level=LogLevel.from_python(record.levelno),
                correlation=correlation,
            )
        except Exception:
            self.handleError(record)
