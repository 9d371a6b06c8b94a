"""
LogFlake Client Library

Ships logs, exceptions and performance samples to a LogFlake ingestion
endpoint from a background thread.

Usage:
    from logflake import LogFlake, LogLevel

    with LogFlake("my-app-id") as logflake:
        logflake.send_log("started", level=LogLevel.INFO)

        try:
            risky()
        except Exception as e:
            logflake.send_exception(e, correlation="req-123")

        with logflake.measure_performance("report.render"):
            render()

    # Forward the standard logging module
    import logging
    from logflake import LogFlakeHandler

    logging.getLogger().addHandler(LogFlakeHandler(logflake))
"""

__version__ = "1.0.0"

from .client import LogFlake
from .config import ClientConfig, PRODUCTION_ENDPOINT, resolve_endpoint
from .dispatcher import Dispatcher, DispatcherState, MAX_RETRIES
from .encoding import decode_payload, encode_payload
from .errors import ConfigurationError, EncodingError, LogFlakeError
from .handler import LogFlakeHandler
from .models import Category, LogLevel, LogObject, PendingLog
from .performance import PerformanceCounter
from .queue import DeliveryQueue
from .transport import IngestionTransport, POST_TIMEOUT_SECONDS, USER_AGENT

__all__ = [
    # Core classes
    "LogFlake",
    "ClientConfig",
    "LogFlakeHandler",
    "PerformanceCounter",
    # Engine
    "DeliveryQueue",
    "Dispatcher",
    "DispatcherState",
    "IngestionTransport",
    "encode_payload",
    "decode_payload",
    "resolve_endpoint",
    # Records
    "Category",
    "LogLevel",
    "LogObject",
    "PendingLog",
    # Constants
    "MAX_RETRIES",
    "POST_TIMEOUT_SECONDS",
    "PRODUCTION_ENDPOINT",
    "USER_AGENT",
    # Exceptions
    "LogFlakeError",
    "ConfigurationError",
    "EncodingError",
]
