"""LogFlake client: public API for shipping logs and performance samples."""

from __future__ import annotations

import json
import logging
import socket
import traceback
from typing import Any

from .config import ClientConfig, resolve_endpoint
from .dispatcher import Dispatcher, Transport
from .errors import ConfigurationError
from .models import Category, LogLevel, LogObject, PendingLog
from .performance import PerformanceCounter
from .queue import DeliveryQueue
from .transport import IngestionTransport


logger = logging.getLogger(__name__)


class LogFlake:
    """
    Client for a single LogFlake application.

    Records are queued and delivered by a background thread, so every
    send_* call returns immediately and never raises for delivery
    problems. Call shutdown() (or use the client as a context manager)
    to flush the queue; records still queued when the interpreter exits
    without a shutdown are lost.

    Usage:
        with LogFlake("my-app-id") as logflake:
            logflake.send_log("user signed in", {"user": 42}, level=LogLevel.INFO)
            logflake.send_performance("checkout", 128)

        # Or with a custom endpoint
        logflake = LogFlake("my-app-id", "https://logflake.internal")
        ...
        logflake.shutdown()
    """

    def __init__(
        self,
        app_id: str,
        endpoint: str | None = None,
        *,
        hostname: str | None = None,
        transport: Transport | None = None,
    ):
        if not app_id or not str(app_id).strip():
            raise ConfigurationError("app_id", "is required")

        self.app_id = str(app_id).strip()
        self.endpoint = resolve_endpoint(endpoint)
        self._hostname = socket.gethostname()
        self.set_hostname(hostname)

        if transport is None:
            transport = IngestionTransport(self.endpoint, self.app_id)

        self._queue = DeliveryQueue()
        self._dropped_after_shutdown = 0
        self._dropped_unserializable = 0
        self._dispatcher = Dispatcher(
            queue=self._queue,
            transport=transport,
            on_start=self._announce,
        )
        self._dispatcher.start()

    @classmethod
    def from_config(cls, config: ClientConfig, transport: Transport | None = None) -> LogFlake:
        """Create a client from a ClientConfig."""
        config.validate()
        return cls(
            config.app_id,
            config.endpoint,
            hostname=config.hostname,
            transport=transport,
        )

    # -- hostname --

    def get_hostname(self) -> str | None:
        return self._hostname

    def set_hostname(self, hostname: str | None = None) -> None:
        """Override the reported hostname; blank restores the machine name."""
        if hostname is None or not hostname.strip():
            self._hostname = socket.gethostname()
        else:
            self._hostname = hostname.strip()

    # -- sending --

    def send_log(
        self,
        content: str,
        parameters: dict[str, Any] | None = None,
        *,
        level: LogLevel = LogLevel.DEBUG,
        correlation: str | None = None,
    ) -> None:
        """Queue a log entry (fire and forget)."""
        record = LogObject.log(
            level=level,
            content=content,
            hostname=self.get_hostname(),
            correlation=correlation,
            params=parameters,
        )
        self._enqueue(Category.LOG, record)

    def send_exception(
        self,
        exc: BaseException,
        correlation: str | None = None,
        data: dict[str, Any] | None = None,
    ) -> None:
        """Queue an exception with its traceback (and optional extra data)."""
        content = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)).rstrip()
        if data:
            try:
                rendered = json.dumps(data, indent=2, default=str)
            except (TypeError, ValueError, RecursionError):
                rendered = repr(data)
            content += "\nData:\n" + rendered

        record = LogObject.log(
            level=LogLevel.EXCEPTION,
            content=content,
            hostname=self.get_hostname(),
            correlation=correlation,
        )
        self._enqueue(Category.LOG, record)

    def send_performance(self, label: str, duration: int) -> None:
        """Queue a performance sample; duration is in milliseconds."""
        self._enqueue(Category.PERFORMANCE, LogObject.performance(label, duration))

    def measure_performance(self, label: str) -> PerformanceCounter:
        """Start a stopwatch that sends a performance sample when stopped."""
        return PerformanceCounter(self, label)

    def _enqueue(self, category: Category, record: LogObject) -> None:
        try:
            payload = record.to_json()
        except (TypeError, ValueError, RecursionError) as e:
            logger.warning(f"Dropping {category.value} record that cannot be serialized: {e}")
            self._dropped_unserializable += 1
            return

        if not self._queue.enqueue(PendingLog(category=category, payload=payload)):
            logger.warning(f"LogFlake client is shut down, dropping {category.value} record")
            self._dropped_after_shutdown += 1

    def _announce(self) -> None:
        self.send_log(f"LogFlake started on {self.get_hostname()}")

    # -- lifecycle --

    def shutdown(self, timeout: float | None = None) -> bool:
        """
        Deliver everything still queued, then stop the worker.

        Blocks until the queue is drained (or `timeout` expires).
        """
        return self._dispatcher.shutdown(timeout)

    @property
    def is_running(self) -> bool:
        return self._dispatcher.is_alive

    @property
    def pending(self) -> int:
        """Number of records waiting in the queue."""
        return len(self._queue)

    @property
    def stats(self) -> dict:
        """Get client statistics."""
        return {
            **self._dispatcher.stats,
            "dropped_after_shutdown": self._dropped_after_shutdown,
            "dropped_unserializable": self._dropped_unserializable,
        }

    def __enter__(self) -> LogFlake:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    def __repr__(self) -> str:
        return f"LogFlake(app_id={self.app_id!r}, endpoint={self.endpoint!r})"
