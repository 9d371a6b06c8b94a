"""Stopwatch that reports its elapsed time as a performance sample."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .client import LogFlake


class PerformanceCounter:
    """
    Measures a labelled operation and sends the duration in milliseconds.

    Usage:
        with logflake.measure_performance("db.query"):
            run_query()

        counter = logflake.measure_performance("import")
        ...
        counter.pause()
        ...
        counter.resume()
        duration_ms = counter.stop()
    """

    def __init__(self, client: LogFlake, label: str, start: bool = True):
        self._client = client
        self.label = label
        self._accumulated = 0.0
        self._started_at: float | None = None
        self._sent = False
        if start:
            self.start()

    def start(self) -> None:
        if self._started_at is None:
            self._started_at = time.perf_counter()

    def pause(self) -> None:
        if self._started_at is not None:
            self._accumulated += time.perf_counter() - self._started_at
            self._started_at = None

    def resume(self) -> None:
        self.start()

    def restart(self) -> None:
        """Discard elapsed time and start measuring again."""
        self._accumulated = 0.0
        self._sent = False
        self._started_at = time.perf_counter()

    @property
    def running(self) -> bool:
        return self._started_at is not None

    @property
    def elapsed_ms(self) -> int:
        elapsed = self._accumulated
        if self._started_at is not None:
            elapsed += time.perf_counter() - self._started_at
        return int(elapsed * 1000)

    def stop(self) -> int:
        """Stop measuring and send the sample (only once per measurement)."""
        self.pause()
        duration = self.elapsed_ms
        if not self._sent:
            self._client.send_performance(self.label, duration)
            self._sent = True
        return duration

    def __enter__(self) -> PerformanceCounter:
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
