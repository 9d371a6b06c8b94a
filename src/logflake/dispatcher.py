"""Background worker that drains the delivery queue."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Protocol

from .encoding import encode_payload
from .errors import EncodingError
from .models import Category, PendingLog
from .queue import DeliveryQueue


logger = logging.getLogger(__name__)

MAX_RETRIES = 3


class DispatcherState(str, Enum):
    IDLE = "idle"                       # Waiting for the wake signal
    DRAINING = "draining"               # Working through the queue
    SHUTTING_DOWN = "shutting_down"     # Queue drained after shutdown request
    STOPPED = "stopped"                 # Worker thread has exited


class Transport(Protocol):
    def post(self, category: Category, body: bytes) -> bool:
        ...


@dataclass
class Dispatcher:
    """
    Single worker thread delivering queued records one at a time.

    A failed record goes back to the end of the queue until it has been
    attempted `max_retries` times; after that it is dropped. Shutdown is
    cooperative: the worker stops only once the queue is empty.
    """
    queue: DeliveryQueue
    transport: Transport
    max_retries: int = MAX_RETRIES

    # Called on the worker thread before the first wait
    on_start: Callable[[], None] | None = None

    # Internal state
    _state: DispatcherState = field(default=DispatcherState.IDLE, init=False)
    _thread: threading.Thread | None = field(default=None, init=False)
    _stopping: threading.Event = field(default_factory=threading.Event, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False)
    _stats: dict = field(default_factory=dict, init=False)

    def __post_init__(self):
        if self.max_retries < 1:
            raise ValueError("max_retries must be >= 1")
        self._stats = {
            "attempts": 0,
            "delivered": 0,
            "failed": 0,
            "retried": 0,
            "dropped": 0,
        }

    def start(self) -> None:
        """Start the worker thread."""
        with self._lock:
            if self._thread is not None:
                raise RuntimeError("Dispatcher already started")
            self._thread = threading.Thread(
                target=self._run,
                name="logflake-dispatcher",
                daemon=True,
            )
        self._thread.start()

    def shutdown(self, timeout: float | None = None) -> bool:
        """
        Request shutdown and wait for the queue to drain.

        Returns True once the worker has stopped, False if `timeout`
        expired first.
        """
        self._stopping.set()
        self.queue.wake()

        thread = self._thread
        if thread is None:
            self._state = DispatcherState.STOPPED
            return True
        if thread is threading.current_thread():
            # Called from on_start or a transport; the loop exits on its own
            return False

        thread.join(timeout)
        return not thread.is_alive()

    @property
    def shutdown_requested(self) -> bool:
        return self._stopping.is_set()

    def _run(self) -> None:
        logger.info("LogFlake dispatcher started")

        if self.on_start is not None:
            try:
                self.on_start()
            except Exception as e:
                logger.error(f"Dispatcher start hook failed: {e}")

        while True:
            self._state = DispatcherState.IDLE
            self.queue.wait_for_wake()

            self._state = DispatcherState.DRAINING
            self._drain()

            if self._stopping.is_set() and self.queue.close_if_empty():
                break

        self._state = DispatcherState.SHUTTING_DOWN
        logger.info(f"LogFlake dispatcher stopped. Stats: {self.stats}")
        self._state = DispatcherState.STOPPED

    def _drain(self) -> None:
        """Process records until the queue is empty."""
        while True:
            record = self.queue.dequeue_if_any()
            if record is None:
                return
            self._process(record)

    def _process(self, record: PendingLog) -> None:
        record.attempts += 1
        self._stats["attempts"] += 1

        if self._attempt(record):
            self._stats["delivered"] += 1
            return

        self._stats["failed"] += 1
        if record.attempts < self.max_retries:
            self._stats["retried"] += 1
            self.queue.enqueue(record)
        else:
            self._stats["dropped"] += 1
            logger.warning(
                f"Dropping {record.category.value} record after "
                f"{record.attempts} failed attempts"
            )

    def _attempt(self, record: PendingLog) -> bool:
        """Encode and post one record; any fault counts as a failed attempt."""
        try:
            body = encode_payload(record.payload)
        except EncodingError as e:
            logger.debug(f"{e} (attempt {record.attempts})")
            return False

        try:
            success = bool(self.transport.post(record.category, body))
        except Exception as e:
            logger.error(f"Transport error: {type(e).__name__}: {e}")
            return False

        if not success:
            logger.debug(
                f"Delivery of {record.category.value} record failed "
                f"(attempt {record.attempts}/{self.max_retries})"
            )
        return success

    @property
    def state(self) -> DispatcherState:
        return self._state

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def stats(self) -> dict:
        """Get dispatcher statistics."""
        return {
            **self._stats,
            "queue_depth": len(self.queue),
            "state": self._state.value,
        }
