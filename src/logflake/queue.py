"""Delivery queue shared by producer threads and the dispatcher."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass, field

from .models import PendingLog


@dataclass
class DeliveryQueue:
    """
    Unbounded FIFO of pending records paired with a wake signal.

    Any number of threads may enqueue; exactly one consumer dequeues.
    The wake signal is raised on every enqueue, after the record is
    visible to the consumer, so a consumer that clears the signal and
    then drains can never sleep through new work.

    Once closed (see close_if_empty) the queue refuses new records.
    """
    _records: deque[PendingLog] = field(default_factory=deque, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False)
    _wake: threading.Event = field(default_factory=threading.Event, init=False)
    _closed: bool = field(default=False, init=False)

    def enqueue(self, record: PendingLog) -> bool:
        """
        Append a record to the back of the queue (never blocks).

        Returns False, without adding the record, if the queue is closed.
        """
        with self._lock:
            if self._closed:
                return False
            self._records.append(record)
        self._wake.set()
        return True

    def dequeue_if_any(self) -> PendingLog | None:
        """Pop the record at the front, or None if the queue is empty."""
        with self._lock:
            if not self._records:
                return None
            return self._records.popleft()

    def close_if_empty(self) -> bool:
        """
        Close the queue if it holds no records.

        Checked and closed under the same lock as enqueue, so a record is
        either drained before the close or refused by enqueue.
        """
        with self._lock:
            if self._records:
                return False
            self._closed = True
            return True

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def wake(self) -> None:
        """Raise the wake signal without adding work."""
        self._wake.set()

    def wait_for_wake(self, timeout: float | None = None) -> bool:
        """
        Block until the wake signal is raised, then clear it.

        Returns False only if `timeout` expired first.
        """
        if not self._wake.wait(timeout):
            return False
        self._wake.clear()
        return True

    @property
    def signalled(self) -> bool:
        return self._wake.is_set()

    def is_empty(self) -> bool:
        with self._lock:
            return not self._records

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
