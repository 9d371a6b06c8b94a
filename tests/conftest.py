"""Shared test fixtures for the LogFlake client tests."""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from typing import Callable

import pytest

from logflake.client import LogFlake
from logflake.encoding import decode_payload
from logflake.models import Category


STARTUP_PREFIX = "LogFlake started on "


@dataclass
class Attempt:
    """One call made to a fake transport."""
    category: Category
    body: bytes

    @property
    def document(self) -> dict:
        return json.loads(decode_payload(self.body))

    @property
    def is_startup(self) -> bool:
        return (
            self.category == Category.LOG
            and self.document.get("content", "").startswith(STARTUP_PREFIX)
        )


@dataclass
class ScriptedTransport:
    """
    Fake transport returning scripted outcomes.

    `outcome` receives the attempt and returns success; by default every
    attempt succeeds. The startup announcement always succeeds so tests
    only see the records they queue.
    """
    outcome: Callable[[Attempt], bool] = lambda attempt: True

    attempts: list[Attempt] = field(default_factory=list, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False)

    def post(self, category: Category, body: bytes) -> bool:
        attempt = Attempt(category=category, body=body)
        with self._lock:
            self.attempts.append(attempt)
        if attempt.is_startup:
            return True
        return self.outcome(attempt)

    @property
    def record_attempts(self) -> list[Attempt]:
        """Attempts excluding the startup announcement."""
        with self._lock:
            return [a for a in self.attempts if not a.is_startup]


def fail_times(n: int) -> Callable[[Attempt], bool]:
    """Outcome that fails the first `n` attempts and then succeeds."""
    state = {"calls": 0}

    def outcome(attempt: Attempt) -> bool:
        state["calls"] += 1
        return state["calls"] > n

    return outcome


@pytest.fixture
def transport() -> ScriptedTransport:
    return ScriptedTransport()


@pytest.fixture
def make_client():
    """Factory for clients that are always shut down after the test."""
    clients: list[LogFlake] = []

    def factory(transport, app_id: str = "test-app", **kwargs) -> LogFlake:
        client = LogFlake(app_id, "https://logflake.test", transport=transport, **kwargs)
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.shutdown(timeout=10)
