"""Record types shipped to the ingestion service."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any


class Category(str, Enum):
    """Destination queue on the ingestion service (value is the URL segment)."""
    LOG = "logs"
    PERFORMANCE = "performances"


class LogLevel(IntEnum):
    """Severity levels understood by the ingestion service."""
    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3
    FATAL = 4
    EXCEPTION = 5

    @classmethod
    def from_python(cls, levelno: int) -> LogLevel:
        """Map a stdlib logging level number onto a LogFlake level."""
        if levelno >= logging.CRITICAL:
            return cls.FATAL
        if levelno >= logging.ERROR:
            return cls.ERROR
        if levelno >= logging.WARNING:
            return cls.WARN
        if levelno >= logging.INFO:
            return cls.INFO
        return cls.DEBUG


@dataclass(slots=True)
class LogObject:
    """
    JSON document for a single log entry or performance sample.

    Unset fields are omitted from the serialized form.
    """
    level: LogLevel | None = None
    hostname: str | None = None
    content: str | None = None
    correlation: str | None = None
    params: dict[str, Any] | None = None

    # Performance samples
    label: str | None = None
    duration: int | None = None

    @classmethod
    def log(
        cls,
        level: LogLevel,
        content: str | None,
        hostname: str | None = None,
        correlation: str | None = None,
        params: dict[str, Any] | None = None,
    ) -> LogObject:
        return cls(
            level=LogLevel(level),
            hostname=hostname,
            content=content,
            correlation=correlation,
            params=params,
        )

    @classmethod
    def performance(cls, label: str, duration: int) -> LogObject:
        return cls(label=label, duration=int(duration))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        data = {
            "level": int(self.level) if self.level is not None else None,
            "hostname": self.hostname,
            "content": self.content,
            "correlation": self.correlation,
            "params": self.params,
            "label": self.label,
            "duration": self.duration,
        }
        return {k: v for k, v in data.items() if v is not None}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)


@dataclass(slots=True)
class PendingLog:
    """
    A serialized record waiting in the delivery queue.

    `attempts` counts delivery attempts and only ever goes up.
    """
    category: Category
    payload: str
    attempts: int = field(default=0)

    def __post_init__(self):
        # Raises ValueError for anything that is not a known destination
        self.category = Category(self.category)
        if self.attempts < 0:
            raise ValueError("attempts must be >= 0")
