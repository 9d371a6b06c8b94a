"""Exceptions raised by the LogFlake client."""

from __future__ import annotations


class LogFlakeError(Exception):
    """Base exception for LogFlake client errors."""
    pass


class ConfigurationError(LogFlakeError):
    """Invalid client configuration (raised at construction time)."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field


class EncodingError(LogFlakeError):
    """A record payload could not be encoded for transport."""
    pass
