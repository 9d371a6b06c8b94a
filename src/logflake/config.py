"""Client configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

from .errors import ConfigurationError


PRODUCTION_ENDPOINT = "https://app.logflake.io"


def resolve_endpoint(endpoint: str | None) -> str:
    """
    Return the ingestion endpoint to use.

    Blank or missing values select the production endpoint; anything else
    must be an absolute URI.

    Raises:
        ConfigurationError: If the endpoint is not a well-formed absolute URI
    """
    if endpoint is None or not endpoint.strip():
        return PRODUCTION_ENDPOINT

    endpoint = endpoint.strip()
    if any(ch.isspace() for ch in endpoint):
        raise ConfigurationError("endpoint", "must be a fully qualified URI")

    try:
        parts = urlsplit(endpoint)
    except ValueError as e:
        raise ConfigurationError("endpoint", f"must be a fully qualified URI ({e})") from e

    if not parts.scheme or not parts.netloc or not parts.hostname:
        raise ConfigurationError("endpoint", "must be a fully qualified URI")
    if parts.scheme.lower() not in ("http", "https"):
        raise ConfigurationError("endpoint", f"unsupported scheme: {parts.scheme}")

    return endpoint


@dataclass
class ClientConfig:
    """
    Configuration for the LogFlake client.

    Can be set via:
    - Constructor arguments
    - Environment variables (LOGFLAKE_*)
    - Config file (YAML or JSON)
    """
    # Application identifier assigned by LogFlake
    app_id: str | None = field(
        default_factory=lambda: os.environ.get("LOGFLAKE_APP_ID")
    )

    # Ingestion endpoint (blank = production)
    endpoint: str | None = field(
        default_factory=lambda: os.environ.get("LOGFLAKE_ENDPOINT")
    )

    # Hostname reported in log records (blank = machine name)
    hostname: str | None = field(
        default_factory=lambda: os.environ.get("LOGFLAKE_HOSTNAME")
    )

    # Master switch; when false callers (and the CLI) skip creating a client
    enabled: bool = field(
        default_factory=lambda: os.environ.get("LOGFLAKE_ENABLED", "true").lower() == "true"
    )

    def validate(self) -> None:
        """Check the configuration without starting anything."""
        if not self.app_id or not self.app_id.strip():
            raise ConfigurationError("app_id", "is required")
        resolve_endpoint(self.endpoint)

    @property
    def resolved_endpoint(self) -> str:
        return resolve_endpoint(self.endpoint)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ClientConfig:
        """Create config from dictionary (an optional `logflake` section is unwrapped)."""
        if "logflake" in data and isinstance(data["logflake"], dict):
            data = data["logflake"]

        known = {"app_id", "endpoint", "hostname", "enabled"}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError("config", f"unknown keys: {', '.join(sorted(unknown))}")

        return cls(**data)

    @classmethod
    def from_yaml(cls, path: str) -> ClientConfig:
        """Load config from YAML file."""
        import yaml
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})

    @classmethod
    def from_json(cls, path: str) -> ClientConfig:
        """Load config from JSON file."""
        import json
        with open(path, "r") as f:
            data = json.load(f)
        return cls.from_dict(data)
