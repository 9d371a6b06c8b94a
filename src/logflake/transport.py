"""HTTP transport to the LogFlake ingestion endpoint."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import httpx

from . import __version__
from .models import Category


logger = logging.getLogger(__name__)

POST_TIMEOUT_SECONDS = 3.0
USER_AGENT = f"logflake-client-python/{__version__}"


class DeadlineExceeded(Exception):
    """An attempt ran past its total time budget."""
    pass


@dataclass
class IngestionTransport:
    """
    Posts encoded records to `{endpoint}/api/ingestion/{app_id}/{queue}`.

    Stateless: every attempt opens its own client, and no error ever
    escapes post(); callers only learn success or failure.

    `timeout` bounds the whole attempt, not each network phase: the
    response body is streamed and the attempt fails once the deadline
    passes. A single blocking read can still last up to `timeout`, so an
    attempt never takes longer than twice that.
    """
    endpoint: str
    app_id: str
    timeout: float = POST_TIMEOUT_SECONDS

    # Optional httpx transport (e.g. httpx.MockTransport in tests)
    transport: httpx.BaseTransport | None = None

    def url_for(self, category: Category) -> str:
        base = self.endpoint.rstrip("/")
        return f"{base}/api/ingestion/{self.app_id}/{Category(category).value}"

    def post(self, category: Category | str, body: bytes) -> bool:
        """
        Deliver one encoded record.

        Returns:
            True if the service answered with a 2xx status within `timeout`
        """
        try:
            category = Category(category)
        except ValueError:
            logger.warning(f"Refusing to post to unknown queue: {category!r}")
            return False

        url = self.url_for(category)
        deadline = time.monotonic() + self.timeout

        try:
            with httpx.Client(
                timeout=self.timeout,
                headers=self._get_headers(),
                transport=self.transport,
            ) as client:
                with client.stream(
                    "POST",
                    url,
                    content=body,
                    headers={"Content-Type": "application/octet-stream"},
                ) as response:
                    self._check_deadline(deadline)
                    for _ in response.iter_raw():
                        self._check_deadline(deadline)
        except DeadlineExceeded:
            logger.debug(f"Attempt to {url} exceeded {self.timeout}s")
            return False
        except httpx.TimeoutException:
            logger.debug(f"Timed out posting to {url}")
            return False
        except Exception as e:
            logger.debug(f"Error posting to {url}: {type(e).__name__}: {e}")
            return False

        if not response.is_success:
            logger.debug(f"Ingestion rejected record: {url} (status {response.status_code})")
            return False
        return True

    @staticmethod
    def _check_deadline(deadline: float) -> None:
        if time.monotonic() > deadline:
            raise DeadlineExceeded()

    def _get_headers(self) -> dict[str, str]:
        """Build default request headers."""
        return {
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }
