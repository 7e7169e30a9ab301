"""HTTP client for the live proof feed endpoint.

The endpoint returns ``{"proofFeed": [...]}``; a missing ``proofFeed`` key
means an empty feed. Connection failures are retried with tenacity; every
failure surfaces as ``FeedFetchError``.
"""

from __future__ import annotations

import time
from typing import Any

import httpx
import structlog
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from greenloop.core.config import LiveFeedConfig
from greenloop.core.errors import FeedFetchError
from greenloop.core.metrics import greenloop_live_feed_fetch_latency_seconds
from greenloop.core.tracing import get_tracing_headers
from greenloop.schemas.v1.live_feed import LiveFeedEntry

logger = structlog.get_logger(__name__)

_ENTRIES_ADAPTER = TypeAdapter(list[LiveFeedEntry])


class MirrorFeedClient:
    """Fetches the live proof feed."""

    def __init__(
        self,
        url: str,
        *,
        timeout_seconds: float = 10.0,
        retry_attempts: int = 3,
        retry_backoff_seconds: float = 0.5,
    ) -> None:
        self._url = url
        self._timeout = timeout_seconds
        self._retry_attempts = max(1, retry_attempts)
        self._retry_backoff = retry_backoff_seconds
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_config(cls, config: LiveFeedConfig) -> MirrorFeedClient:
        return cls(
            config.url,
            timeout_seconds=config.timeout_seconds,
            retry_attempts=config.retry_attempts,
        )

    @property
    def url(self) -> str:
        return self._url

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def fetch_proof_feed(self) -> list[LiveFeedEntry]:
        """GET the feed and return its entries."""
        started = time.perf_counter()
        try:
            response = await self._get_with_retry()
        except httpx.HTTPError as exc:
            raise FeedFetchError(
                "Live proof feed request failed",
                url=self._url,
                details={"error": str(exc)},
            ) from exc
        finally:
            greenloop_live_feed_fetch_latency_seconds.observe(time.perf_counter() - started)

        if not response.is_success:
            raise FeedFetchError(
                f"Live proof feed returned HTTP {response.status_code}",
                url=self._url,
                status=response.status_code,
            )

        try:
            payload: Any = response.json()
        except ValueError as exc:
            raise FeedFetchError(
                "Live proof feed returned invalid JSON",
                url=self._url,
                status=response.status_code,
            ) from exc

        return self._parse_entries(payload, response.status_code)

    def _parse_entries(self, payload: Any, status: int) -> list[LiveFeedEntry]:
        if not isinstance(payload, dict):
            raise FeedFetchError("Live proof feed body is not an object", url=self._url, status=status)

        feed = payload.get("proofFeed")
        if feed is None:
            return []

        try:
            return _ENTRIES_ADAPTER.validate_python(feed)
        except PydanticValidationError as exc:
            raise FeedFetchError(
                "Live proof feed entries are malformed",
                url=self._url,
                status=status,
                details={"error_count": exc.error_count()},
            ) from exc

    async def _get_with_retry(self) -> httpx.Response:
        client = await self._get_client()
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._retry_attempts),
            wait=wait_exponential(multiplier=self._retry_backoff, min=self._retry_backoff, max=5),
            retry=retry_if_exception_type((httpx.ConnectError, httpx.ConnectTimeout)),
            reraise=True,
        ):
            with attempt:
                logger.debug(
                    "Fetching live proof feed",
                    url=self._url,
                    attempt=attempt.retry_state.attempt_number,
                )
                return await client.get(self._url, headers=get_tracing_headers())
        raise AssertionError("unreachable")  # pragma: no cover
