"""Retry-with-backoff policy for remote provider calls."""

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

import httpx

logger = logging.getLogger(__name__)

T = TypeVar("T")

RETRYABLE_STATUS = {429, 500, 502, 503, 504}


class RetryPolicy:
    """Exponential backoff on transport errors and retryable HTTP statuses."""

    def __init__(self, attempts: int = 4, backoff: float = 0.5, max_delay: float = 8.0):
        """Initialize policy.

        Args:
            attempts: Total tries, including the first one.
            backoff: Base delay in seconds, doubled after each failure.
            max_delay: Upper bound for a single delay.
        """
        self._attempts = max(1, attempts)
        self._backoff = backoff
        self._max_delay = max_delay

    def _delay(self, attempt: int) -> float:
        return min(self._backoff * (2 ** attempt), self._max_delay)

    async def call(self, request: Callable[[], Awaitable[httpx.Response]]) -> httpx.Response:
        """Run request until it returns a non-retryable response.

        The last response is returned even if its status is retryable, so the
        caller still sees the final HTTP status. Transport errors from the
        last attempt are re-raised.
        """
        for attempt in range(self._attempts):
            last = attempt == self._attempts - 1
            try:
                response = await request()
            except httpx.TransportError as e:
                if last:
                    raise
                logger.warning(
                    f"Transport error ({e!r}), retrying ({attempt + 1}/{self._attempts})"
                )
            else:
                if response.status_code not in RETRYABLE_STATUS or last:
                    return response
                logger.warning(
                    f"HTTP {response.status_code}, retrying ({attempt + 1}/{self._attempts})"
                )
            await asyncio.sleep(self._delay(attempt))

        raise RuntimeError("unreachable")
