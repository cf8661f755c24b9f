"""
Retrying Transport

httpx transport wrapper that retries rate-limited (429) responses with
exponential backoff, replaying the buffered request body on every attempt.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import httpx
import structlog

logger = structlog.get_logger(__name__)

DEFAULT_RETRIES = 3
DEFAULT_BACKOFF_SECONDS = 1.0


class RetryingTransport(httpx.AsyncBaseTransport):
    """
    Retries requests the service rejects with 429 Too Many Requests.

    Attempt ``n`` (0-indexed) that is rate limited, and is not the last
    allowed attempt, waits ``backoff_seconds * 2**n`` before the next one.
    Only rate limiting is retried: a transport exception from the wrapped
    transport propagates at once, and any other response is returned as is.
    When every attempt is rate limited the last 429 response is returned.

    The wait is awaited, so it only suspends the task that made the
    request; other requests sharing the transport keep going.

    Usage:
        transport = RetryingTransport(httpx.AsyncHTTPTransport(), retries=5)
        async with httpx.AsyncClient(transport=transport) as client:
            response = await client.get(url)
    """

    def __init__(
        self,
        transport: httpx.AsyncBaseTransport | None = None,
        retries: int = DEFAULT_RETRIES,
        backoff_seconds: float = DEFAULT_BACKOFF_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Initialize the transport.

        Args:
            transport: Transport performing single attempts (default: httpx.AsyncHTTPTransport)
            retries: Maximum number of attempts, at least 1
            backoff_seconds: Base delay; attempt n waits backoff_seconds * 2**n
            sleep: Coroutine function used to wait between attempts
        """
        if retries < 1:
            raise ValueError(f"retries must be at least 1, got {retries}")
        self._transport = transport or httpx.AsyncHTTPTransport()
        self._retries = retries
        self._backoff_seconds = backoff_seconds
        self._sleep = sleep

    @property
    def retries(self) -> int:
        return self._retries

    def backoff_delay(self, attempt: int) -> float:
        """Delay before retrying after the given (0-indexed) attempt."""
        return self._backoff_seconds * (2**attempt)

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        # Request streams cannot be replayed, so buffer the body up front
        body = await request.aread()

        for attempt in range(self._retries - 1):
            response = await self._attempt(request, body)
            if response.status_code != httpx.codes.TOO_MANY_REQUESTS:
                return response

            await response.aclose()
            delay = self.backoff_delay(attempt)
            logger.warning(
                "Rate limited, backing off",
                method=request.method,
                url=str(request.url),
                attempt=attempt + 1,
                delay_seconds=delay,
            )
            await self._sleep(delay)

        response = await self._attempt(request, body)
        if response.status_code == httpx.codes.TOO_MANY_REQUESTS:
            logger.warning(
                "Rate limited on every attempt",
                method=request.method,
                url=str(request.url),
                attempts=self._retries,
            )
        return response

    async def _attempt(self, request: httpx.Request, body: bytes) -> httpx.Response:
        attempt_request = httpx.Request(
            request.method,
            request.url,
            headers=request.headers,
            content=body or None,
            extensions=request.extensions,
        )
        return await self._transport.handle_async_request(attempt_request)

    async def aclose(self) -> None:
        await self._transport.aclose()
