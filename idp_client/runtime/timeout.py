"""
Deadline enforcement for a single transport exchange.
"""

import asyncio
from typing import Awaitable, Callable, TypeVar

import httpx

from ..errors import RequestTimeoutError
from ..logging import get_logger

T = TypeVar("T")

DEFAULT_TIMEOUT_MS = 10000


class TimeoutGuard:
    """Runs one exchange with a deadline and cancels it when the deadline passes."""

    def __init__(self, timeout_ms: int = DEFAULT_TIMEOUT_MS):
        self.timeout_ms = timeout_ms
        self.logger = get_logger("idp_client.timeout")

    async def run(self, call: Callable[[], Awaitable[T]]) -> T:
        """Await ``call()``; raise ``RequestTimeoutError`` if it outlives the deadline.

        ``asyncio.wait_for`` cancels the exchange task on expiry and removes
        its timer handle on both paths, so nothing fires after this returns.
        """
        try:
            return await asyncio.wait_for(call(), timeout=self.timeout_ms / 1000)
        except asyncio.TimeoutError as exc:
            self.logger.warning("Request timed out", timeout_ms=self.timeout_ms)
            raise RequestTimeoutError(self.timeout_ms) from exc
        except httpx.TimeoutException as exc:
            self.logger.warning("Transport reported timeout", timeout_ms=self.timeout_ms, error=str(exc))
            raise RequestTimeoutError(self.timeout_ms) from exc
