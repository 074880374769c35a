"""
Retry policy for transient request failures.
"""

import asyncio
import random
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, FrozenSet, Tuple, Type, Union

import httpx

from ..errors import RequestTimeoutError
from ..logging import get_logger

MAX_ATTEMPTS = 10
DEFAULT_RETRY_STATUSES = frozenset({429, 500, 502, 503, 504})
DEFAULT_RETRYABLE_EXCEPTIONS: Tuple[Type[BaseException], ...] = (
    RequestTimeoutError,
    httpx.TransportError,
    ConnectionError,
)

Outcome = Union[httpx.Response, BaseException]


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retry behavior.

    ``max_attempts`` counts every attempt including the first one and is
    capped at ``MAX_ATTEMPTS``.
    """

    enabled: bool = True
    max_attempts: int = 3
    base_delay: float = 0.5
    max_delay: float = 10.0
    exponential_base: float = 2.0
    jitter: bool = True
    backoff_strategy: str = "exponential"
    retry_statuses: FrozenSet[int] = DEFAULT_RETRY_STATUSES
    retryable_exceptions: Tuple[Type[BaseException], ...] = field(default=DEFAULT_RETRYABLE_EXCEPTIONS)

    @property
    def attempts(self) -> int:
        if not self.enabled:
            return 1
        return max(1, min(self.max_attempts, MAX_ATTEMPTS))


@dataclass(frozen=True)
class RetryDecision:
    retry: bool
    delay: float = 0.0


def _calculate_delay(attempt: int, config: RetryConfig) -> float:
    """Calculate delay between retry attempts."""
    if config.backoff_strategy == "exponential":
        delay = config.base_delay * (config.exponential_base ** (attempt - 1))
    elif config.backoff_strategy == "linear":
        delay = config.base_delay * attempt
    else:
        delay = config.base_delay

    delay = min(delay, config.max_delay)

    if config.jitter:
        jitter_amount = delay * 0.1
        delay += random.uniform(-jitter_amount, jitter_amount)

    return max(0.0, delay)


def _retry_after(response: httpx.Response) -> float:
    value = response.headers.get("retry-after")
    try:
        return max(0.0, float(value)) if value is not None else 0.0
    except ValueError:
        return 0.0


class RetryPolicy:
    """Decides whether an attempt's outcome warrants another attempt."""

    def __init__(self, config: RetryConfig):
        self.config = config

    def is_retryable(self, outcome: Outcome) -> bool:
        if isinstance(outcome, httpx.Response):
            return outcome.status_code in self.config.retry_statuses
        return isinstance(outcome, self.config.retryable_exceptions)

    def should_retry(self, attempt: int, outcome: Outcome) -> RetryDecision:
        """Decide after ``attempt`` (1-based) has produced ``outcome``."""
        if attempt >= self.config.attempts or not self.is_retryable(outcome):
            return RetryDecision(retry=False)

        delay = _calculate_delay(attempt, self.config)
        if isinstance(outcome, httpx.Response):
            delay = max(delay, min(_retry_after(outcome), self.config.max_delay))
        return RetryDecision(retry=True, delay=delay)


async def run_with_retry(action: Callable[[], Awaitable[httpx.Response]], policy: RetryPolicy) -> httpx.Response:
    """Run ``action`` until it succeeds or the policy gives up.

    Attempts run sequentially. A non-retryable or final exception propagates
    unchanged; a final retryable response is returned for the caller to judge.
    """
    logger = get_logger("idp_client.retry")
    attempt = 0

    while True:
        attempt += 1
        outcome: Any
        try:
            outcome = await action()
        except Exception as e:
            outcome = e

        decision = policy.should_retry(attempt, outcome)
        if not decision.retry:
            if isinstance(outcome, BaseException):
                if attempt > 1:
                    logger.error(
                        "All retry attempts exhausted",
                        attempt=attempt,
                        max_attempts=policy.config.attempts,
                        error=str(outcome)
                    )
                raise outcome
            if attempt > 1:
                logger.info("Retry finished", attempt=attempt, status=outcome.status_code)
            return outcome

        logger.warning(
            "Retry attempt failed, waiting before next attempt",
            attempt=attempt,
            delay=decision.delay,
            status=getattr(outcome, "status_code", None),
            error=str(outcome) if isinstance(outcome, BaseException) else None
        )
        await asyncio.sleep(decision.delay)
