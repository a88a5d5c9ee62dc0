"""
Bounded retry with backoff around a single HTTP request.
"""

import asyncio
import logging
import random
from typing import Awaitable, Callable, Optional

import aiohttp

from icloud_album.exceptions import StatusError, TransportError
from icloud_album.models.retry import DEFAULT_RETRY_POLICY, RetryPolicy

from .transport import HttpResult

log = logging.getLogger(__name__)

RequestFactory = Callable[[], Awaitable[HttpResult]]


class RetryingExecutor:
    """
    Runs a request factory up to `max_retries + 1` times according to a RetryPolicy.

    - Transport failures (no response) are retried while attempts remain.
    - Statuses the policy marks as permanent fail immediately.
    - Retryable statuses (listed codes, or any other 5xx) are retried while attempts
      remain.
    - Any other non-2xx status fails immediately.
    """

    def __init__(
        self,
        policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rng: Optional[random.Random] = None,
    ):
        """
        Args:
            policy: The retry policy; defaults to DEFAULT_RETRY_POLICY.
            sleep: Awaitable used to wait between attempts.
            rng: Random source for jittered backoff.
        """
        self.policy = policy or DEFAULT_RETRY_POLICY
        self._sleep = sleep
        self._rng = rng or random.Random()

    async def _backoff(self, attempt: int, endpoint: str, reason: str) -> None:
        delay = self.policy.next_delay(attempt, self._rng)
        log.debug(
            f"Attempt {attempt + 1}/{self.policy.max_retries + 1} for {endpoint} "
            f"failed: {reason}. Retrying in {delay:.2f}s..."
        )
        await self._sleep(delay)

    async def execute(self, send: RequestFactory, endpoint: str = "") -> HttpResult:
        """
        Executes `send` until it yields a 2xx result or the policy gives up.

        Args:
            send: Zero-argument coroutine factory performing one request.
            endpoint: Label used in log messages and errors.

        Returns:
            The first 2xx HttpResult.

        Raises:
            TransportError: If every attempt failed without a response.
            StatusError: On a non-retryable status or when retries are exhausted.
        """
        attempt = 0
        while True:
            try:
                result = await send()
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                reason = str(e) or type(e).__name__
                if attempt >= self.policy.max_retries:
                    raise TransportError(
                        f"Network error for {endpoint} after {attempt + 1} "
                        f"attempt(s): {reason}"
                    ) from e
                await self._backoff(attempt, endpoint, reason)
                attempt += 1
                continue

            if result.ok:
                return result

            if (
                self.policy.is_retryable_status(result.status)
                and attempt < self.policy.max_retries
            ):
                await self._backoff(attempt, endpoint, f"status {result.status}")
                attempt += 1
                continue

            raise StatusError(result.status, endpoint)
