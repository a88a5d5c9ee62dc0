"""
Retry policy model: how many times to retry, how long to wait, and which HTTP
statuses are worth retrying.
"""

import random
from enum import Enum
from typing import FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field

# Shift exponent is clamped so pathological attempt counts cannot overflow the delay.
MAX_BACKOFF_EXPONENT = 30

DEFAULT_RETRYABLE_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})
DEFAULT_PERMANENT_STATUS_CODES = frozenset({400, 401, 403, 404})


class BackoffStrategy(str, Enum):
    """How the delay grows between attempts."""

    CONSTANT = "constant"
    LINEAR = "linear"
    EXPONENTIAL = "exponential"
    EXPONENTIAL_JITTER = "exponential_jitter"


class RetryPolicy(BaseModel):
    """An immutable bounded-retry policy. Delays are in seconds."""

    model_config = ConfigDict(frozen=True)

    max_retries: int = Field(default=3, ge=0)
    base_delay: float = Field(default=0.5, ge=0)
    strategy: BackoffStrategy = BackoffStrategy.EXPONENTIAL_JITTER
    max_delay: float = Field(default=30.0, ge=0)
    retryable_status_codes: FrozenSet[int] = DEFAULT_RETRYABLE_STATUS_CODES
    permanent_failure_status_codes: FrozenSet[int] = DEFAULT_PERMANENT_STATUS_CODES

    def is_retryable_status(self, status: int) -> bool:
        """Permanent codes never retry; listed codes and any other 5xx do."""
        if status in self.permanent_failure_status_codes:
            return False
        if status in self.retryable_status_codes:
            return True
        return 500 <= status <= 599

    def next_delay(self, attempt: int, rng: Optional[random.Random] = None) -> float:
        """
        Returns the delay before the upcoming retry.

        Args:
            attempt: 0-indexed number of the retry about to be made.
            rng: Random source for the jittered strategy.
        """
        if self.strategy is BackoffStrategy.CONSTANT:
            return self.base_delay

        if self.strategy is BackoffStrategy.LINEAR:
            return min(attempt * self.base_delay, self.max_delay)

        ceiling = min(
            self.base_delay * (2 ** min(attempt, MAX_BACKOFF_EXPONENT)), self.max_delay
        )
        if self.strategy is BackoffStrategy.EXPONENTIAL:
            return ceiling
        if ceiling <= 0:
            return 0.0
        return (rng or random).uniform(0, ceiling)


DEFAULT_RETRY_POLICY = RetryPolicy()
