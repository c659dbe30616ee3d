"""
Backoff policy for opening stream connections.
"""

from __future__ import annotations

import random


class ReconnectStrategy:
    """Exponential backoff with jitter (+/-25%)."""

    def __init__(
        self,
        initial_delay: float = 1.0,
        max_delay: float = 30.0,
        backoff_factor: float = 2.0,
        max_retries: int | None = None,
    ) -> None:
        self.initial_delay = initial_delay
        self.max_delay = max_delay
        self.backoff_factor = backoff_factor
        self.max_retries = max_retries
        self.retry_count = 0

    def next_delay(self) -> float:
        """Get the next retry delay and advance the retry counter."""
        delay = min(
            self.initial_delay * (self.backoff_factor ** self.retry_count),
            self.max_delay,
        )

        # +/-25% jitter, never below initial_delay nor above max_delay
        jitter = delay * 0.25 * random.random()
        delay += jitter if random.random() > 0.5 else -jitter

        self.retry_count += 1
        return min(max(delay, self.initial_delay), self.max_delay)

    def should_retry(self) -> bool:
        """Check if retry attempts are still within limits."""
        if self.max_retries is None:
            return True
        return self.retry_count < self.max_retries
