"""
Serial delay chaining for side-effecting remote calls.

Hosting services dislike bursts of writes. Every call to ``RateGovernor.wait``
is queued behind the previous one and completes ``delay`` seconds after the
previous call completed, regardless of how many callers arrive at once:

    await governor.wait(5.0)
    await client.pulls.create(...)
"""

import asyncio
import time
from collections.abc import Awaitable, Callable

from tedium.logging import get_logger

logger = get_logger("rate")


class RateGovernor:
    """Single serial queue of waits, tracked as a "next available time"."""

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._clock = clock
        self._sleep = sleep
        self._next_available: float | None = None

    @property
    def next_available(self) -> float | None:
        """Clock time at which the most recently queued wait completes."""
        return self._next_available

    async def wait(self, delay: float) -> None:
        """
        Wait for our turn, then ``delay`` more seconds.

        The slot is reserved before the first suspension point, so callers
        are served in the order they called ``wait``.
        """
        if delay < 0:
            raise ValueError(f"delay must be non-negative, got {delay}")

        now = self._clock()
        start = now
        if self._next_available is not None and self._next_available > now:
            start = self._next_available
        self._next_available = start + delay

        remaining = self._next_available - now
        if remaining > 0:
            logger.debug(f"waiting {remaining:.2f}s for a rate-limited slot")
        await self._sleep(remaining)


__all__ = ["RateGovernor"]
