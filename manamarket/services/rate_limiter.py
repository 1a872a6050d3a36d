"""
Fixed-interval request scheduler.

Hands out start slots spaced `interval` seconds apart. Callers may all
acquire at once; the n-th caller is released no earlier than n x interval
after the first, so throughput stays under 1 / interval requests per
second no matter how large the batch is.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable


class IntervalRateLimiter:
    """
    Reserve-then-sleep rate limiter for asyncio tasks.

    Slot reservation contains no await, so it is atomic on the event loop
    and concurrent callers never share a slot.
    """

    def __init__(
        self,
        interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if interval < 0:
            raise ValueError(f"interval must be >= 0, got {interval}")
        self.interval = interval
        self._clock = clock
        self._sleep = sleep
        self._next_slot: float | None = None

    def reserve(self) -> float:
        """
        Reserve the next free slot.

        Returns:
            Seconds to wait before the slot opens (0 when it is already open)
        """
        now = self._clock()
        slot = now if self._next_slot is None else max(now, self._next_slot)
        self._next_slot = slot + self.interval
        return slot - now

    async def acquire(self) -> None:
        """Wait until this caller's slot opens."""
        delay = self.reserve()
        if delay > 0:
            await self._sleep(delay)
