"""Minimum-spacing rate limiter shared by every call through one source."""
import asyncio
import time
from collections.abc import Awaitable, Callable


class MinIntervalLimiter:
    """Spaces request starts at least min_interval_ms apart.

    Callers are delayed, never dropped: concurrent callers queue on a lock and
    each waits out the remaining interval before its request is released.
    """

    def __init__(
        self,
        min_interval_ms: int,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if min_interval_ms < 0:
            raise ValueError("min_interval_ms must not be negative")
        self._interval = min_interval_ms / 1000.0
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._last_start: float | None = None

    @property
    def min_interval_seconds(self) -> float:
        return self._interval

    async def wait(self) -> float:
        """Block until the next request may start; return seconds waited."""
        async with self._lock:
            waited = 0.0
            if self._last_start is not None:
                remaining = self._interval - (self._clock() - self._last_start)
                if remaining > 0:
                    await self._sleep(remaining)
                    waited = remaining
            self._last_start = self._clock()
            return waited
