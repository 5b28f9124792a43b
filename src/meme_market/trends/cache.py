"""TTL cache for aggregated trend scores."""
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from meme_market.trends.models import TrendScore


@dataclass
class _Entry:
    score: TrendScore
    stored_at: float


class TrendCache:
    """Trend scores keyed by symbol, valid for ttl_seconds after they are stored.

    Read by the aggregator (event loop) and by the cache routes (threadpool),
    so the dict is guarded by a threading.Lock. Expired entries are dropped
    on read.
    """

    def __init__(
        self,
        ttl_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize an empty cache.

        Args:
            ttl_seconds: Lifetime of an entry.
            clock: Monotonic clock, injectable for tests.
        """
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self._lock = threading.Lock()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, symbol: str) -> TrendScore | None:
        """Return the cached score for symbol, or None if absent or expired."""
        with self._lock:
            entry = self._entries.get(symbol)
            if entry is None:
                return None
            if self._clock() - entry.stored_at >= self._ttl:
                del self._entries[symbol]
                return None
            return entry.score

    def set(self, symbol: str, score: TrendScore) -> None:
        with self._lock:
            self._entries[symbol] = _Entry(score=score, stored_at=self._clock())

    def clear(self) -> int:
        """Drop every entry; return how many were dropped."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            return count

    def stats(self) -> dict[str, Any]:
        """Size, TTL and per-entry value and age (seconds) of live entries."""
        now = self._clock()
        with self._lock:
            live = {
                symbol: entry
                for symbol, entry in self._entries.items()
                if now - entry.stored_at < self._ttl
            }
        return {
            "size": len(live),
            "ttl_seconds": self._ttl,
            "entries": [
                {
                    "symbol": symbol,
                    "value": entry.score.value,
                    "age_seconds": round(now - entry.stored_at, 1),
                }
                for symbol, entry in sorted(live.items())
            ],
        }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
