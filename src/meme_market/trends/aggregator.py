"""Combines all trend sources into one bounded score per symbol."""
import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime

from meme_market.sources.core import (FallbackReason, SourceOutcome,
                                      TrendSourceABC, normalize_symbol,
                                      search_terms_for)
from meme_market.trends.cache import TrendCache
from meme_market.trends.models import SourceComponent, TrendScore
from meme_market.utils import clamp, utcnow

logger = logging.getLogger(__name__)

DEFAULT_WEIGHTS: dict[str, float] = {
    "search_trend": 0.30,
    "micro_blog": 0.25,
    "forum": 0.20,
    "video": 0.15,
    "short_video": 0.10,
}
DEFAULT_BOUND = 0.08


@dataclass(frozen=True)
class WeightedSource:
    source: TrendSourceABC
    weight: float


class TrendAggregator:
    """Weighted sum of source contributions, clamped to [-bound, bound].

    Scores are cached per symbol. Concurrent misses for one symbol share a
    single fetch (one asyncio.Lock per symbol). Sources are queried
    concurrently and never make the aggregate fail: a source that raises
    anyway is replaced by its fallback value.
    """

    def __init__(
        self,
        sources: Sequence[WeightedSource],
        cache: TrendCache,
        *,
        bound: float = DEFAULT_BOUND,
        terms_for: Callable[[str], list[str]] = search_terms_for,
        now: Callable[[], datetime] = utcnow,
    ) -> None:
        if bound <= 0:
            raise ValueError("bound must be positive")
        self._sources = list(sources)
        self._cache = cache
        self._bound = bound
        self._terms_for = terms_for
        self._now = now
        self._locks: dict[str, asyncio.Lock] = {}
        self._waiters: dict[str, int] = {}

    @classmethod
    def with_default_weights(
        cls, sources: Sequence[TrendSourceABC], cache: TrendCache, **kwargs
    ) -> "TrendAggregator":
        """Weight each source by its name (search 0.30 ... short-video 0.10)."""
        weighted = [WeightedSource(s, DEFAULT_WEIGHTS[s.name]) for s in sources]
        return cls(weighted, cache, **kwargs)

    @property
    def sources(self) -> list[TrendSourceABC]:
        return [ws.source for ws in self._sources]

    @property
    def in_flight(self) -> int:
        """Symbols with a computation running or queued."""
        return len(self._locks)

    async def score(self, symbol: str) -> float:
        """Trend score for symbol in [-bound, bound]. Never raises."""
        return (await self.score_detail(symbol)).value

    async def score_detail(self, symbol: str) -> TrendScore:
        """Trend score with its per-source breakdown (cached for the TTL)."""
        sym = normalize_symbol(symbol)
        cached = self._cache.get(sym)
        if cached is not None:
            return cached

        lock = self._locks.setdefault(sym, asyncio.Lock())
        self._waiters[sym] = self._waiters.get(sym, 0) + 1
        try:
            async with lock:
                # Another caller may have filled the cache while we waited.
                cached = self._cache.get(sym)
                if cached is not None:
                    return cached
                score = await self._compute(sym)
                self._cache.set(sym, score)
                return score
        finally:
            self._waiters[sym] -= 1
            if not self._waiters[sym]:
                del self._waiters[sym]
                del self._locks[sym]

    async def _compute(self, symbol: str) -> TrendScore:
        terms = self._terms_for(symbol)
        results = await asyncio.gather(
            *(ws.source.contribution(symbol, terms) for ws in self._sources),
            return_exceptions=True,
        )

        components: list[SourceComponent] = []
        total = 0.0
        for ws, result in zip(self._sources, results):
            outcome = self._outcome_or_fallback(ws.source, symbol, result)
            weighted = outcome.value * ws.weight
            total += weighted
            components.append(
                SourceComponent(
                    source=outcome.source,
                    value=outcome.value,
                    weight=ws.weight,
                    weighted=weighted,
                    fallback=outcome.is_fallback,
                    reason=outcome.reason.value if outcome.reason else None,
                )
            )

        value = clamp(total, -self._bound, self._bound)
        fallbacks = sum(1 for c in components if c.fallback)
        logger.debug(
            "trend %s = %.4f (%d/%d sources fell back)",
            symbol,
            value,
            fallbacks,
            len(components),
        )
        return TrendScore(
            symbol=symbol, value=value, timestamp=self._now(), components=components
        )

    @staticmethod
    def _outcome_or_fallback(
        source: TrendSourceABC, symbol: str, result: SourceOutcome | BaseException
    ) -> SourceOutcome:
        if isinstance(result, asyncio.CancelledError):
            raise result
        if isinstance(result, BaseException):
            logger.error(
                "%s: unexpected error for %s: %r", source.name, symbol, result
            )
            return source.fallback_outcome(FallbackReason.UNEXPECTED_ERROR)
        return result
