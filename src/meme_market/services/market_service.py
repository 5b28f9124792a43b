"""Market service: the operations exposed to the HTTP layer and other callers.

Wraps the aggregator, scheduler, event registry and store; store access runs
in a worker thread.
"""
import asyncio
import logging

from meme_market.db.store import MarketStore
from meme_market.market.events import ActiveEvent, MarketEventRegistry
from meme_market.market.resistance import classify
from meme_market.market.scheduler import MarketScheduler, TickReport
from meme_market.schemas import (CacheStats, InstrumentQuote, TickSummary,
                                 TriggeredEvent)
from meme_market.sources.core import normalize_symbol
from meme_market.trends.aggregator import TrendAggregator
from meme_market.trends.cache import TrendCache
from meme_market.trends.models import TrendScore

logger = logging.getLogger(__name__)


def _tick_summary(report: TickReport) -> TickSummary:
    return TickSummary(
        updated=report.updated,
        failed=report.failed,
        duration=report.duration,
        started_at=report.started_at,
        event=report.event,
    )


class MarketService:
    """Trend scores, market advance, listing and event administration."""

    def __init__(
        self,
        store: MarketStore,
        aggregator: TrendAggregator,
        scheduler: MarketScheduler,
        events: MarketEventRegistry,
        cache: TrendCache,
    ) -> None:
        self._store = store
        self._aggregator = aggregator
        self._scheduler = scheduler
        self._events = events
        self._cache = cache

    # ---- Trends ----
    async def get_trend_score(self, symbol: str) -> float:
        return await self._aggregator.score(symbol)

    async def get_trend_detail(self, symbol: str) -> TrendScore:
        return await self._aggregator.score_detail(symbol)

    def cache_stats(self) -> CacheStats:
        return CacheStats.model_validate(self._cache.stats())

    def clear_trend_cache(self) -> int:
        cleared = self._cache.clear()
        logger.info("Trend cache cleared (%d entries)", cleared)
        return cleared

    # ---- Market ----
    async def advance_market(self) -> TickSummary:
        """Run one tick now (waits for a tick already in progress)."""
        return _tick_summary(await self._scheduler.advance_market())

    def last_tick(self) -> TickSummary | None:
        report = self._scheduler.last_report
        return _tick_summary(report) if report is not None else None

    async def list_instruments(self) -> list[InstrumentQuote]:
        instruments = await asyncio.to_thread(self._store.read_instrument_state)
        return [
            InstrumentQuote(
                symbol=i.symbol,
                name=i.name,
                price=i.price,
                ceiling=i.ceiling,
                volatility=i.volatility.value,
                zone=classify(i.price, i.ceiling).zone.value,
                last_change=i.last_change,
                last_update=i.last_update,
            )
            for i in instruments
        ]

    async def get_instrument(self, symbol: str) -> InstrumentQuote | None:
        """Instrument by symbol, or None if it is not listed."""
        sym = normalize_symbol(symbol)
        return next((q for q in await self.list_instruments() if q.symbol == sym), None)

    # ---- Events ----
    async def trigger_event(
        self, event_type: str, duration_ms: int | None = None
    ) -> TriggeredEvent:
        """Start a catalog event over the listed instruments.

        Raises:
            UnknownEventType: event_type is not in the catalog.
            InvalidNumericInput: duration_ms is out of range.
        """
        instruments = await asyncio.to_thread(self._store.read_instrument_state)
        event = self._events.trigger(
            event_type,
            [i.symbol for i in instruments],
            duration_ms=duration_ms,
            classes={i.symbol: i.volatility for i in instruments},
        )
        return TriggeredEvent(
            event_name=event.name,
            event_type=event.event_type,
            affected_instruments=event.symbols,
            expires_at=event.expires_at,
        )

    def cancel_event(self, event_type: str) -> bool:
        return self._events.cancel(event_type)

    def active_events(self) -> list[ActiveEvent]:
        return self._events.active()
