"""Recurring market tick: trend scores in, new prices out, one batch write."""
import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from meme_market.db.models import PriceHistoryRecord
from meme_market.db.store import MarketStore
from meme_market.market.engine import PriceEngine
from meme_market.market.events import MarketEventRegistry
from meme_market.market.models import Instrument, PriceUpdate
from meme_market.trends.aggregator import TrendAggregator
from meme_market.utils import utcnow

logger = logging.getLogger(__name__)


class SchedulerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass
class TickReport:
    """What one tick did."""

    updated: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    duration: float = 0.0
    started_at: datetime = field(default_factory=utcnow)
    event: str | None = None


class MarketScheduler:
    """Advances every instrument one step, on demand or on a fixed cadence.

    Ticks never overlap: advance_market holds a lock, so a manual advance
    during a scheduled tick waits for it. One instrument failing does not
    affect the others; it keeps its previous price.
    """

    def __init__(
        self,
        store: MarketStore,
        aggregator: TrendAggregator,
        engine: PriceEngine,
        events: MarketEventRegistry,
        *,
        interval_seconds: float = 120.0,
        random_events: bool = False,
        now: Callable[[], datetime] = utcnow,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the scheduler.

        Args:
            store: Instrument state and history persistence.
            aggregator: Trend score per symbol.
            engine: Price step.
            events: Active event overrides; rolled for random events if enabled.
            interval_seconds: Cadence between tick starts.
            random_events: Roll for a random market event at each tick.
            now: Naive-UTC wall clock for timestamps.
            monotonic: Clock for durations and cadence.
        """
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._store = store
        self._aggregator = aggregator
        self._engine = engine
        self._events = events
        self._interval = interval_seconds
        self._random_events = random_events
        self._now = now
        self._monotonic = monotonic
        self._lock = asyncio.Lock()
        self._stop = asyncio.Event()
        self._task: asyncio.Task | None = None
        self._last_report: TickReport | None = None
        self._ticks = 0

    @property
    def state(self) -> SchedulerState:
        if self._task is not None and not self._task.done():
            return SchedulerState.RUNNING
        return SchedulerState.IDLE

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def last_report(self) -> TickReport | None:
        return self._last_report

    @property
    def ticks(self) -> int:
        return self._ticks

    def start(self) -> None:
        """Start the recurring loop. No-op when already running."""
        if self.state is SchedulerState.RUNNING:
            return
        self._stop.clear()
        self._task = asyncio.create_task(self._run(), name="market-scheduler")
        logger.info("Market scheduler started (every %.0fs)", self._interval)

    async def stop(self) -> None:
        """Stop the loop; an in-flight tick is allowed to finish."""
        if self._task is None:
            return
        self._stop.set()
        await self._task
        self._task = None
        logger.info("Market scheduler stopped after %d ticks", self._ticks)

    async def advance_market(self) -> TickReport:
        """Run one tick and return its report."""
        async with self._lock:
            return await self._tick()

    async def _run(self) -> None:
        while not self._stop.is_set():
            started = self._monotonic()
            try:
                await self.advance_market()
            except Exception:  # pylint: disable=broad-except
                logger.exception("Market tick failed; retrying next interval")
            elapsed = self._monotonic() - started
            delay = max(0.0, self._interval - elapsed)
            try:
                await asyncio.wait_for(self._stop.wait(), timeout=delay)
            except asyncio.TimeoutError:
                pass

    async def _tick(self) -> TickReport:
        started = self._monotonic()
        report = TickReport(started_at=self._now())
        instruments = await asyncio.to_thread(self._store.read_instrument_state)

        if self._random_events:
            event = self._events.maybe_trigger_random(
                [i.symbol for i in instruments],
                now=report.started_at,
                classes={i.symbol: i.volatility for i in instruments},
            )
            if event is not None:
                report.event = event.event_type

        results = await asyncio.gather(
            *(self._step(i, report.started_at) for i in instruments),
            return_exceptions=True,
        )

        batch: list[Instrument] = []
        history: list[PriceHistoryRecord] = []
        for instrument, result in zip(instruments, results):
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, BaseException):
                logger.error(
                    "Price update failed for %s; keeping %.4f",
                    instrument.symbol,
                    instrument.price,
                    exc_info=result,
                )
                report.failed.append(instrument.symbol)
                continue
            batch.append(
                instrument.model_copy(
                    update={
                        "price": result.new_price,
                        "last_change": result.change_percent,
                        "last_update": report.started_at,
                    }
                )
            )
            history.append(
                PriceHistoryRecord(
                    symbol=instrument.symbol,
                    price=result.new_price,
                    trend_score=result.trend_score,
                    timestamp=report.started_at,
                )
            )
            report.updated.append(instrument.symbol)

        if batch:
            await asyncio.to_thread(self._store.write_instrument_state, batch, history)

        report.duration = self._monotonic() - started
        self._ticks += 1
        self._last_report = report
        logger.info(
            "Market tick: %d updated, %d failed in %.2fs",
            len(report.updated),
            len(report.failed),
            report.duration,
        )
        return report

    async def _step(self, instrument: Instrument, now: datetime) -> PriceUpdate:
        trend = await self._aggregator.score(instrument.symbol)
        overrides = self._events.overrides_for(instrument.symbol, now)
        update = self._engine.next_price(instrument, trend, overrides)
        logger.debug(
            "%s %.4f -> %.4f (%+.2f%%, zone %s, event %s)",
            update.symbol,
            update.old_price,
            update.new_price,
            update.change_percent,
            update.zone,
            update.event_type or "-",
        )
        return update
