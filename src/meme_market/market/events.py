"""Market-wide events that temporarily override drift and volatility."""
import logging
import random
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from pydantic import BaseModel

from meme_market.errors import InvalidNumericInput, UnknownEventType
from meme_market.market.models import MarketOverrides, VolatilityClass
from meme_market.utils import utcnow

logger = logging.getLogger(__name__)

MIN_DURATION_MS = 30_000
MAX_DURATION_MS = 3_600_000
RANDOM_TRIGGER_COOLDOWN = timedelta(seconds=30)


class Selection(str, Enum):
    ALL = "all"
    RANDOM = "random"
    VOLATILITY_CLASS = "volatility_class"


@dataclass(frozen=True)
class EventSpec:
    """Catalog entry: what an event does and how often it fires on its own."""

    event_type: str
    name: str
    drift_range: tuple[float, float]
    duration_ms: int
    chance: float
    selection: Selection = Selection.ALL
    count_range: tuple[int, int] = (1, 1)
    volatility_class: VolatilityClass | None = None
    volatility: float | None = None
    weekend_only: bool = False


CATALOG: dict[str, EventSpec] = {
    spec.event_type: spec
    for spec in (
        EventSpec("meme_market_boom", "Global Meme Market Boom", (0.10, 0.20), 60_000, 0.10),
        EventSpec("meme_crash", "Global Meme Crash", (-0.30, -0.15), 120_000, 0.05),
        EventSpec(
            "viral_tiktok_challenge", "Viral TikTok Challenge", (0.20, 0.50), 180_000, 0.15,
            selection=Selection.RANDOM, count_range=(2, 3),
        ),
        EventSpec(
            "reddit_meme_hype", "Reddit Meme Hype", (0.10, 0.10), 120_000, 0.15,
            selection=Selection.RANDOM, count_range=(1, 4),
        ),
        EventSpec(
            "heatwave_meltdown", "Heatwave Meme Meltdown", (-0.40, -0.20), 300_000, 0.07,
            selection=Selection.RANDOM, count_range=(1, 2),
        ),
        EventSpec("global_pizza_day", "Global Pizza Day", (0.10, 0.10), 600_000, 0.20),
        EventSpec(
            "internet_outage_panic", "Internet Outage Panic", (-0.15, -0.05), 180_000, 0.05
        ),
        EventSpec(
            "stock_freeze_hour", "Stock Freeze Hour", (0.0, 0.0), 180_000, 0.10,
            selection=Selection.RANDOM, count_range=(1, 2), volatility=0.0,
        ),
        EventSpec("market_romance", "Market-wide Romance", (0.10, 0.10), 300_000, 0.15),
        EventSpec(
            "trend_surge", "Global Trend Surge", (0.10, 0.20), 240_000, 0.10,
            selection=Selection.RANDOM, count_range=(3, 3),
        ),
        EventSpec("pasta_party", "Global Pasta Party", (0.25, 0.25), 360_000, 0.20),
        EventSpec(
            "stock_panic", "Stock Panic", (-0.30, -0.10), 180_000, 0.10,
            selection=Selection.RANDOM, count_range=(2, 3),
        ),
        EventSpec(
            "weekend_chill", "Weekend Chill Mode", (0.05, 0.10), 1_800_000, 1.0,
            selection=Selection.VOLATILITY_CLASS,
            volatility_class=VolatilityClass.LOW, weekend_only=True,
        ),
        EventSpec(
            "meme_mutation", "Meme Mutation Event", (0.15, 0.25), 300_000, 0.05,
            selection=Selection.RANDOM, count_range=(2, 2),
        ),
        EventSpec(
            "global_jackpot", "GLOBAL JACKPOT EVENT", (0.50, 0.75), 600_000, 0.02,
            selection=Selection.RANDOM, count_range=(1, 2),
        ),
        EventSpec(
            "chaos_hour", "CHAOS HOUR ACTIVATED", (0.0, 0.0), 300_000, 0.10, volatility=0.20
        ),
    )
}


class ActiveEvent(BaseModel):
    """A triggered event with its drawn drift and affected instruments."""

    event_type: str
    name: str
    drift: float
    volatility: float | None = None
    symbols: list[str]
    started_at: datetime
    expires_at: datetime

    def covers(self, symbol: str, now: datetime) -> bool:
        return now < self.expires_at and symbol in self.symbols

    def overrides(self) -> MarketOverrides:
        return MarketOverrides(
            event_type=self.event_type, drift=self.drift, volatility=self.volatility
        )


class MarketEventRegistry:
    """Catalog of market events and the set of currently active ones.

    At most one active event per type; re-triggering a type replaces it.
    When several events cover one instrument, the most recently started wins.
    Expiry is time-based: expired events are pruned on read.
    """

    def __init__(
        self,
        *,
        catalog: Mapping[str, EventSpec] | None = None,
        rng: random.Random | None = None,
        now: Callable[[], datetime] = utcnow,
    ) -> None:
        self._catalog = dict(catalog or CATALOG)
        self._rng = rng or random.Random()
        self._now = now
        self._active: dict[str, ActiveEvent] = {}
        self._last_random_trigger: datetime | None = None

    @property
    def catalog(self) -> dict[str, EventSpec]:
        return dict(self._catalog)

    def trigger(
        self,
        event_type: str,
        symbols: Sequence[str],
        duration_ms: int | None = None,
        now: datetime | None = None,
        classes: Mapping[str, VolatilityClass] | None = None,
    ) -> ActiveEvent:
        """Activate an event over (a subset of) symbols.

        Args:
            event_type: Catalog key, e.g. "meme_crash".
            symbols: Symbols the event may affect.
            duration_ms: Override of the catalog duration, 30s to 1h.
            now: Trigger time; defaults to the registry clock.
            classes: Volatility class per symbol, used by class-selected events.

        Returns:
            The new ActiveEvent. Its drift is drawn once here.

        Raises:
            UnknownEventType: event_type is not in the catalog.
            InvalidNumericInput: duration_ms is out of range.
        """
        spec = self._catalog.get(event_type)
        if spec is None:
            raise UnknownEventType(f"Unknown event type '{event_type}'")
        duration = spec.duration_ms if duration_ms is None else duration_ms
        if not MIN_DURATION_MS <= duration <= MAX_DURATION_MS:
            raise InvalidNumericInput(
                f"duration_ms must be between {MIN_DURATION_MS} and {MAX_DURATION_MS}, "
                f"got {duration}"
            )

        started = now or self._now()
        low, high = spec.drift_range
        event = ActiveEvent(
            event_type=spec.event_type,
            name=spec.name,
            drift=self._rng.uniform(low, high),
            volatility=spec.volatility,
            symbols=self._select(spec, list(symbols), classes or {}),
            started_at=started,
            expires_at=started + timedelta(milliseconds=duration),
        )
        self._active[spec.event_type] = event
        logger.info(
            "Event %s started: drift %+.3f on %s until %s",
            event.event_type,
            event.drift,
            ", ".join(event.symbols) or "nothing",
            event.expires_at.isoformat(),
        )
        return event

    def cancel(self, event_type: str) -> bool:
        """End an active event early; False if it was not active."""
        removed = self._active.pop(event_type, None)
        if removed is not None:
            logger.info("Event %s cancelled", event_type)
        return removed is not None

    def active(self, now: datetime | None = None) -> list[ActiveEvent]:
        """Unexpired events, oldest first. Prunes expired ones."""
        at = now or self._now()
        for event_type, event in list(self._active.items()):
            if at >= event.expires_at:
                self._active.pop(event_type, None)
                logger.info("Event %s expired", event_type)
        return sorted(self._active.values(), key=lambda e: e.started_at)

    def overrides_for(
        self, symbol: str, now: datetime | None = None
    ) -> MarketOverrides | None:
        """Overrides from the latest-started unexpired event covering symbol."""
        at = now or self._now()
        covering = [e for e in self.active(at) if e.covers(symbol, at)]
        if not covering:
            return None
        return covering[-1].overrides()

    def maybe_trigger_random(
        self,
        symbols: Sequence[str],
        now: datetime | None = None,
        classes: Mapping[str, VolatilityClass] | None = None,
    ) -> ActiveEvent | None:
        """Roll each event's chance in catalog order; trigger the first that hits.

        Does nothing within 30s of the previous random trigger. Weekend-only
        events are skipped on weekdays.
        """
        at = now or self._now()
        if (
            self._last_random_trigger is not None
            and at - self._last_random_trigger < RANDOM_TRIGGER_COOLDOWN
        ):
            return None
        weekend = at.weekday() >= 5
        for spec in self._catalog.values():
            if spec.weekend_only and not weekend:
                continue
            if self._rng.random() < spec.chance:
                self._last_random_trigger = at
                return self.trigger(spec.event_type, symbols, now=at, classes=classes)
        return None

    def _select(
        self,
        spec: EventSpec,
        symbols: list[str],
        classes: Mapping[str, VolatilityClass],
    ) -> list[str]:
        if spec.selection is Selection.ALL:
            return symbols
        if spec.selection is Selection.VOLATILITY_CLASS:
            return [s for s in symbols if classes.get(s) == spec.volatility_class]
        low, high = spec.count_range
        count = min(len(symbols), self._rng.randint(low, high))
        return self._rng.sample(symbols, count)
