"""Shared fixtures: deterministic randomness, fake sources and an in-memory store."""
import asyncio
import random

import httpx
import pytest

from meme_market.db import MarketStore, create_db_engine, init_db
from meme_market.market.models import Instrument, VolatilityClass
from meme_market.sources.core import FallbackPolicy, TrendSourceABC


class FixedRandom(random.Random):
    """random() always returns the same value; other methods stay seeded."""

    def __init__(self, value: float, seed: int = 0) -> None:
        super().__init__(seed)
        self.value = value

    def random(self) -> float:
        return self.value


class StaticSource(TrendSourceABC):
    """Source returning a fixed value (or raising) without any network I/O."""

    def __init__(
        self,
        name: str,
        value: float = 0.0,
        *,
        exc: Exception | None = None,
        value_range: tuple[float, float] = (-1.0, 1.0),
        fallback: tuple[float, float] = (0.0, 0.0),
        delay: float = 0.0,
    ) -> None:
        self.name = name
        super().__init__(
            httpx.AsyncClient(),
            value_range=value_range,
            fallback=FallbackPolicy(*fallback),
        )
        self.value = value
        self.exc = exc
        self.delay = delay
        self.calls = 0

    async def _fetch_signal(self, symbol: str, terms: list[str]) -> float:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.exc is not None:
            raise self.exc
        return self.value


class FakeClock:
    """Monotonic clock advanced by hand (and by fake sleeps)."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def make_sources(values: dict[str, float] | None = None) -> list[StaticSource]:
    """One StaticSource per weighted source name."""
    values = values or {}
    names = ("search_trend", "micro_blog", "forum", "video", "short_video")
    return [StaticSource(name, values.get(name, 0.0)) for name in names]


@pytest.fixture
def store() -> MarketStore:
    engine = create_db_engine("sqlite://")
    init_db(engine)
    return MarketStore(engine)


@pytest.fixture
def instruments() -> list[Instrument]:
    return [
        Instrument(symbol="SKIBI", price=1.0, ceiling=750.0, volatility=VolatilityClass.EXTREME),
        Instrument(symbol="SUS", price=2.0, ceiling=350.0, volatility=VolatilityClass.HIGH),
        Instrument(symbol="LABUB", price=4.0, ceiling=600.0, volatility=VolatilityClass.LOW),
    ]


@pytest.fixture
def seeded_store(store: MarketStore, instruments: list[Instrument]) -> MarketStore:
    store.seed_instruments(instruments)
    return store


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
