"""Instrument and price-update models for the market core."""
import math
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from meme_market.utils import utcnow


class VolatilityClass(str, Enum):
    """Per-instrument volatility class; scales the base volatility."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EXTREME = "extreme"

    @property
    def factor(self) -> float:
        return _CLASS_FACTORS[self]


_CLASS_FACTORS = {
    VolatilityClass.LOW: 0.25,
    VolatilityClass.MEDIUM: 0.5,
    VolatilityClass.HIGH: 0.75,
    VolatilityClass.EXTREME: 1.0,
}


class Instrument(BaseModel):
    """A tradable meme instrument and its current price state."""

    symbol: str
    price: float = Field(gt=0)
    ceiling: float = Field(gt=0)
    volatility: VolatilityClass = VolatilityClass.MEDIUM
    last_change: float = 0.0
    last_update: datetime = Field(default_factory=utcnow)
    name: str | None = None

    @field_validator("price", "ceiling", "last_change")
    @classmethod
    def _finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("must be finite")
        return v


class MarketOverrides(BaseModel):
    """Drift and volatility forced onto an instrument by an active event."""

    event_type: str
    drift: float | None = None
    volatility: float | None = None


class PriceUpdate(BaseModel):
    """Outcome of one price step."""

    symbol: str
    old_price: float
    new_price: float
    change_percent: float
    zone: str
    trend_score: float
    event_type: str | None = None
