"""Pydantic schemas for API and runtime use. Not persisted to DB."""
from datetime import datetime

from pydantic import BaseModel, Field

from meme_market.utils import utcnow


class InstrumentQuote(BaseModel):
    """Current state of one instrument as shown to players."""

    symbol: str
    name: str | None = None
    price: float
    ceiling: float
    volatility: str
    zone: str
    last_change: float
    last_update: datetime


class TickSummary(BaseModel):
    """Result of one market advance."""

    updated: list[str]
    failed: list[str]
    duration: float
    started_at: datetime
    event: str | None = None


class HoldingValue(BaseModel):
    symbol: str
    quantity: int
    price: float
    value: float


class LeaderboardEntry(BaseModel):
    rank: int
    id: str
    username: str
    display_name: str | None = None
    balance: float
    portfolio_value: float
    total_value: float
    profit: float
    profit_percentage: float
    total_invested: float
    last_daily: datetime | None = None
    last_message: datetime | None = None
    joined_at: datetime | None = None
    holdings: list[HoldingValue] | None = None


class Leaderboard(BaseModel):
    leaderboard: list[LeaderboardEntry]
    total_users: int
    limit: int
    include_holdings: bool
    timestamp: datetime = Field(default_factory=utcnow)


class TransactionView(BaseModel):
    """A logged trade; type is derived from the quantity sign."""

    id: int | None = None
    user_id: str
    symbol: str
    type: str  # buy | sell
    quantity: int
    price: float
    value: float
    timestamp: datetime


class TriggerEventRequest(BaseModel):
    event_type: str
    duration_ms: int | None = Field(default=None, ge=30_000, le=3_600_000)


class TriggeredEvent(BaseModel):
    event_name: str
    event_type: str
    affected_instruments: list[str]
    expires_at: datetime


class CacheEntry(BaseModel):
    symbol: str
    value: float
    age_seconds: float


class CacheStats(BaseModel):
    size: int
    ttl_seconds: float
    entries: list[CacheEntry]


__all__ = [
    "CacheEntry",
    "CacheStats",
    "HoldingValue",
    "InstrumentQuote",
    "Leaderboard",
    "LeaderboardEntry",
    "TickSummary",
    "TransactionView",
    "TriggerEventRequest",
    "TriggeredEvent",
]
