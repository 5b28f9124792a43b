"""Database models for the meme market.

Users, holdings and transactions are written by the trading layer; the market
core writes instrument state and price history once per tick.
"""
from datetime import datetime

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import Field, SQLModel

from meme_market.utils import utcnow

# Timestamps are naive UTC; datetime columns use a plain, timezone-naive DateTime.


class UserRecord(SQLModel, table=True):
    """Player account and cash balance."""

    id: str = Field(primary_key=True)  # chat platform user id
    username: str
    display_name: str | None = None
    balance: float = Field(default=1000.0)
    last_daily: datetime | None = Field(default=None, sa_type=DateTime)
    last_message: datetime | None = Field(default=None, sa_type=DateTime)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)


class HoldingRecord(SQLModel, table=True):
    """Signed whole-unit quantity of one instrument held by one user; deleted at zero."""

    __table_args__ = (UniqueConstraint("user_id", "symbol"),)

    id: int | None = Field(default=None, primary_key=True)
    user_id: str = Field(foreign_key="userrecord.id", index=True)
    symbol: str = Field(index=True)
    quantity: int


class TransactionRecord(SQLModel, table=True):
    """Append-only trade log. Positive quantity is a buy, negative a sell."""

    id: int | None = Field(default=None, primary_key=True)
    user_id: str = Field(foreign_key="userrecord.id", index=True)
    symbol: str
    quantity: int
    price: float
    timestamp: datetime = Field(default_factory=utcnow, index=True, sa_type=DateTime)


class InstrumentRecord(SQLModel, table=True):
    """Persisted price state of one instrument."""

    symbol: str = Field(primary_key=True)
    name: str | None = None
    price: float
    ceiling: float
    volatility: str  # low | medium | high | extreme
    last_change: float = 0.0
    last_update: datetime = Field(default_factory=utcnow, sa_type=DateTime)


class PriceHistoryRecord(SQLModel, table=True):
    """One price point per instrument per tick."""

    id: int | None = Field(default=None, primary_key=True)
    symbol: str = Field(index=True)
    price: float
    trend_score: float = 0.0
    timestamp: datetime = Field(default_factory=utcnow, index=True, sa_type=DateTime)
