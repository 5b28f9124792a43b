"""Shared utilities for the market service."""
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

DECIMALS = 2
_QUANTUM = Decimal(1).scaleb(-DECIMALS)


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (the store persists naive UTC)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def round_money(x: float) -> float:
    """Round a monetary value to 2 decimal places, half-up (1.005 -> 1.01)."""
    return float(Decimal(repr(float(x))).quantize(_QUANTUM, rounding=ROUND_HALF_UP))


def clamp(x: float, low: float, high: float) -> float:
    """Clamp x into [low, high]."""
    return max(low, min(high, x))
