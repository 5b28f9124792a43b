"""Resistance zones: how close a price is to its ceiling shapes its moves."""
import math
from dataclasses import dataclass
from enum import Enum

from meme_market.errors import InvalidNumericInput


class ZoneName(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EXTREME = "extreme"


@dataclass(frozen=True)
class Zone:
    """Volatility damping and drift bias for a price/ceiling ratio band.

    upward_bias is in percent per tick (-1.5 means -1.5%).
    """

    zone: ZoneName
    volatility_multiplier: float
    upward_bias: float


# (lower bound of price/ceiling ratio, zone), highest first; lower bounds are inclusive.
ZONES: tuple[tuple[float, Zone], ...] = (
    (0.95, Zone(ZoneName.EXTREME, 0.20, -3.0)),
    (0.80, Zone(ZoneName.HIGH, 0.50, -1.5)),
    (0.60, Zone(ZoneName.MEDIUM, 0.80, -0.5)),
    (0.0, Zone(ZoneName.LOW, 1.00, 0.0)),
)


def classify(price: float, ceiling: float) -> Zone:
    """Classify price against ceiling.

    A non-positive price is treated as ratio 0 (low zone).

    Raises:
        InvalidNumericInput: ceiling is not a finite positive number, or
            price is not finite.
    """
    if not math.isfinite(ceiling) or ceiling <= 0:
        raise InvalidNumericInput(f"ceiling must be finite and positive, got {ceiling!r}")
    if not math.isfinite(price):
        raise InvalidNumericInput(f"price must be finite, got {price!r}")
    ratio = price / ceiling if price > 0 else 0.0
    for lower, zone in ZONES:
        if ratio >= lower:
            return zone
    return ZONES[-1][1]
