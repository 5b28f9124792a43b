"""Result type for a single source call and the fallback value policy."""
import random
from dataclasses import dataclass
from enum import Enum


class FallbackReason(str, Enum):
    """Why a source contributed a fallback value instead of a measured one."""

    MISSING_CREDENTIALS = "missing_credentials"
    CIRCUIT_OPEN = "circuit_open"
    TIMEOUT = "timeout"
    HTTP_ERROR = "http_error"
    NETWORK_ERROR = "network_error"
    MALFORMED_RESPONSE = "malformed_response"
    NO_DATA = "no_data"
    UNEXPECTED_ERROR = "unexpected_error"


@dataclass(frozen=True)
class SourceOutcome:
    """Contribution of one source: a measured value or a fallback with a reason."""

    source: str
    value: float
    reason: FallbackReason | None = None

    @property
    def is_fallback(self) -> bool:
        return self.reason is not None

    @classmethod
    def success(cls, source: str, value: float) -> "SourceOutcome":
        return cls(source=source, value=value)

    @classmethod
    def fallback(
        cls, source: str, value: float, reason: FallbackReason
    ) -> "SourceOutcome":
        return cls(source=source, value=value, reason=reason)


class FallbackPolicy:
    """Draws bounded pseudo-random fallback values.

    Keeps the aggregate moving when a source is down. Tests inject a seeded
    random.Random (or low == high) for deterministic values.
    """

    def __init__(
        self, low: float, high: float, rng: random.Random | None = None
    ) -> None:
        if low > high:
            raise ValueError(f"Fallback range is empty: [{low}, {high}]")
        self.low = low
        self.high = high
        self._rng = rng or random.Random()

    def draw(self) -> float:
        """Return a value uniformly distributed in [low, high]."""
        return self._rng.uniform(self.low, self.high)
