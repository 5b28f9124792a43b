"""Domain errors raised by the pricing and valuation core.

External-data failures (sources) never surface here; they are mapped to
fallback values in meme_market.sources.core. These errors are caller mistakes.
"""
import math


class InvalidNumericInput(ValueError):
    """Non-finite or out-of-range number passed to a core boundary."""


class UnknownEventType(ValueError):
    """Administrative trigger named an event that is not in the catalog."""


def require_finite(name: str, value: float) -> float:
    """Return value as float; raise InvalidNumericInput if it is NaN or infinite."""
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidNumericInput(f"{name} must be a number, got {value!r}") from exc
    if not math.isfinite(number):
        raise InvalidNumericInput(f"{name} must be finite, got {value!r}")
    return number


def require_positive(name: str, value: float) -> float:
    """Return value as float; raise InvalidNumericInput unless finite and > 0."""
    number = require_finite(name, value)
    if number <= 0:
        raise InvalidNumericInput(f"{name} must be positive, got {value!r}")
    return number


def require_non_negative(name: str, value: float) -> float:
    """Return value as float; raise InvalidNumericInput unless finite and >= 0."""
    number = require_finite(name, value)
    if number < 0:
        raise InvalidNumericInput(f"{name} must not be negative, got {value!r}")
    return number


def require_whole(name: str, value: float) -> int:
    """Return value as int; raise InvalidNumericInput unless finite and integral."""
    number = require_finite(name, value)
    if not number.is_integer():
        raise InvalidNumericInput(f"{name} must be a whole number, got {value!r}")
    return int(number)


class UnknownUser(LookupError):
    """Trade or lookup named a user that is not in the store."""
