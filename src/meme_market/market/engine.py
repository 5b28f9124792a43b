"""Price engine: one bounded random-walk step per instrument per tick."""
import logging
import random

from meme_market.errors import require_finite, require_positive
from meme_market.market.models import Instrument, MarketOverrides, PriceUpdate
from meme_market.market.resistance import classify

logger = logging.getLogger(__name__)


class PriceEngine:
    """Computes the next price from zone, volatility class, overrides and trend.

    total = drift + zone bias + random component + trend score, and
    new price = max(price_floor, price * (1 + total)).
    """

    def __init__(
        self,
        *,
        price_floor: float = 0.01,
        base_volatility: float = 0.08,
        base_drift: float = 0.0,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            price_floor: Lowest price an instrument can reach.
            base_volatility: Volatility of the extreme class; other classes
                scale it down (low 0.25, medium 0.5, high 0.75).
            base_drift: Drift per tick when no event overrides it.
            rng: Random source; seed it for deterministic tests.
        """
        self._floor = require_positive("price_floor", price_floor)
        self._base_volatility = require_finite("base_volatility", base_volatility)
        self._base_drift = require_finite("base_drift", base_drift)
        self._rng = rng or random.Random()

    @property
    def price_floor(self) -> float:
        return self._floor

    def next_price(
        self,
        instrument: Instrument,
        trend_score: float,
        overrides: MarketOverrides | None = None,
    ) -> PriceUpdate:
        """Compute one price step.

        Raises:
            InvalidNumericInput: price is not finite and positive, or the
                trend score is not finite.
        """
        old = require_positive("price", instrument.price)
        trend = require_finite("trend_score", trend_score)
        zone = classify(old, instrument.ceiling)

        if overrides is not None and overrides.volatility is not None:
            base_vol = overrides.volatility
        else:
            base_vol = self._base_volatility * instrument.volatility.factor
        if overrides is not None and overrides.drift is not None:
            base_drift = overrides.drift
        else:
            base_drift = self._base_drift

        volatility = base_vol * zone.volatility_multiplier
        drift = base_drift + zone.upward_bias / 100
        random_component = (self._rng.random() - 0.5) * 2 * volatility
        total = drift + random_component + trend

        new = max(self._floor, old * (1 + total))
        return PriceUpdate(
            symbol=instrument.symbol,
            old_price=old,
            new_price=new,
            change_percent=(new - old) / old * 100,
            zone=zone.zone.value,
            trend_score=trend,
            event_type=overrides.event_type if overrides else None,
        )
