"""Market core: instruments, resistance zones, price engine and events."""
from meme_market.market.engine import PriceEngine
from meme_market.market.events import (CATALOG, ActiveEvent, EventSpec,
                                       MarketEventRegistry)
from meme_market.market.models import (Instrument, MarketOverrides,
                                       PriceUpdate, VolatilityClass)
from meme_market.market.resistance import ZONES, Zone, ZoneName, classify

__all__ = [
    "ActiveEvent",
    "CATALOG",
    "EventSpec",
    "Instrument",
    "MarketEventRegistry",
    "MarketOverrides",
    "PriceEngine",
    "PriceUpdate",
    "VolatilityClass",
    "ZONES",
    "Zone",
    "ZoneName",
    "classify",
]
