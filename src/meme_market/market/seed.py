"""Default instruments listed when the market starts empty."""
from meme_market.market.models import Instrument, VolatilityClass

# symbol, name, starting price, ceiling, volatility class
_DEFAULTS: tuple[tuple[str, str, float, float, VolatilityClass], ...] = (
    ("SKIBI", "Skibidi Toilet", 0.75, 750.0, VolatilityClass.EXTREME),
    ("SUS", "Among Us", 0.20, 350.0, VolatilityClass.HIGH),
    ("SAHUR", "Tun Tun Sahur", 1.10, 200.0, VolatilityClass.EXTREME),
    ("LABUB", "Labubu", 4.50, 600.0, VolatilityClass.LOW),
    ("OHIO", "Only in Ohio", 1.25, 800.0, VolatilityClass.HIGH),
    ("RIZZL", "Rizzler", 0.35, 400.0, VolatilityClass.MEDIUM),
    ("GYATT", "Gyatt", 0.15, 150.0, VolatilityClass.EXTREME),
    ("FRIED", "Deep Fried", 0.10, 100.0, VolatilityClass.HIGH),
    ("SIGMA", "Sigma Grindset", 5.00, 900.0, VolatilityClass.LOW),
    ("TRALA", "Tralalero Tralala", 0.65, 180.0, VolatilityClass.MEDIUM),
    ("CROCO", "Bombardiro Crocodilo", 0.45, 220.0, VolatilityClass.EXTREME),
    ("FANUM", "Fanum Tax", 0.30, 300.0, VolatilityClass.MEDIUM),
    ("CAPPU", "Ballerina Cappuccina", 2.75, 450.0, VolatilityClass.MEDIUM),
    ("BANANI", "Chimpanzini Bananini", 0.40, 65.0, VolatilityClass.LOW),
    ("LARILA", "Lirili Larila", 3.25, 550.0, VolatilityClass.HIGH),
)


def default_instruments() -> list[Instrument]:
    """Fresh Instrument objects for the default listing."""
    return [
        Instrument(symbol=s, name=n, price=p, ceiling=c, volatility=v)
        for s, n, p, c, v in _DEFAULTS
    ]
