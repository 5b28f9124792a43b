"""Portfolio valuation and ranking."""
from meme_market.valuation.valuator import (HoldingInput, PortfolioValuator,
                                            Valuation, rank)

__all__ = ["HoldingInput", "PortfolioValuator", "Valuation", "rank"]
