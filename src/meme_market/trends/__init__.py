"""Trend scoring: aggregation of source signals and the score cache."""
from meme_market.trends.aggregator import (DEFAULT_WEIGHTS, TrendAggregator,
                                           WeightedSource)
from meme_market.trends.cache import TrendCache
from meme_market.trends.models import SourceComponent, TrendScore

__all__ = [
    "DEFAULT_WEIGHTS",
    "SourceComponent",
    "TrendAggregator",
    "TrendCache",
    "TrendScore",
    "WeightedSource",
]
