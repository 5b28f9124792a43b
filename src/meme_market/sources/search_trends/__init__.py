"""Search-interest trend source."""
from meme_market.sources.search_trends.google_trends_source import \
    GoogleTrendsSource

__all__ = ["GoogleTrendsSource"]
