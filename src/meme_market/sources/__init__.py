"""Trend signal sources.

Each source turns one external signal into a bounded contribution:

- GoogleTrendsSource: search interest (search_trend)
- TwitterSource: post engagement (micro_blog)
- RedditSource: forum activity (forum)
- YouTubeSource: upload volume (video)
- TikTokSource: hashtag views (short_video)

All sources implement TrendSourceABC and return SourceOutcome values; a
failing source contributes a bounded fallback instead of raising.

Example:
    async with TikTokSource() as source:
        outcome = await source.contribution("SKIBI", search_terms_for("SKIBI"))
        print(outcome.value, outcome.reason)
"""
from meme_market.sources.core import (FallbackPolicy, FallbackReason,
                                      SourceOutcome, TrendSourceABC,
                                      search_terms_for)
from meme_market.sources.forum import RedditSource
from meme_market.sources.micro_blog import TwitterSource
from meme_market.sources.search_trends import GoogleTrendsSource
from meme_market.sources.short_video import TikTokSource
from meme_market.sources.video import YouTubeSource

__all__ = [
    "FallbackPolicy",
    "FallbackReason",
    "GoogleTrendsSource",
    "RedditSource",
    "SourceOutcome",
    "TikTokSource",
    "TrendSourceABC",
    "TwitterSource",
    "YouTubeSource",
    "search_terms_for",
]
