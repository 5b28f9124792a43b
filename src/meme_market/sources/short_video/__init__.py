"""Short-video view-count trend source."""
from meme_market.sources.short_video.tiktok_source import (TikTokSource,
                                                           parse_view_count)

__all__ = ["TikTokSource", "parse_view_count"]
