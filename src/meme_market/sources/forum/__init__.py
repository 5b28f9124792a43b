"""Forum activity trend source."""
from meme_market.sources.forum.reddit_source import RedditSource

__all__ = ["RedditSource"]
