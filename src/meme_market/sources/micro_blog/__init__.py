"""Micro-blog engagement trend source."""
from meme_market.sources.micro_blog.twitter_source import TwitterSource

__all__ = ["TwitterSource"]
