"""Video upload-volume trend source."""
from meme_market.sources.video.youtube_source import YouTubeSource

__all__ = ["YouTubeSource"]
