"""Models for the short-video source."""
from pydantic import BaseModel, Field


class HashtagViews(BaseModel):
    """View count scraped from one hashtag page."""

    hashtag: str
    views: int = Field(ge=0)
