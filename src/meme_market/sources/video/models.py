"""Models for the video source (search params and payload)."""
from pydantic import BaseModel, Field


class VideoSearchParams(BaseModel):
    """Params for /search. The API key travels in the X-Goog-Api-Key header."""

    part: str = "snippet"
    q: str
    type: str = "video"
    order: str = "date"
    published_after: str = Field(serialization_alias="publishedAfter")
    max_results: int = Field(default=25, serialization_alias="maxResults")

    model_config = {"populate_by_name": True}


class VideoId(BaseModel):
    kind: str = ""
    video_id: str | None = Field(default=None, alias="videoId")


class VideoSearchItem(BaseModel):
    id: VideoId = Field(default_factory=VideoId)


class VideoSearchResponse(BaseModel):
    items: list[VideoSearchItem] = Field(default_factory=list)
