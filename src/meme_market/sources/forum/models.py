"""Models for the forum source (OAuth token, search params and listing)."""
from pydantic import BaseModel, Field


class RedditTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: float = 3600.0


class RedditSearchParams(BaseModel):
    """Params for /r/{subreddit}/search."""

    q: str
    restrict_sr: int = 1
    sort: str = "new"
    t: str = "week"
    limit: int = 10


class RedditPost(BaseModel):
    title: str = ""
    score: int = 0
    num_comments: int = 0

    @property
    def activity(self) -> int:
        """Score + comment count."""
        return self.score + self.num_comments


class RedditChild(BaseModel):
    data: RedditPost


class RedditListingData(BaseModel):
    children: list[RedditChild] = Field(default_factory=list)


class RedditListing(BaseModel):
    data: RedditListingData

    @property
    def posts(self) -> list[RedditPost]:
        return [child.data for child in self.data.children]
