"""Models for the micro-blog source (recent search params and payload)."""
from pydantic import BaseModel, Field


class RecentSearchParams(BaseModel):
    """Params for /tweets/search/recent."""

    query: str
    max_results: int = 10
    tweet_fields: str = Field(
        default="public_metrics", serialization_alias="tweet.fields"
    )

    model_config = {"populate_by_name": True}


class PublicMetrics(BaseModel):
    like_count: int = 0
    retweet_count: int = 0
    reply_count: int = 0
    quote_count: int = 0


class Tweet(BaseModel):
    id: str
    text: str = ""
    public_metrics: PublicMetrics = Field(default_factory=PublicMetrics)

    @property
    def engagement(self) -> int:
        """Likes + retweets + replies."""
        m = self.public_metrics
        return m.like_count + m.retweet_count + m.reply_count


class RecentSearchResponse(BaseModel):
    data: list[Tweet] = Field(default_factory=list)
