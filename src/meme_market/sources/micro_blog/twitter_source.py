"""Micro-blog engagement source backed by the X/Twitter v2 recent search API."""
import os

import httpx

from meme_market.sources.core import (FallbackPolicy, SourceUnavailable,
                                      TrendSourceABC)
from meme_market.sources.micro_blog.models import (RecentSearchParams,
                                                   RecentSearchResponse)


class TwitterSource(TrendSourceABC):
    """Average engagement of recent posts mentioning the symbol.

    Queries the first two search phrases OR-ed together, takes the ten most
    recent posts and averages likes + retweets + replies: avg / 1000,
    bounded to [-0.02, 0.05]. Needs a bearer token; without one the source
    always falls back.
    """

    name = "micro_blog"
    requires_credentials = True
    BASE_URL = "https://api.twitter.com/2"
    VALUE_RANGE = (-0.02, 0.05)
    FALLBACK_RANGE = (-0.015, 0.015)

    def __init__(
        self,
        bearer_token: str | None = None,
        *,
        timeout: float = 10.0,
        max_results: int = 10,
        fallback: FallbackPolicy | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the micro-blog source.

        Args:
            bearer_token: API bearer token. Defaults to TWITTER_BEARER_TOKEN env var.
            timeout: Seconds allowed per request.
            max_results: Posts fetched per query (API minimum is 10).
            fallback: Fallback policy; defaults to uniform in [-0.015, 0.015].
            client: HTTP client; one is created for BASE_URL if omitted.
        """
        self._bearer_token = bearer_token or os.getenv("TWITTER_BEARER_TOKEN")
        headers: dict[str, str] = {}
        if self._bearer_token:
            headers["Authorization"] = f"Bearer {self._bearer_token}"
        super().__init__(
            client
            or httpx.AsyncClient(base_url=self.BASE_URL, headers=headers, timeout=timeout),
            value_range=self.VALUE_RANGE,
            fallback=fallback or FallbackPolicy(*self.FALLBACK_RANGE),
            timeout=timeout,
        )
        self._max_results = max_results

    @property
    def has_credentials(self) -> bool:
        return bool(self._bearer_token)

    async def _fetch_signal(self, symbol: str, terms: list[str]) -> float:
        phrases = terms[:2] or [symbol.lower()]
        query = " OR ".join(f'"{p}"' if " " in p else p for p in phrases)
        params = RecentSearchParams(
            query=query, max_results=self._max_results
        ).model_dump(by_alias=True)
        response = await self._request(
            "GET",
            "/tweets/search/recent",
            params=params,
            headers={"Authorization": f"Bearer {self._bearer_token}"},
        )
        tweets = RecentSearchResponse.model_validate(response.json()).data
        if not tweets:
            raise SourceUnavailable(f"no recent posts for {query!r}", no_data=True)
        avg = sum(t.engagement for t in tweets) / len(tweets)
        return avg / 1000
