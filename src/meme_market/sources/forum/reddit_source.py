"""Forum activity source backed by the Reddit OAuth API."""
import logging
import os
import time
from collections.abc import Callable

import httpx

from meme_market.sources.core import (FallbackPolicy, SourceUnavailable,
                                      TrendSourceABC)
from meme_market.sources.forum.models import (RedditListing,
                                              RedditSearchParams,
                                              RedditTokenResponse)

logger = logging.getLogger(__name__)


class RedditSource(TrendSourceABC):
    """Activity of this week's newest meme-forum posts about the symbol.

    Searches one subreddit for the primary phrase and averages
    score + comments over at most ten posts: avg / 500, bounded to
    [-0.02, 0.04]. Authenticates with the application-only
    (client credentials) flow; the token is reused until shortly before it
    expires.
    """

    name = "forum"
    requires_credentials = True
    TOKEN_URL = "https://www.reddit.com/api/v1/access_token"
    API_URL = "https://oauth.reddit.com"
    USER_AGENT = "meme-market/0.1"
    VALUE_RANGE = (-0.02, 0.04)
    FALLBACK_RANGE = (-0.01, 0.01)
    # Refresh this many seconds before the token's stated expiry.
    TOKEN_MARGIN_SECONDS = 60.0

    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        *,
        subreddit: str = "dankmemes",
        timeout: float = 10.0,
        fallback: FallbackPolicy | None = None,
        client: httpx.AsyncClient | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the forum source.

        Args:
            client_id: OAuth client id. Defaults to REDDIT_CLIENT_ID env var.
            client_secret: OAuth secret. Defaults to REDDIT_CLIENT_SECRET env var.
            subreddit: Subreddit searched.
            timeout: Seconds allowed per request.
            fallback: Fallback policy; defaults to uniform in [-0.01, 0.01].
            client: HTTP client; one is created if omitted.
            clock: Monotonic clock used for token expiry.
        """
        super().__init__(
            client
            or httpx.AsyncClient(headers={"User-Agent": self.USER_AGENT}, timeout=timeout),
            value_range=self.VALUE_RANGE,
            fallback=fallback or FallbackPolicy(*self.FALLBACK_RANGE),
            timeout=timeout,
            clock=clock,
        )
        self._client_id = client_id or os.getenv("REDDIT_CLIENT_ID")
        self._client_secret = client_secret or os.getenv("REDDIT_CLIENT_SECRET")
        self._subreddit = subreddit
        self._token: str | None = None
        self._token_expires_at = 0.0

    @property
    def has_credentials(self) -> bool:
        return bool(self._client_id and self._client_secret)

    async def _access_token(self) -> str:
        if self._token and self._clock() < self._token_expires_at:
            return self._token
        response = await self._request(
            "POST",
            self.TOKEN_URL,
            data={"grant_type": "client_credentials"},
            auth=(self._client_id or "", self._client_secret or ""),
            headers={"User-Agent": self.USER_AGENT},
        )
        token = RedditTokenResponse.model_validate(response.json())
        self._token = token.access_token
        self._token_expires_at = (
            self._clock() + max(0.0, token.expires_in - self.TOKEN_MARGIN_SECONDS)
        )
        logger.debug("forum: new access token, valid %.0fs", token.expires_in)
        return self._token

    async def _fetch_signal(self, symbol: str, terms: list[str]) -> float:
        token = await self._access_token()
        params = RedditSearchParams(q=terms[0] if terms else symbol.lower())
        try:
            response = await self._request(
                "GET",
                f"{self.API_URL}/r/{self._subreddit}/search",
                params=params.model_dump(),
                headers={
                    "Authorization": f"Bearer {token}",
                    "User-Agent": self.USER_AGENT,
                },
            )
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == 401:
                # Revoked or expired early: fetch a new token next time.
                self._token = None
            raise
        posts = RedditListing.model_validate(response.json()).posts
        if not posts:
            raise SourceUnavailable(f"no forum posts for {params.q!r}", no_data=True)
        avg = sum(p.activity for p in posts) / len(posts)
        return avg / 500
