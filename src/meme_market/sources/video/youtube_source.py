"""Video upload-volume source backed by the YouTube Data API v3."""
import os
from collections.abc import Callable
from datetime import datetime, timedelta

import httpx

from meme_market.sources.core import FallbackPolicy, TrendSourceABC
from meme_market.sources.video.models import (VideoSearchParams,
                                              VideoSearchResponse)
from meme_market.utils import utcnow


class YouTubeSource(TrendSourceABC):
    """Number of videos about the symbol uploaded in the last week.

    count / 100, bounded to [-0.01, 0.02]. One search returns at most 25
    results, so the signal saturates at 0.25 before the clamp. An empty
    result is a valid measurement of zero uploads.
    """

    name = "video"
    requires_credentials = True
    BASE_URL = "https://www.googleapis.com/youtube/v3"
    VALUE_RANGE = (-0.01, 0.02)
    FALLBACK_RANGE = (-0.01, 0.01)
    LOOKBACK = timedelta(days=7)

    def __init__(
        self,
        api_key: str | None = None,
        *,
        timeout: float = 10.0,
        max_results: int = 25,
        fallback: FallbackPolicy | None = None,
        client: httpx.AsyncClient | None = None,
        now: Callable[[], datetime] = utcnow,
    ) -> None:
        """Initialize the video source.

        Args:
            api_key: Data API key. Defaults to YOUTUBE_API_KEY env var.
            timeout: Seconds allowed per request.
            max_results: Search page size.
            fallback: Fallback policy; defaults to uniform in [-0.01, 0.01].
            client: HTTP client; one is created for BASE_URL if omitted.
            now: Naive-UTC clock for the lookback window.
        """
        super().__init__(
            client or httpx.AsyncClient(base_url=self.BASE_URL, timeout=timeout),
            value_range=self.VALUE_RANGE,
            fallback=fallback or FallbackPolicy(*self.FALLBACK_RANGE),
            timeout=timeout,
        )
        self._api_key = api_key or os.getenv("YOUTUBE_API_KEY")
        self._max_results = max_results
        self._now = now

    @property
    def has_credentials(self) -> bool:
        return bool(self._api_key)

    async def _fetch_signal(self, symbol: str, terms: list[str]) -> float:
        since = self._now() - self.LOOKBACK
        params = VideoSearchParams(
            q=terms[0] if terms else symbol.lower(),
            published_after=since.strftime("%Y-%m-%dT%H:%M:%SZ"),
            max_results=self._max_results,
        ).model_dump(by_alias=True)
        response = await self._request(
            "GET",
            "/search",
            params=params,
            headers={"X-Goog-Api-Key": self._api_key or ""},
        )
        videos = VideoSearchResponse.model_validate(response.json()).items
        return len(videos) / 100
