"""Short-video source that reads public hashtag view counts from TikTok pages."""
import logging
import re

import httpx

from meme_market.sources.core import (FallbackPolicy, MinIntervalLimiter,
                                      SourceUnavailable, TrendSourceABC)
from meme_market.sources.core.terms import hashtags_for
from meme_market.sources.short_video.models import HashtagViews

logger = logging.getLogger(__name__)

# Typical weekly views per symbol; the signal is views relative to this.
BASELINE_VIEWS: dict[str, float] = {
    "SKIBI": 50_000_000,
    "SUS": 30_000_000,
    "OHIO": 20_000_000,
    "GYATT": 15_000_000,
    "RIZZL": 25_000_000,
    "LABUB": 5_000_000,
    "SIGMA": 10_000_000,
    "SAHUR": 3_000_000,
    "FRIED": 8_000_000,
    "TRALA": 2_000_000,
    "CROCO": 4_000_000,
    "FANUM": 12_000_000,
    "CAPPU": 3_000_000,
    "BANANI": 1_000_000,
    "LARILA": 1_500_000,
}
DEFAULT_BASELINE_VIEWS = 5_000_000.0

_SUFFIX = {"": 1, "K": 1_000, "M": 1_000_000, "B": 1_000_000_000}
_MARKUP_VIEWS = re.compile(
    r'challenge-views-count[^>]*>\s*([\d.,]+)\s*([KMB]?)', re.IGNORECASE
)
_JSON_VIEWS = re.compile(r'"viewCount"\s*:\s*"?(\d+)"?')


def parse_view_count(html: str) -> int | None:
    """Extract a hashtag page's view count ("1.2M views" -> 1200000).

    Returns None when the page carries no recognizable count.
    """
    match = _MARKUP_VIEWS.search(html)
    if match:
        number = float(match.group(1).replace(",", ""))
        return round(number * _SUFFIX[match.group(2).upper()])
    match = _JSON_VIEWS.search(html)
    if match:
        return int(match.group(1))
    return None


def baseline_views(symbol: str) -> float:
    return BASELINE_VIEWS.get(symbol.upper(), DEFAULT_BASELINE_VIEWS)


class TikTokSource(TrendSourceABC):
    """Hashtag views relative to the symbol's usual level.

    (avg_views / baseline - 1) * 0.1, bounded to [-0.08, 0.08]. Needs no
    credentials, but every page request goes through one limiter (2s spacing
    by default) shared by all instruments.
    """

    name = "short_video"
    BASE_URL = "https://www.tiktok.com"
    USER_AGENT = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0 Safari/537.36"
    )
    VALUE_RANGE = (-0.08, 0.08)
    FALLBACK_RANGE = (-0.005, 0.005)

    def __init__(
        self,
        *,
        timeout: float = 5.0,
        min_interval_ms: int = 2_000,
        max_hashtags: int = 3,
        limiter: MinIntervalLimiter | None = None,
        fallback: FallbackPolicy | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the short-video source.

        Args:
            timeout: Seconds allowed per page request.
            min_interval_ms: Minimum spacing between page requests.
            max_hashtags: Hashtag pages read per symbol.
            limiter: Limiter to use instead of one built from min_interval_ms.
            fallback: Fallback policy; defaults to uniform in [-0.005, 0.005].
            client: HTTP client; one is created for BASE_URL if omitted.
        """
        super().__init__(
            client
            or httpx.AsyncClient(
                base_url=self.BASE_URL,
                headers={"User-Agent": self.USER_AGENT},
                timeout=timeout,
                follow_redirects=True,
            ),
            value_range=self.VALUE_RANGE,
            fallback=fallback or FallbackPolicy(*self.FALLBACK_RANGE),
            timeout=timeout,
            limiter=limiter or MinIntervalLimiter(min_interval_ms),
        )
        self._max_hashtags = max_hashtags

    async def _hashtag_views(self, hashtag: str) -> HashtagViews | None:
        response = await self._request("GET", f"/tag/{hashtag}")
        views = parse_view_count(response.text)
        if views is None:
            logger.debug("short_video: no view count on #%s", hashtag)
            return None
        return HashtagViews(hashtag=hashtag, views=views)

    async def _fetch_signal(self, symbol: str, terms: list[str]) -> float:
        counts: list[HashtagViews] = []
        last_error: Exception | None = None
        for hashtag in hashtags_for(symbol)[: self._max_hashtags]:
            try:
                found = await self._hashtag_views(hashtag)
            except httpx.HTTPError as exc:
                last_error = exc
                continue
            if found is not None and found.views > 0:
                counts.append(found)
        if not counts:
            if last_error is not None:
                raise last_error
            raise SourceUnavailable(f"no hashtag views for {symbol}", no_data=True)
        avg = sum(c.views for c in counts) / len(counts)
        return (avg / baseline_views(symbol) - 1) * 0.1
