"""Search-interest source backed by the Google Trends web API."""
import json
from statistics import mean

import httpx

from meme_market.sources.core import (FallbackPolicy, MalformedExternalResponse,
                                      MinIntervalLimiter, SourceUnavailable,
                                      TrendSourceABC)
from meme_market.sources.search_trends.models import (MultilineResponse,
                                                      TrendsExploreParams,
                                                      TrendsExploreResponse,
                                                      TrendsWidgetParams)


def strip_xssi(text: str) -> dict:
    """Decode a Trends payload, dropping the anti-XSSI prefix before the first '{'."""
    start = text.find("{")
    if start < 0:
        raise MalformedExternalResponse("no JSON object in trends response")
    return json.loads(text[start:])


class GoogleTrendsSource(TrendSourceABC):
    """Relative search interest for the symbol's primary search phrase.

    The last two points of the 7-day interest series (0-100) are averaged and
    centred on 50, so a phrase at its weekly mean contributes nothing:
    (avg - 50) / 1000, bounded to [-0.05, 0.05].

    Google throttles aggressively. Requests are spaced (10s by default) and
    after repeated failures the source stops calling out for a cooldown.
    """

    name = "search_trend"
    BASE_URL = "https://trends.google.com/trends/api"
    VALUE_RANGE = (-0.05, 0.05)
    FALLBACK_RANGE = (-0.01, 0.01)

    def __init__(
        self,
        *,
        geo: str = "US",
        timeframe: str = "now 7-d",
        timeout: float = 10.0,
        min_interval_ms: int = 10_000,
        failure_threshold: int = 5,
        circuit_cooldown_seconds: float = 300.0,
        limiter: MinIntervalLimiter | None = None,
        fallback: FallbackPolicy | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the search-interest source.

        Args:
            geo: Region code for the interest series.
            timeframe: Trends timeframe expression.
            timeout: Seconds allowed per request.
            min_interval_ms: Minimum spacing between queries.
            failure_threshold: Consecutive failures before the cooldown.
            circuit_cooldown_seconds: Cooldown length in seconds.
            limiter: Limiter to use instead of one built from min_interval_ms.
            fallback: Fallback policy; defaults to uniform in [-0.01, 0.01].
            client: HTTP client; one is created for BASE_URL if omitted.
        """
        super().__init__(
            client or httpx.AsyncClient(base_url=self.BASE_URL, timeout=timeout),
            value_range=self.VALUE_RANGE,
            fallback=fallback or FallbackPolicy(*self.FALLBACK_RANGE),
            timeout=timeout,
            limiter=limiter or MinIntervalLimiter(min_interval_ms),
            failure_threshold=failure_threshold,
            circuit_cooldown_seconds=circuit_cooldown_seconds,
        )
        self._geo = geo
        self._timeframe = timeframe

    async def _fetch_signal(self, symbol: str, terms: list[str]) -> float:
        keyword = terms[0] if terms else symbol.lower()
        comparison = {
            "comparisonItem": [
                {"keyword": keyword, "geo": self._geo, "time": self._timeframe}
            ],
            "category": 0,
            "property": "",
        }
        params = TrendsExploreParams(req=json.dumps(comparison)).model_dump()
        response = await self._request("GET", "/explore", params=params)
        widget = TrendsExploreResponse.model_validate(
            strip_xssi(response.text)
        ).timeseries()
        if widget is None:
            raise MalformedExternalResponse("explore response has no TIMESERIES widget")

        params = TrendsWidgetParams(
            req=json.dumps(widget.request), token=widget.token
        ).model_dump()
        # Same logical query as /explore: not spaced again.
        response = await self._request(
            "GET", "/widgetdata/multiline", params=params, throttle=False
        )
        series = MultilineResponse.model_validate(strip_xssi(response.text))
        recent = [p.value[0] for p in series.default.timeline_data[-2:] if p.value]
        if not recent:
            raise SourceUnavailable(f"no search interest for {keyword!r}", no_data=True)
        return (mean(recent) - 50) / 1000
