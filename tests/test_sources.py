import json
import logging
import math
from datetime import datetime

import httpx
import pytest
from conftest import StaticSource
from pydantic import ValidationError

from meme_market.sources.core import (FallbackPolicy, FallbackReason,
                                      MalformedExternalResponse,
                                      MinIntervalLimiter, SourceErrorMapper,
                                      SourceUnavailable, search_terms_for)
from meme_market.sources.forum import RedditSource
from meme_market.sources.micro_blog import TwitterSource
from meme_market.sources.micro_blog.models import RecentSearchResponse
from meme_market.sources.search_trends import GoogleTrendsSource
from meme_market.sources.short_video import TikTokSource, parse_view_count
from meme_market.sources.video import YouTubeSource

ZERO = FallbackPolicy(0.0, 0.0)


def _client(handler, base_url: str = "") -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=base_url, transport=httpx.MockTransport(handler))


def _tweets(*metrics):
    return {
        "data": [
            {"id": str(i), "public_metrics": m} for i, m in enumerate(metrics)
        ]
    }


# ---- micro-blog ----

async def test_twitter_averages_engagement():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json=_tweets(
                {"like_count": 10, "retweet_count": 5, "reply_count": 5},
                {"like_count": 20},
            ),
        )

    source = TwitterSource(
        "token", fallback=ZERO, client=_client(handler, TwitterSource.BASE_URL)
    )
    outcome = await source.contribution("SKIBI", search_terms_for("SKIBI"))

    assert not outcome.is_fallback
    assert outcome.value == pytest.approx(0.02)
    request = seen[0]
    assert request.url.path == "/2/tweets/search/recent"
    assert request.url.params["query"] == '"skibidi toilet" OR skibidi'
    assert request.url.params["tweet.fields"] == "public_metrics"
    assert request.url.params["max_results"] == "10"
    assert request.headers["Authorization"] == "Bearer token"


async def test_twitter_without_token_falls_back_without_io(monkeypatch):
    monkeypatch.delenv("TWITTER_BEARER_TOKEN", raising=False)
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json=_tweets())

    source = TwitterSource(fallback=ZERO, client=_client(handler))
    outcome = await source.contribution("SKIBI", ["skibidi"])

    assert outcome.reason is FallbackReason.MISSING_CREDENTIALS
    assert outcome.value == 0.0
    assert calls == []


async def test_twitter_clamps_to_its_range():
    def handler(request):
        return httpx.Response(200, json=_tweets({"like_count": 1_000_000}))

    source = TwitterSource("t", fallback=ZERO, client=_client(handler, TwitterSource.BASE_URL))
    outcome = await source.contribution("SUS", ["sus"])
    assert outcome.value == 0.05


@pytest.mark.parametrize(
    "response,reason",
    [
        (httpx.Response(200, json={"meta": {"result_count": 0}}), FallbackReason.NO_DATA),
        (httpx.Response(429, json={"title": "Too Many Requests"}), FallbackReason.HTTP_ERROR),
        (httpx.Response(200, json={"data": "oops"}), FallbackReason.MALFORMED_RESPONSE),
        (httpx.Response(200, text="<html>"), FallbackReason.MALFORMED_RESPONSE),
    ],
)
async def test_twitter_failures_become_fallbacks(response, reason):
    source = TwitterSource(
        "t",
        fallback=FallbackPolicy(0.01, 0.01),
        client=_client(lambda request: response, TwitterSource.BASE_URL),
    )
    outcome = await source.contribution("SUS", ["sus"])
    assert outcome.reason is reason
    assert outcome.value == 0.01


async def test_timeout_becomes_fallback():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    source = TwitterSource("t", fallback=ZERO, client=_client(handler, TwitterSource.BASE_URL))
    outcome = await source.contribution("SUS", ["sus"])
    assert outcome.reason is FallbackReason.TIMEOUT


async def test_connection_error_becomes_fallback():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    source = TwitterSource("t", fallback=ZERO, client=_client(handler, TwitterSource.BASE_URL))
    outcome = await source.contribution("SUS", ["sus"])
    assert outcome.reason is FallbackReason.NETWORK_ERROR


# ---- forum ----

def _reddit_handler(calls: list[str]):
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.host)
        if request.url.path == "/api/v1/access_token":
            assert request.method == "POST"
            return httpx.Response(200, json={"access_token": "abc", "expires_in": 3600})
        assert request.headers["Authorization"] == "Bearer abc"
        assert request.url.path == "/r/dankmemes/search"
        assert request.url.params["sort"] == "new"
        assert request.url.params["t"] == "week"
        return httpx.Response(
            200,
            json={
                "data": {
                    "children": [
                        {"data": {"score": 10, "num_comments": 5}},
                        {"data": {"score": 5, "num_comments": 0}},
                    ]
                }
            },
        )

    return handler


async def test_reddit_averages_activity_and_reuses_token():
    calls: list[str] = []
    source = RedditSource(
        "id", "secret", fallback=ZERO, client=_client(_reddit_handler(calls))
    )

    first = await source.contribution("SKIBI", ["skibidi toilet"])
    second = await source.contribution("SKIBI", ["skibidi toilet"])

    assert first.value == pytest.approx(0.02)
    assert second.value == pytest.approx(0.02)
    assert calls == ["www.reddit.com", "oauth.reddit.com", "oauth.reddit.com"]


async def test_reddit_needs_both_credentials(monkeypatch):
    monkeypatch.delenv("REDDIT_CLIENT_SECRET", raising=False)
    source = RedditSource("id", None, fallback=ZERO, client=_client(lambda r: None))
    outcome = await source.contribution("SKIBI", ["skibidi"])
    assert outcome.reason is FallbackReason.MISSING_CREDENTIALS


# ---- video ----

async def test_youtube_counts_recent_uploads():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"items": [{"id": {"videoId": "a"}}]})

    source = YouTubeSource(
        "key",
        fallback=ZERO,
        client=_client(handler, YouTubeSource.BASE_URL),
        now=lambda: datetime(2024, 1, 8),
    )
    outcome = await source.contribution("OHIO", ["ohio meme"])

    assert outcome.value == pytest.approx(0.01)
    params = seen[0].url.params
    assert params["publishedAfter"] == "2024-01-01T00:00:00Z"
    assert params["type"] == "video"
    assert params["maxResults"] == "25"
    assert "key" not in params
    assert seen[0].headers["X-Goog-Api-Key"] == "key"


async def test_youtube_many_uploads_clamp_to_range():
    items = [{"id": {"videoId": str(i)}} for i in range(25)]
    source = YouTubeSource(
        "key",
        fallback=ZERO,
        client=_client(lambda r: httpx.Response(200, json={"items": items}), YouTubeSource.BASE_URL),
    )
    outcome = await source.contribution("OHIO", ["ohio meme"])
    assert outcome.value == 0.02


async def test_youtube_failure_log_omits_api_key(caplog):
    source = YouTubeSource(
        "SECRET-KEY-123",
        fallback=ZERO,
        client=_client(lambda r: httpx.Response(403, json={}), YouTubeSource.BASE_URL),
    )
    with caplog.at_level(logging.WARNING):
        outcome = await source.contribution("OHIO", ["ohio meme"])

    assert outcome.is_fallback
    assert "HTTP 403" in caplog.text
    assert "SECRET-KEY-123" not in caplog.text


# ---- search interest ----

def _trends_handler(points, seen):
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path.endswith("/explore"):
            body = {"widgets": [{"id": "TIMESERIES", "token": "tok", "request": {"time": "now 7-d"}}]}
            return httpx.Response(200, text=")]}'\n" + json.dumps(body))
        body = {"default": {"timelineData": [{"time": str(i), "value": [v]} for i, v in enumerate(points)]}}
        return httpx.Response(200, text=")]}',\n" + json.dumps(body))

    return handler


async def test_google_trends_centres_recent_interest():
    seen: list[httpx.Request] = []
    source = GoogleTrendsSource(
        limiter=MinIntervalLimiter(0),
        fallback=ZERO,
        client=_client(_trends_handler([40, 70, 80], seen), GoogleTrendsSource.BASE_URL),
    )
    outcome = await source.contribution("SKIBI", ["skibidi toilet"])

    assert outcome.value == pytest.approx(0.025)
    explore, multiline = seen
    assert json.loads(explore.url.params["req"])["comparisonItem"][0]["keyword"] == "skibidi toilet"
    assert multiline.url.path.endswith("/widgetdata/multiline")
    assert multiline.url.params["token"] == "tok"


async def test_google_trends_empty_series_is_no_data():
    source = GoogleTrendsSource(
        limiter=MinIntervalLimiter(0),
        fallback=ZERO,
        client=_client(_trends_handler([], []), GoogleTrendsSource.BASE_URL),
    )
    outcome = await source.contribution("SKIBI", ["skibidi toilet"])
    assert outcome.reason is FallbackReason.NO_DATA


async def test_google_trends_stops_calling_after_repeated_failures():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(429)

    source = GoogleTrendsSource(
        limiter=MinIntervalLimiter(0),
        failure_threshold=2,
        fallback=ZERO,
        client=_client(handler, GoogleTrendsSource.BASE_URL),
    )
    reasons = [(await source.contribution("SUS", ["sus"])).reason for _ in range(3)]

    assert reasons == [
        FallbackReason.HTTP_ERROR,
        FallbackReason.HTTP_ERROR,
        FallbackReason.CIRCUIT_OPEN,
    ]
    assert len(calls) == 2
    assert source.circuit_open


# ---- short video ----

@pytest.mark.parametrize(
    "html,expected",
    [
        ('<strong data-e2e="challenge-views-count">1.2M views</strong>', 1_200_000),
        ('<strong title="views" class="challenge-views-count">2.5B</strong>', 2_500_000_000),
        ('<h2 data-e2e="challenge-views-count">12,345 views</h2>', 12_345),
        ('<h2 data-e2e="challenge-views-count">850K views</h2>', 850_000),
        ('{"stats":{"viewCount":"123456"}}', 123_456),
        ('{"viewCount":789}', 789),
        ("<html>nothing here</html>", None),
    ],
)
def test_parse_view_count(html, expected):
    assert parse_view_count(html) == expected


async def test_tiktok_compares_views_with_baseline():
    seen = []

    def handler(request):
        seen.append(request.url.path)
        return httpx.Response(200, text='{"viewCount":"60000000"}')

    source = TikTokSource(
        limiter=MinIntervalLimiter(0),
        fallback=ZERO,
        client=_client(handler, TikTokSource.BASE_URL),
    )
    outcome = await source.contribution("SKIBI", [])

    # 60M against a 50M baseline
    assert outcome.value == pytest.approx(0.02)
    assert seen == ["/tag/skibidi", "/tag/skibiditoilet", "/tag/skibidibop"]


async def test_tiktok_pages_without_counts_are_no_data():
    source = TikTokSource(
        limiter=MinIntervalLimiter(0),
        fallback=ZERO,
        client=_client(lambda r: httpx.Response(200, text="<html></html>"), TikTokSource.BASE_URL),
    )
    outcome = await source.contribution("SKIBI", [])
    assert outcome.reason is FallbackReason.NO_DATA


async def test_tiktok_spaces_every_page_request(clock):
    limiter = MinIntervalLimiter(2000, clock=clock, sleep=clock.sleep)
    source = TikTokSource(
        limiter=limiter,
        max_hashtags=2,
        fallback=ZERO,
        client=_client(lambda r: httpx.Response(200, text='{"viewCount":"1"}'), TikTokSource.BASE_URL),
    )
    await source.contribution("SUS", [])
    await source.contribution("OHIO", [])

    assert clock.sleeps == [2.0, 2.0, 2.0]


# ---- shared policy ----

async def test_rate_limiter_delays_but_never_drops(clock):
    limiter = MinIntervalLimiter(2000, clock=clock, sleep=clock.sleep)

    assert await limiter.wait() == 0.0
    clock.advance(0.5)
    assert await limiter.wait() == pytest.approx(1.5)
    clock.advance(5)
    assert await limiter.wait() == 0.0
    assert clock.sleeps == [pytest.approx(1.5)]


async def test_non_finite_signal_is_malformed():
    source = StaticSource("video", math.nan)
    outcome = await source.contribution("SKIBI", [])
    assert outcome.reason is FallbackReason.MALFORMED_RESPONSE


async def test_fallback_values_stay_in_policy_range():
    source = StaticSource("forum", exc=RuntimeError("boom"), fallback=(-0.01, 0.01))
    for _ in range(50):
        outcome = await source.contribution("SKIBI", [])
        assert outcome.reason is FallbackReason.UNEXPECTED_ERROR
        assert -0.01 <= outcome.value <= 0.01


def test_error_mapper_classifies_exceptions():
    mapper = SourceErrorMapper()
    request = httpx.Request("GET", "https://example.test")
    response = httpx.Response(503, request=request)

    assert mapper.to_reason(SourceUnavailable("x", no_data=True)) is FallbackReason.NO_DATA
    assert mapper.to_reason(SourceUnavailable("x")) is FallbackReason.NETWORK_ERROR
    assert mapper.to_reason(TimeoutError()) is FallbackReason.TIMEOUT
    assert (
        mapper.to_reason(httpx.HTTPStatusError("x", request=request, response=response))
        is FallbackReason.HTTP_ERROR
    )
    assert mapper.to_reason(MalformedExternalResponse("x")) is FallbackReason.MALFORMED_RESPONSE
    assert mapper.to_reason(KeyError("k")) is FallbackReason.MALFORMED_RESPONSE
    assert mapper.to_reason(RuntimeError()) is FallbackReason.UNEXPECTED_ERROR


def test_error_mapper_treats_validation_errors_as_malformed():
    with pytest.raises(ValidationError) as info:
        RecentSearchResponse.model_validate({"data": 3})
    assert SourceErrorMapper().to_reason(info.value) is FallbackReason.MALFORMED_RESPONSE
