import asyncio

import pytest
from conftest import StaticSource, make_sources

from meme_market.sources.core import FallbackReason
from meme_market.trends.aggregator import TrendAggregator, WeightedSource
from meme_market.trends.cache import TrendCache


class BrokenSource(StaticSource):
    """Violates the source contract by raising out of contribution()."""

    async def contribution(self, symbol, terms):
        raise RuntimeError("contract broken")


def _aggregator(sources, **kwargs) -> TrendAggregator:
    return TrendAggregator.with_default_weights(sources, TrendCache(), **kwargs)


async def test_weighted_sum_of_contributions():
    aggregator = _aggregator(
        make_sources(
            {
                "search_trend": 0.04,
                "micro_blog": 0.04,
                "forum": 0.04,
                "video": 0.04,
                "short_video": 0.08,
            }
        )
    )
    # 0.012 + 0.010 + 0.008 + 0.006 + 0.008
    assert await aggregator.score("SKIBI") == pytest.approx(0.044)


@pytest.mark.parametrize("raw,expected", [(1.0, 0.08), (-1.0, -0.08)])
async def test_score_is_bounded(raw, expected):
    names = ("search_trend", "micro_blog", "forum", "video", "short_video")
    aggregator = _aggregator(make_sources({name: raw for name in names}))
    assert await aggregator.score("SUS") == pytest.approx(expected)


async def test_every_source_failing_still_scores():
    sources = [
        StaticSource(name, exc=RuntimeError("down"), fallback=(0.01, 0.01))
        for name in ("search_trend", "micro_blog", "forum", "video", "short_video")
    ]
    detail = await _aggregator(sources).score_detail("OHIO")

    assert detail.value == pytest.approx(0.01)
    assert detail.fallback_count == 5
    assert {c.reason for c in detail.components} == {FallbackReason.UNEXPECTED_ERROR.value}


async def test_detail_lists_each_weighted_component():
    detail = await _aggregator(make_sources({"forum": 0.02})).score_detail("SKIBI")

    forum = next(c for c in detail.components if c.source == "forum")
    assert forum.weight == 0.20
    assert forum.weighted == pytest.approx(0.004)
    assert not forum.fallback
    assert [c.source for c in detail.components] == [
        "search_trend", "micro_blog", "forum", "video", "short_video"
    ]


async def test_cached_score_skips_sources():
    sources = make_sources({"video": 0.01})
    aggregator = _aggregator(sources)

    first = await aggregator.score_detail("SKIBI")
    second = await aggregator.score_detail("SKIBI")

    assert second == first
    assert all(s.calls == 1 for s in sources)


async def test_concurrent_misses_share_one_fetch():
    sources = [
        StaticSource(name, 0.01, delay=0.01)
        for name in ("search_trend", "micro_blog", "forum", "video", "short_video")
    ]
    aggregator = _aggregator(sources)

    values = await asyncio.gather(*(aggregator.score("SUS") for _ in range(5)))

    assert len(set(values)) == 1
    assert all(s.calls == 1 for s in sources)


async def test_symbol_locks_released_after_scoring():
    sources = [
        StaticSource(name, 0.01, delay=0.01)
        for name in ("search_trend", "micro_blog", "forum", "video", "short_video")
    ]
    aggregator = _aggregator(sources)
    symbols = [f"MEME{i}" for i in range(20)]

    await asyncio.gather(*(aggregator.score(s) for s in symbols + symbols[:5]))

    assert aggregator.in_flight == 0


async def test_symbol_lock_released_when_scoring_fails():
    def terms_for(symbol):
        raise RuntimeError("no terms")

    aggregator = _aggregator(make_sources(), terms_for=terms_for)

    with pytest.raises(RuntimeError):
        await aggregator.score("SKIBI")
    assert aggregator.in_flight == 0


async def test_raising_source_becomes_fallback():
    broken = BrokenSource("forum", fallback=(0.0, 0.0))
    aggregator = TrendAggregator(
        [WeightedSource(StaticSource("video", 0.02), 0.5), WeightedSource(broken, 0.5)],
        TrendCache(),
    )
    detail = await aggregator.score_detail("SKIBI")

    assert detail.value == pytest.approx(0.01)
    assert detail.components[1].reason == FallbackReason.UNEXPECTED_ERROR.value


async def test_symbol_is_normalized_before_lookup():
    seen = []

    def terms_for(symbol):
        seen.append(symbol)
        return [symbol.lower()]

    cache = TrendCache()
    aggregator = TrendAggregator.with_default_weights(
        make_sources(), cache, terms_for=terms_for
    )
    await aggregator.score(" skibi ")
    await aggregator.score("SKIBI")

    assert seen == ["SKIBI"]
    assert cache.get("SKIBI") is not None


def test_bound_must_be_positive():
    with pytest.raises(ValueError):
        TrendAggregator([], TrendCache(), bound=0)
