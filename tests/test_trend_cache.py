from datetime import datetime

import pytest

from meme_market.trends.cache import TrendCache
from meme_market.trends.models import TrendScore


def _score(symbol="SKIBI", value=0.01):
    return TrendScore(symbol=symbol, value=value, timestamp=datetime(2024, 1, 1))


def test_get_returns_stored_score_within_ttl(clock):
    cache = TrendCache(ttl_seconds=300, clock=clock)
    cache.set("SKIBI", _score())
    clock.advance(299)
    assert cache.get("SKIBI").value == 0.01


def test_entry_expires_after_ttl(clock):
    cache = TrendCache(ttl_seconds=300, clock=clock)
    cache.set("SKIBI", _score())
    clock.advance(300)
    assert cache.get("SKIBI") is None
    assert len(cache) == 0


def test_missing_symbol_is_none(clock):
    assert TrendCache(clock=clock).get("NOPE") is None


def test_clear_reports_dropped_entries(clock):
    cache = TrendCache(clock=clock)
    cache.set("SKIBI", _score())
    cache.set("SUS", _score("SUS"))
    assert cache.clear() == 2
    assert cache.get("SKIBI") is None


def test_stats_lists_live_entries_with_age(clock):
    cache = TrendCache(ttl_seconds=300, clock=clock)
    cache.set("SUS", _score("SUS", -0.02))
    clock.advance(10)
    cache.set("SKIBI", _score())
    clock.advance(5)
    stats = cache.stats()
    assert stats["size"] == 2
    assert stats["ttl_seconds"] == 300
    assert stats["entries"] == [
        {"symbol": "SKIBI", "value": 0.01, "age_seconds": 5.0},
        {"symbol": "SUS", "value": -0.02, "age_seconds": 15.0},
    ]


def test_ttl_must_be_positive():
    with pytest.raises(ValueError):
        TrendCache(ttl_seconds=0)
