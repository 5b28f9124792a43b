"""DI container: one Singleton per long-lived object, built from MarketSettings.

main.create_app() stores a Container on app.state; deps.py resolves services
from it. Tests override providers (settings, sources, aggregator) before the
first resolution.
"""
from dependency_injector import containers, providers

from meme_market.db import MarketStore, create_db_engine
from meme_market.market.engine import PriceEngine
from meme_market.market.events import MarketEventRegistry
from meme_market.market.scheduler import MarketScheduler
from meme_market.services import LeaderboardService, MarketService
from meme_market.settings import MarketSettings
from meme_market.sources import (GoogleTrendsSource, RedditSource,
                                 TikTokSource, TwitterSource, YouTubeSource)
from meme_market.trends import TrendAggregator, TrendCache
from meme_market.valuation import PortfolioValuator


class Container(containers.DeclarativeContainer):
    settings = providers.Singleton(MarketSettings.from_env)

    db_engine = providers.Singleton(create_db_engine, settings.provided.database_url)
    store = providers.Singleton(MarketStore, db_engine)

    trend_cache = providers.Singleton(
        TrendCache, ttl_seconds=settings.provided.trend_cache_ttl_seconds
    )

    search_trend_source = providers.Singleton(
        GoogleTrendsSource,
        timeout=settings.provided.source_timeout_seconds,
        min_interval_ms=settings.provided.search_trend_min_interval_ms,
    )
    micro_blog_source = providers.Singleton(
        TwitterSource,
        settings.provided.twitter_bearer_token,
        timeout=settings.provided.source_timeout_seconds,
    )
    forum_source = providers.Singleton(
        RedditSource,
        settings.provided.reddit_client_id,
        settings.provided.reddit_client_secret,
        timeout=settings.provided.source_timeout_seconds,
    )
    video_source = providers.Singleton(
        YouTubeSource,
        settings.provided.youtube_api_key,
        timeout=settings.provided.source_timeout_seconds,
    )
    short_video_source = providers.Singleton(
        TikTokSource,
        timeout=settings.provided.short_video_timeout_seconds,
        min_interval_ms=settings.provided.short_video_min_interval_ms,
    )
    sources = providers.List(
        search_trend_source,
        micro_blog_source,
        forum_source,
        video_source,
        short_video_source,
    )

    aggregator = providers.Singleton(
        TrendAggregator.with_default_weights,
        sources,
        trend_cache,
        bound=settings.provided.trend_bound,
    )
    price_engine = providers.Singleton(
        PriceEngine,
        price_floor=settings.provided.price_floor,
        base_volatility=settings.provided.base_volatility,
        base_drift=settings.provided.base_drift,
    )
    events = providers.Singleton(MarketEventRegistry)
    scheduler = providers.Singleton(
        MarketScheduler,
        store,
        aggregator,
        price_engine,
        events,
        interval_seconds=settings.provided.tick_interval_seconds,
        random_events=settings.provided.random_events_enabled,
    )

    valuator = providers.Singleton(
        PortfolioValuator, starting_balance=settings.provided.starting_balance
    )
    market_service = providers.Singleton(
        MarketService, store, aggregator, scheduler, events, trend_cache
    )
    leaderboard_service = providers.Singleton(
        LeaderboardService,
        store,
        valuator,
        max_limit=settings.provided.leaderboard_max_limit,
    )
