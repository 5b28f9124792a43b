"""Runtime settings for the market service.

Defaults reproduce the live market's tuning. Every value can be overridden
through environment variables (see MarketSettings.from_env); provider
credentials use the provider's conventional variable names.
"""
import os

from pydantic import BaseModel, Field

_DEFAULT_DB_URL = "sqlite:///meme_market.db"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    return float(raw) if raw not in (None, "") else default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    return int(raw) if raw not in (None, "") else default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw in (None, ""):
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class MarketSettings(BaseModel):
    """Tunable constants for pricing, trends, scheduling and valuation."""

    # Pricing
    price_floor: float = Field(default=0.01, gt=0)
    base_volatility: float = Field(default=0.08, ge=0)
    base_drift: float = 0.0

    # Trends
    trend_bound: float = Field(default=0.08, gt=0)
    trend_cache_ttl_seconds: float = Field(default=300.0, gt=0)
    search_trend_min_interval_ms: int = Field(default=10_000, ge=0)
    short_video_min_interval_ms: int = Field(default=2_000, ge=0)
    source_timeout_seconds: float = Field(default=10.0, gt=0)
    short_video_timeout_seconds: float = Field(default=5.0, gt=0)

    # Scheduling
    tick_interval_seconds: float = Field(default=120.0, gt=0)
    scheduler_autostart: bool = True
    random_events_enabled: bool = False

    # Valuation
    starting_balance: float = Field(default=1000.0, ge=0)
    leaderboard_default_limit: int = Field(default=10, ge=1)
    leaderboard_max_limit: int = Field(default=50, ge=1)

    # Infrastructure
    database_url: str = _DEFAULT_DB_URL
    log_level: str = "INFO"

    # Provider credentials (absence puts the source in fallback mode)
    twitter_bearer_token: str | None = None
    reddit_client_id: str | None = None
    reddit_client_secret: str | None = None
    youtube_api_key: str | None = None

    @classmethod
    def from_env(cls) -> "MarketSettings":
        """Build settings from environment variables, falling back to defaults."""
        defaults = cls()
        return cls(
            price_floor=_env_float("MEME_PRICE_FLOOR", defaults.price_floor),
            base_volatility=_env_float("MEME_BASE_VOLATILITY", defaults.base_volatility),
            base_drift=_env_float("MEME_BASE_DRIFT", defaults.base_drift),
            trend_bound=_env_float("MEME_TREND_BOUND", defaults.trend_bound),
            trend_cache_ttl_seconds=_env_float(
                "MEME_TREND_CACHE_TTL_SECONDS", defaults.trend_cache_ttl_seconds
            ),
            search_trend_min_interval_ms=_env_int(
                "MEME_SEARCH_TREND_MIN_INTERVAL_MS", defaults.search_trend_min_interval_ms
            ),
            short_video_min_interval_ms=_env_int(
                "MEME_SHORT_VIDEO_MIN_INTERVAL_MS", defaults.short_video_min_interval_ms
            ),
            source_timeout_seconds=_env_float(
                "MEME_SOURCE_TIMEOUT_SECONDS", defaults.source_timeout_seconds
            ),
            short_video_timeout_seconds=_env_float(
                "MEME_SHORT_VIDEO_TIMEOUT_SECONDS", defaults.short_video_timeout_seconds
            ),
            tick_interval_seconds=_env_float(
                "MEME_TICK_INTERVAL_SECONDS", defaults.tick_interval_seconds
            ),
            scheduler_autostart=_env_bool(
                "MEME_SCHEDULER_AUTOSTART", defaults.scheduler_autostart
            ),
            random_events_enabled=_env_bool(
                "MEME_RANDOM_EVENTS", defaults.random_events_enabled
            ),
            starting_balance=_env_float("MEME_STARTING_BALANCE", defaults.starting_balance),
            leaderboard_default_limit=_env_int(
                "MEME_LEADERBOARD_DEFAULT_LIMIT", defaults.leaderboard_default_limit
            ),
            leaderboard_max_limit=_env_int(
                "MEME_LEADERBOARD_MAX_LIMIT", defaults.leaderboard_max_limit
            ),
            database_url=os.getenv("DATABASE_URL", defaults.database_url),
            log_level=os.getenv("MEME_LOG_LEVEL", defaults.log_level),
            twitter_bearer_token=os.getenv("TWITTER_BEARER_TOKEN") or None,
            reddit_client_id=os.getenv("REDDIT_CLIENT_ID") or None,
            reddit_client_secret=os.getenv("REDDIT_CLIENT_SECRET") or None,
            youtube_api_key=os.getenv("YOUTUBE_API_KEY") or None,
        )
