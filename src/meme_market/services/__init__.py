"""Service layer: orchestration of the market core for routers and the CLI."""
from meme_market.services.leaderboard_service import LeaderboardService
from meme_market.services.market_service import MarketService

__all__ = ["LeaderboardService", "MarketService"]
