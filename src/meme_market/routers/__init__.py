"""API routers for the meme market.

Includes routes for:
- /market - Instrument listing and manual advance
- /trends - Trend scores and cache administration
- /leaderboard - Ranked users
- /transactions - Recent trades
- /events - Market events
"""
from meme_market.routers.events import router as events_router
from meme_market.routers.leaderboard import router as leaderboard_router
from meme_market.routers.market import router as market_router
from meme_market.routers.transactions import router as transactions_router
from meme_market.routers.trends import router as trends_router

__all__ = [
    "events_router",
    "leaderboard_router",
    "market_router",
    "transactions_router",
    "trends_router",
]
