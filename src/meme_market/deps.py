"""FastAPI dependency injection: app.state holds the container; Depends() resolves services.

The lifespan (main.py) builds the container once and attaches it to app.state;
these getters are used by Depends(). Tests override them or set app.state.
"""
from typing import Annotated

from fastapi import Depends, Request

from meme_market.services import LeaderboardService, MarketService
from meme_market.settings import MarketSettings


def get_market_service(request: Request) -> MarketService:
    """Resolve MarketService from the app container."""
    return request.app.state.container.market_service()


def get_leaderboard_service(request: Request) -> LeaderboardService:
    """Resolve LeaderboardService from the app container."""
    return request.app.state.container.leaderboard_service()


def get_settings(request: Request) -> MarketSettings:
    return request.app.state.container.settings()


# Type aliases for route injection
MarketServiceDep = Annotated[MarketService, Depends(get_market_service)]
LeaderboardServiceDep = Annotated[LeaderboardService, Depends(get_leaderboard_service)]
SettingsDep = Annotated[MarketSettings, Depends(get_settings)]
