"""Leaderboard route."""
from fastapi import APIRouter, Query

from meme_market.deps import LeaderboardServiceDep, SettingsDep
from meme_market.errors import InvalidNumericInput
from meme_market.routers.errors import raise_domain_http
from meme_market.schemas import Leaderboard

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


@router.get("", response_model=Leaderboard)
async def get_leaderboard(
    service: LeaderboardServiceDep,
    settings: SettingsDep,
    limit: int | None = Query(default=None, ge=1, description="Max entries (capped at 50)"),
    include_holdings: bool = Query(default=False, alias="includeHoldings"),
) -> Leaderboard:
    """Users ranked by total value (cash + holdings at current prices)."""
    try:
        return await service.valuate_leaderboard(
            limit or settings.leaderboard_default_limit, include_holdings
        )
    except InvalidNumericInput as e:
        raise_domain_http(e)
