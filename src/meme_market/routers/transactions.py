"""Recent transactions route."""
from fastapi import APIRouter, Query

from meme_market.deps import LeaderboardServiceDep
from meme_market.schemas import TransactionView

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get("", response_model=list[TransactionView])
async def list_transactions(
    service: LeaderboardServiceDep,
    limit: int = Query(default=50, ge=1, le=500),
) -> list[TransactionView]:
    """Most recent trades, newest first."""
    return await service.recent_transactions(limit)
