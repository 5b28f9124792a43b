"""Trend score routes and trend cache administration."""
from fastapi import APIRouter

from meme_market.deps import MarketServiceDep
from meme_market.schemas import CacheStats
from meme_market.trends.models import TrendScore

router = APIRouter(prefix="/trends", tags=["trends"])


@router.get("/cache", response_model=CacheStats)
def get_cache_stats(service: MarketServiceDep) -> CacheStats:
    return service.cache_stats()


@router.delete("/cache")
def clear_cache(service: MarketServiceDep) -> dict:
    return {"cleared": service.clear_trend_cache()}


@router.get("/{symbol}", response_model=TrendScore)
async def get_trend(symbol: str, service: MarketServiceDep) -> TrendScore:
    """Trend score with per-source breakdown.

    Served from the cache when fresh; otherwise queries every source. Never
    fails because of a source: failing sources contribute fallback values.
    """
    return await service.get_trend_detail(symbol)
