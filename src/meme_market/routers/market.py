"""Market routes: listing, single instrument and manual advance."""
import logging

from fastapi import APIRouter, HTTPException

from meme_market.deps import MarketServiceDep
from meme_market.schemas import InstrumentQuote, TickSummary

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/market", tags=["market"])


@router.get("", response_model=list[InstrumentQuote])
async def list_market(service: MarketServiceDep) -> list[InstrumentQuote]:
    """All listed instruments with price, zone and last change."""
    return await service.list_instruments()


@router.post("/advance", response_model=TickSummary)
async def advance_market(service: MarketServiceDep) -> TickSummary:
    """Run one market tick now.

    Waits for a scheduled tick that is already running, then runs its own.
    """
    return await service.advance_market()


@router.get("/{symbol}", response_model=InstrumentQuote)
async def get_instrument(symbol: str, service: MarketServiceDep) -> InstrumentQuote:
    """Get one instrument.

    Args:
        symbol: Instrument symbol (e.g. "SKIBI"); case-insensitive.
    """
    quote = await service.get_instrument(symbol)
    if quote is None:
        raise HTTPException(status_code=404, detail=f"Instrument '{symbol}' not found")
    return quote
