"""Market event routes: list, trigger and cancel."""
import logging

from fastapi import APIRouter, HTTPException

from meme_market.deps import MarketServiceDep
from meme_market.errors import InvalidNumericInput, UnknownEventType
from meme_market.market.events import ActiveEvent
from meme_market.routers.errors import raise_domain_http
from meme_market.schemas import TriggeredEvent, TriggerEventRequest

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/events", tags=["events"])


@router.get("/active", response_model=list[ActiveEvent])
async def list_active_events(service: MarketServiceDep) -> list[ActiveEvent]:
    return service.active_events()


@router.post("/trigger", response_model=TriggeredEvent)
async def trigger_event(
    body: TriggerEventRequest, service: MarketServiceDep
) -> TriggeredEvent:
    """Start a market event now (admin override).

    Returns 404 for an event type not in the catalog.
    """
    try:
        event = await service.trigger_event(body.event_type, body.duration_ms)
    except (UnknownEventType, InvalidNumericInput) as e:
        raise_domain_http(e)
    logger.info("Event %s triggered via API", event.event_type)
    return event


@router.delete("/{event_type}")
async def cancel_event(event_type: str, service: MarketServiceDep) -> dict:
    if not service.cancel_event(event_type):
        raise HTTPException(status_code=404, detail=f"Event '{event_type}' is not active")
    return {"cancelled": event_type}
