"""
Wati Webhook Receiver

FastAPI router that receives Wati webhook deliveries.
Pure transport: acquire body -> filter -> forward.

Wati expects an immediate 200. Every delivery is acknowledged, whether
it produced an event, was filtered out, or could not be forwarded.
"""

import logging

from fastapi import APIRouter, Depends, Request

from config import Config

from .dispatch import EventDispatcher, EventDispatchError
from .request import StarletteInboundRequest
from .schemas import EventFilter
from .trigger import WatiTrigger

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhook", tags=["Wati Transport"])


# Initialized once from configuration
_trigger = None
_dispatcher = None


def get_wati_trigger() -> WatiTrigger:
    """
    Get or create the Wati trigger (singleton).

    An unknown WATI_TRIGGER_EVENT falls back to ``all`` so deliveries are
    still acknowledged and surfaced.
    """
    global _trigger
    if _trigger is None:
        try:
            _trigger = WatiTrigger(Config.WATI_TRIGGER_EVENT)
        except ValueError:
            logger.error(
                f"Invalid WATI_TRIGGER_EVENT '{Config.WATI_TRIGGER_EVENT}', "
                f"falling back to '{EventFilter.ALL.value}'",
                extra={"configured_event": Config.WATI_TRIGGER_EVENT},
            )
            _trigger = WatiTrigger(EventFilter.ALL)
    return _trigger


def get_event_dispatcher() -> EventDispatcher:
    """Get or create the event dispatcher (singleton)."""
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = EventDispatcher()
    return _dispatcher


@router.post("/wati")
async def wati_webhook_receiver(
    request: Request,
    trigger: WatiTrigger = Depends(get_wati_trigger),
    dispatcher: EventDispatcher = Depends(get_event_dispatcher),
) -> dict:
    """
    Receive a Wati webhook delivery.

    Flow:
    1. Acquire the body (never fails, may be a diagnostic record)
    2. Apply the configured event filter
    3. Forward the event, if any, to the workflow endpoint

    Returns:
        {"status": "ok", "emitted": 0 | 1}
    """

    events = await trigger.handle(StarletteInboundRequest(request))

    try:
        await dispatcher.dispatch(events)
    except EventDispatchError as e:
        # Log error but don't fail the webhook response
        logger.error(f"Failed to forward Wati event: {e}", exc_info=True)
    except Exception as e:
        logger.error(f"Unexpected error forwarding Wati event: {e}", exc_info=True)

    return {"status": "ok", "emitted": len(events)}
