"""
Wati Trigger

Turns one webhook delivery into zero or one workflow events.
Holds only its event filter; safe to share across concurrent deliveries.
"""

import logging
from typing import Any, Union

from .acquire import acquire_payload
from .classify import classify, resolve_event_category
from .request import InboundRequest
from .schemas import EventFilter

logger = logging.getLogger(__name__)


class WatiTrigger:
    """Trigger workflows on Wati webhook events."""

    def __init__(self, event_filter: Union[EventFilter, str] = EventFilter.ALL):
        self._event_filter = EventFilter(event_filter)

    @property
    def event_filter(self) -> EventFilter:
        return self._event_filter

    async def handle(self, request: InboundRequest) -> list[dict[str, Any]]:
        """
        Process a delivery.

        Returns:
            A single-item list holding the body as received, or an empty
            list when the event does not match the filter.
        """

        body = await acquire_payload(request)
        events = classify(body, self._event_filter)

        if not events:
            logger.info(
                "Wati event skipped by filter",
                extra={
                    "event_filter": self._event_filter.value,
                    "event_category": resolve_event_category(body),
                },
            )
        return events
