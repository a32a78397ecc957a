"""
Wati Event Dispatch

Forwards events emitted by the trigger to the workflow endpoint.
No retries. No transformation: the event is posted as received.
"""

import logging
from typing import Any, Optional

import httpx

from config import Config

logger = logging.getLogger(__name__)


class EventDispatchError(Exception):
    """Failed to forward an event to the workflow endpoint."""
    pass


class EventDispatcher:
    """Posts trigger events to ``WORKFLOW_WEBHOOK_URL``."""

    def __init__(
        self,
        workflow_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.workflow_url = workflow_url if workflow_url is not None else Config.WORKFLOW_WEBHOOK_URL
        self.timeout = timeout if timeout is not None else Config.WATI_HTTP_TIMEOUT
        self._transport = transport

    async def dispatch(self, events: list[dict[str, Any]]) -> int:
        """
        Forward events, one request each.

        Returns:
            Number of events forwarded (0 when no workflow URL is set)

        Raises:
            EventDispatchError: The workflow endpoint failed
        """

        if not events:
            return 0

        if not self.workflow_url:
            for event in events:
                logger.info(
                    "Wati event emitted (no workflow URL configured)",
                    extra={"event_keys": sorted(event.keys())},
                )
            return 0

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                for event in events:
                    response = await client.post(self.workflow_url, json=event)
                    if response.is_error:
                        raise EventDispatchError(
                            f"Workflow endpoint returned {response.status_code}"
                        )
        except httpx.RequestError as e:
            raise EventDispatchError(f"HTTP request failed: {e}") from e

        logger.info(
            "Wati events forwarded",
            extra={"count": len(events), "workflow_url": self.workflow_url},
        )
        return len(events)
