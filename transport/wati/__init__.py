"""Wati Transport Layer - Module Exports"""

from .acquire import acquire_payload
from .classify import classify, extract_event_type, matches_filter, resolve_event_category
from .client import WatiClient, WatiClientError
from .credentials import CredentialsError, WatiCredentials, derive_api_base_url
from .dispatch import EventDispatchError, EventDispatcher
from .node import OPERATIONS, WatiNode, WatiOperationError
from .request import InboundRequest, StarletteInboundRequest, StaticInboundRequest
from .schemas import EVENT_TYPE_MAP, EventFilter, NodeParameters
from .trigger import WatiTrigger
from .webhook import router

__all__ = [
    # Schemas
    "EventFilter",
    "EVENT_TYPE_MAP",
    "NodeParameters",
    # Trigger
    "InboundRequest",
    "StarletteInboundRequest",
    "StaticInboundRequest",
    "acquire_payload",
    "classify",
    "extract_event_type",
    "matches_filter",
    "resolve_event_category",
    "WatiTrigger",
    "EventDispatcher",
    "EventDispatchError",
    # API
    "WatiCredentials",
    "CredentialsError",
    "derive_api_base_url",
    "WatiClient",
    "WatiClientError",
    "WatiNode",
    "WatiOperationError",
    "OPERATIONS",
    # Router
    "router",
]
