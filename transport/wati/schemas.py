"""
Wati Transport Layer - Schemas and Constants

PURE DATA - NO LOGIC
Defines the event vocabulary shared by the trigger and the models
exchanged with the Wati REST API.
"""

from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# EVENT TAXONOMY (TRIGGER)
# ============================================================================

class EventFilter(str, Enum):
    """Event category a trigger instance listens for."""

    ALL = "all"
    MESSAGE_RECEIVED = "messageReceived"
    NEW_CONTACT_MESSAGE = "newContactMessage"
    SESSION_MESSAGE_SENT = "sessionMessageSent"
    TEMPLATE_MESSAGE_SENT = "templateMessageSent"
    MESSAGE_DELIVERED = "messageDelivered"
    MESSAGE_READ = "messageRead"
    MESSAGE_REPLIED = "messageReplied"
    TEMPLATE_MESSAGE_FAILED = "templateMessageFailed"


# Upstream event-type string -> internal event category.
# Read-only; shared by every concurrent delivery.
EVENT_TYPE_MAP: Mapping[str, str] = MappingProxyType({
    "message": EventFilter.MESSAGE_RECEIVED.value,
    "whatsappMessageReceived": EventFilter.MESSAGE_RECEIVED.value,
    "newContactMessage": EventFilter.NEW_CONTACT_MESSAGE.value,
    "sessionMessageSent": EventFilter.SESSION_MESSAGE_SENT.value,
    "templateMessageSent": EventFilter.TEMPLATE_MESSAGE_SENT.value,
    "messageDelivered": EventFilter.MESSAGE_DELIVERED.value,
    "messageRead": EventFilter.MESSAGE_READ.value,
    "messageReplied": EventFilter.MESSAGE_REPLIED.value,
    "templateMessageFailed": EventFilter.TEMPLATE_MESSAGE_FAILED.value,
})

# Body keys that may carry the upstream event type, in lookup order
EVENT_TYPE_KEYS = ("eventType", "event", "type")


# ============================================================================
# WATI API MODELS (OUTPUT)
# ============================================================================

class CustomParam(BaseModel):
    """Name/value pair attached to a contact or template recipient."""
    name: str
    value: str


class TemplateRecipient(BaseModel):
    """A single recipient of a template broadcast."""
    whatsapp_number: str
    custom_params: list[CustomParam] = Field(default_factory=list)

    model_config = ConfigDict(extra="allow")


# ============================================================================
# ACTION NODE PARAMETERS (INPUT)
# ============================================================================

class NodeParameters(BaseModel):
    """
    Per-item parameters of the Wati action node.

    Field aliases match the parameter names users configure in the
    workflow editor, so items can be passed straight through.
    """

    # message
    target: Optional[str] = None
    message_text: Optional[str] = Field(None, alias="messageText")
    buttons_json: Any = Field(None, alias="buttonsJson")
    list_json: Any = Field(None, alias="listJson")
    conversation_id: Optional[str] = Field(None, alias="conversationId")
    page_size: int = Field(20, alias="pageSize")
    page_number: int = Field(1, alias="pageNumber")

    # templateMessage
    template_name: Optional[str] = Field(None, alias="templateName")
    broadcast_name: Optional[str] = Field(None, alias="broadcastName")
    recipients_json: Any = Field(None, alias="recipientsJson")
    template_page_size: int = Field(20, alias="templatePageSize")

    # contact
    contact_page_size: int = Field(20, alias="contactPageSize")
    contact_page_number: int = Field(1, alias="contactPageNumber")
    phone_number: Optional[str] = Field(None, alias="phoneNumber")
    whatsapp_number: Optional[str] = Field(None, alias="whatsappNumber")
    contact_name: Optional[str] = Field(None, alias="contactName")
    custom_params_json: Any = Field("[]", alias="customParamsJson")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")
