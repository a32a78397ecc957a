"""
Wati Action Node

Executes one Wati operation for every input item of a workflow step.

Parameters are read per item, so each item can target a different
recipient. Responses are flattened into output items: a list response
yields one item per element, an object response yields one item.
"""

import json
import logging
from typing import Any, Awaitable, Callable, Optional

from .client import JsonResponse, WatiClient
from .schemas import NodeParameters

logger = logging.getLogger(__name__)

Operation = Callable[[WatiClient, NodeParameters], Awaitable[JsonResponse]]


class WatiOperationError(Exception):
    """A Wati node operation failed for an input item."""

    def __init__(self, message: str, item_index: Optional[int] = None):
        super().__init__(message)
        self.item_index = item_index


def _parse_json_field(value: Any, field_label: str) -> Any:
    """Decode a JSON parameter; already-decoded values pass through."""
    if not isinstance(value, str):
        return value
    try:
        return json.loads(value)
    except ValueError:
        raise WatiOperationError(f"Invalid JSON in {field_label} field.")


def _require(value: Optional[str], name: str) -> str:
    if not value:
        raise WatiOperationError(f"Parameter '{name}' is required.")
    return value


# ============================================================================
# OPERATIONS
# ============================================================================

async def _send_text_message(client: WatiClient, params: NodeParameters) -> JsonResponse:
    return await client.send_text_message(
        _require(params.target, "target"),
        _require(params.message_text, "messageText"),
    )


async def _send_interactive_buttons(client: WatiClient, params: NodeParameters) -> JsonResponse:
    button_message = _parse_json_field(params.buttons_json, "Buttons")
    return await client.send_interactive_buttons(
        _require(params.target, "target"),
        button_message,
    )


async def _send_interactive_list(client: WatiClient, params: NodeParameters) -> JsonResponse:
    list_message = _parse_json_field(params.list_json, "List Message")
    return await client.send_interactive_list(
        _require(params.target, "target"),
        list_message,
    )


async def _get_messages(client: WatiClient, params: NodeParameters) -> JsonResponse:
    return await client.get_messages(
        _require(params.conversation_id, "conversationId"),
        page_size=params.page_size,
        page_number=params.page_number,
    )


async def _send_template_message(client: WatiClient, params: NodeParameters) -> JsonResponse:
    recipients = _parse_json_field(params.recipients_json, "Recipients")
    if not isinstance(recipients, list):
        raise WatiOperationError("Recipients must be a JSON array.")
    return await client.send_template_message(
        _require(params.template_name, "templateName"),
        _require(params.broadcast_name, "broadcastName"),
        recipients,
    )


async def _get_templates(client: WatiClient, params: NodeParameters) -> JsonResponse:
    return await client.get_templates(page_size=params.template_page_size)


async def _get_contacts(client: WatiClient, params: NodeParameters) -> JsonResponse:
    return await client.get_contacts(
        page_size=params.contact_page_size,
        page_number=params.contact_page_number,
    )


async def _get_contact_detail(client: WatiClient, params: NodeParameters) -> JsonResponse:
    return await client.get_contact_detail(_require(params.phone_number, "phoneNumber"))


async def _add_contact(client: WatiClient, params: NodeParameters) -> JsonResponse:
    # Custom params are optional: unreadable JSON means none
    try:
        custom_params = _parse_json_field(params.custom_params_json, "Custom Parameters")
    except WatiOperationError:
        custom_params = []
    if not isinstance(custom_params, list):
        custom_params = []

    return await client.add_contact(
        _require(params.whatsapp_number, "whatsappNumber"),
        _require(params.contact_name, "contactName"),
        custom_params,
    )


OPERATIONS: dict[str, dict[str, Operation]] = {
    "message": {
        "sendTextMessage": _send_text_message,
        "sendInteractiveButtons": _send_interactive_buttons,
        "sendInteractiveList": _send_interactive_list,
        "getMessages": _get_messages,
    },
    "templateMessage": {
        "sendTemplateMessage": _send_template_message,
        "getTemplates": _get_templates,
    },
    "contact": {
        "getContacts": _get_contacts,
        "getContactDetail": _get_contact_detail,
        "addContact": _add_contact,
    },
}


# ============================================================================
# NODE
# ============================================================================

class WatiNode:
    """Send and receive WhatsApp messages via the Wati API."""

    def __init__(self, client: WatiClient):
        self.client = client

    async def execute(
        self,
        items: list[dict[str, Any]],
        resource: str,
        operation: str,
        continue_on_fail: bool = False,
    ) -> list[dict[str, Any]]:
        """
        Run ``resource``/``operation`` once per input item.

        Args:
            items: Input items; each carries the operation parameters
            resource: message | templateMessage | contact
            operation: Operation name within the resource
            continue_on_fail: Emit {"error": ...} items instead of raising

        Returns:
            Output items (JSON objects)

        Raises:
            WatiOperationError: Unknown operation, or an item failed and
                continue_on_fail is off
        """

        handler = OPERATIONS.get(resource, {}).get(operation)
        if handler is None:
            raise WatiOperationError(
                f"The operation '{operation}' is not supported for resource '{resource}'."
            )

        output: list[dict[str, Any]] = []

        for index, item in enumerate(items):
            try:
                params = NodeParameters.model_validate(item)
                response = await handler(self.client, params)
            except Exception as e:
                if continue_on_fail:
                    logger.warning(
                        f"Wati {resource}.{operation} failed, continuing",
                        extra={"item_index": index, "error": str(e)},
                    )
                    output.append({"error": str(e)})
                    continue
                raise WatiOperationError(str(e), item_index=index) from e

            if isinstance(response, list):
                output.extend(_as_item(entry) for entry in response)
            else:
                output.append(response)

        return output


def _as_item(entry: Any) -> dict[str, Any]:
    if isinstance(entry, dict):
        return entry
    return {"value": entry}
