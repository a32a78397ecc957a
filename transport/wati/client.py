"""
Wati REST API Client

One method per Wati operation.
No retries. One HTTP call per operation. If Wati fails -> log and raise.
"""

import logging
from typing import Any, Optional, Union
from urllib.parse import quote

import httpx

from config import Config

from .credentials import CREDENTIAL_TEST_PATH, WatiCredentials
from .schemas import CustomParam, TemplateRecipient

logger = logging.getLogger(__name__)

JsonResponse = Union[dict[str, Any], list[Any]]


class WatiClientError(Exception):
    """Wati API call failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class WatiClient:
    """Async client for the Wati v3 external API."""

    def __init__(
        self,
        credentials: WatiCredentials,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.credentials = credentials
        self.timeout = timeout if timeout is not None else Config.WATI_HTTP_TIMEOUT
        self._transport = transport

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    async def send_text_message(self, target: str, text: str) -> JsonResponse:
        """Send a session text message to a phone number or conversation."""
        return await self._request(
            "POST",
            "/api/ext/v3/conversations/messages/text",
            json={"target": target, "text": text},
        )

    async def send_interactive_buttons(
        self,
        target: str,
        button_message: Any,
    ) -> JsonResponse:
        """
        Send an interactive buttons message.

        Args:
            target: Phone number, conversation ID or Channel:PhoneNumber
            button_message: {"body": str, "buttons": [{"text": str}], ...}
        """
        return await self._request(
            "POST",
            "/api/ext/v3/conversations/messages/interactive",
            json={
                "target": target,
                "type": "buttons",
                "button_message": button_message,
            },
        )

    async def send_interactive_list(self, target: str, list_message: Any) -> JsonResponse:
        return await self._request(
            "POST",
            "/api/ext/v3/conversations/messages/interactive",
            json={
                "target": target,
                "type": "list",
                "list_message": list_message,
            },
        )

    async def get_messages(
        self,
        conversation_id: str,
        page_size: int = 20,
        page_number: int = 1,
    ) -> JsonResponse:
        return await self._request(
            "GET",
            f"/api/ext/v3/conversations/{quote(conversation_id, safe='')}/messages",
            params={"pageSize": page_size, "pageNumber": page_number},
        )

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------

    async def send_template_message(
        self,
        template_name: str,
        broadcast_name: str,
        recipients: list[Union[dict[str, Any], TemplateRecipient]],
    ) -> JsonResponse:
        """Broadcast an approved template to one or more recipients."""
        return await self._request(
            "POST",
            "/api/ext/v3/messageTemplates/send",
            json={
                "template_name": template_name,
                "broadcast_name": broadcast_name,
                "recipients": [_dump(r) for r in recipients],
            },
        )

    async def get_templates(self, page_size: int = 20) -> JsonResponse:
        return await self._request(
            "GET",
            "/api/ext/v3/messageTemplates",
            params={"pageSize": page_size},
        )

    # ------------------------------------------------------------------
    # Contacts
    # ------------------------------------------------------------------

    async def get_contacts(self, page_size: int = 20, page_number: int = 1) -> JsonResponse:
        return await self._request(
            "GET",
            "/api/ext/v3/contacts",
            params={"pageSize": page_size, "pageNumber": page_number},
        )

    async def get_contact_detail(self, phone_number: str) -> JsonResponse:
        return await self._request(
            "GET",
            f"/api/ext/v3/contacts/{quote(phone_number, safe='')}",
        )

    async def add_contact(
        self,
        whatsapp_number: str,
        name: str,
        custom_params: Optional[list[Union[dict[str, Any], CustomParam]]] = None,
    ) -> JsonResponse:
        """Create a contact. ``custom_params`` is only sent when non-empty."""
        body: dict[str, Any] = {"whatsapp_number": whatsapp_number, "name": name}
        if custom_params:
            body["custom_params"] = [_dump(p) for p in custom_params]

        return await self._request("POST", "/api/ext/v3/contacts", json=body)

    # ------------------------------------------------------------------
    # Media / credentials
    # ------------------------------------------------------------------

    async def download_media(self, file_name: str) -> bytes:
        """Fetch a media file referenced by a message (raw bytes)."""
        response = await self._send("GET", "/api/v1/getMedia", params={"fileName": file_name})
        return response.content

    async def test_credentials(self) -> bool:
        """
        Check the credentials with a minimal contacts query.

        Returns:
            True if Wati accepted the token

        Raises:
            WatiClientError: Wati rejected the token or could not be reached
        """
        await self._request("GET", CREDENTIAL_TEST_PATH, params={"pageSize": 1})
        return True

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
    ) -> JsonResponse:
        response = await self._send(method, path, params=params, json=json)

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise WatiClientError(
                f"Wati returned invalid JSON for {method} {path}",
                status_code=response.status_code,
            ) from e

    async def _send(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
    ) -> httpx.Response:
        url = f"{self.credentials.base_url}{path}"
        headers = self.credentials.auth_headers()
        if json is not None:
            headers["Content-Type"] = "application/json"

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(
                    method,
                    url,
                    params=params,
                    json=json,
                    headers=headers,
                )
        except httpx.RequestError as e:
            logger.error(
                f"Wati request failed: {method} {path}",
                exc_info=True,
                extra={"method": method, "path": path, "error": str(e)},
            )
            raise WatiClientError(f"HTTP request failed: {e}") from e

        if response.is_error:
            error_text = response.text
            logger.error(
                f"Wati API error: {response.status_code} - {error_text}",
                extra={
                    "method": method,
                    "path": path,
                    "status_code": response.status_code,
                    "error_body": error_text,
                },
            )
            raise WatiClientError(
                f"Wati API returned {response.status_code}",
                status_code=response.status_code,
            )

        logger.debug(
            f"Wati {method} {path} -> {response.status_code}",
            extra={"status_code": response.status_code},
        )
        return response


def _dump(value: Any) -> Any:
    if isinstance(value, (TemplateRecipient, CustomParam)):
        return value.model_dump()
    return value
