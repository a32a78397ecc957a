"""
Wati API Client Tests

Each operation hits the documented endpoint with bearer auth.
"""

import json

import httpx
import pytest

from transport.wati.client import WatiClient, WatiClientError
from transport.wati.credentials import WatiCredentials
from transport.wati.schemas import CustomParam, TemplateRecipient

BASE = "https://live-mt-server.wati.io"


class Recorder:
    """Fake Wati server recording requests."""

    def __init__(self, status_code=200, json_body=None, content=None):
        self.requests: list[httpx.Request] = []
        self.status_code = status_code
        self.json_body = {"result": True} if json_body is None else json_body
        self.content = content

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.json_body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content)


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def client(recorder):
    credentials = WatiCredentials(api_url=f"{BASE}/123456/", access_token="tok_abc")
    return WatiClient(credentials, transport=httpx.MockTransport(recorder))


class TestMessageOperations:

    @pytest.mark.asyncio
    async def test_send_text_message(self, client, recorder):
        result = await client.send_text_message("14155552671", "Hello!")

        assert result == {"result": True}
        assert recorder.last.method == "POST"
        assert str(recorder.last.url) == f"{BASE}/api/ext/v3/conversations/messages/text"
        assert recorder.last.headers["Authorization"] == "Bearer tok_abc"
        assert recorder.last_json() == {"target": "14155552671", "text": "Hello!"}

    @pytest.mark.asyncio
    async def test_send_interactive_buttons(self, client, recorder):
        buttons = {"body": "Choose", "buttons": [{"text": "Yes"}, {"text": "No"}]}

        await client.send_interactive_buttons("14155552671", buttons)

        assert recorder.last.url.path == "/api/ext/v3/conversations/messages/interactive"
        assert recorder.last_json() == {
            "target": "14155552671",
            "type": "buttons",
            "button_message": buttons,
        }

    @pytest.mark.asyncio
    async def test_send_interactive_list(self, client, recorder):
        list_message = {"body": "Pick", "button_text": "Select", "sections": []}

        await client.send_interactive_list("14155552671", list_message)

        assert recorder.last_json() == {
            "target": "14155552671",
            "type": "list",
            "list_message": list_message,
        }

    @pytest.mark.asyncio
    async def test_get_messages_encodes_conversation_id(self, client, recorder):
        await client.get_messages("conv/1 2", page_size=5, page_number=3)

        assert recorder.last.method == "GET"
        assert recorder.last.url.raw_path.startswith(
            b"/api/ext/v3/conversations/conv%2F1%202/messages"
        )
        assert recorder.last.url.params["pageSize"] == "5"
        assert recorder.last.url.params["pageNumber"] == "3"

    @pytest.mark.asyncio
    async def test_get_messages_default_paging(self, client, recorder):
        await client.get_messages("abc")

        assert recorder.last.url.params["pageSize"] == "20"
        assert recorder.last.url.params["pageNumber"] == "1"


class TestTemplateOperations:

    @pytest.mark.asyncio
    async def test_send_template_message(self, client, recorder):
        recipients = [
            {"whatsapp_number": "14155552671", "custom_params": [{"name": "name", "value": "John"}]},
            TemplateRecipient(whatsapp_number="14155550000"),
        ]

        await client.send_template_message("hello_world", "my_broadcast", recipients)

        assert recorder.last.url.path == "/api/ext/v3/messageTemplates/send"
        assert recorder.last_json() == {
            "template_name": "hello_world",
            "broadcast_name": "my_broadcast",
            "recipients": [
                {"whatsapp_number": "14155552671", "custom_params": [{"name": "name", "value": "John"}]},
                {"whatsapp_number": "14155550000", "custom_params": []},
            ],
        }

    @pytest.mark.asyncio
    async def test_get_templates(self, client, recorder):
        await client.get_templates(page_size=50)

        assert recorder.last.url.path == "/api/ext/v3/messageTemplates"
        assert recorder.last.url.params["pageSize"] == "50"


class TestContactOperations:

    @pytest.mark.asyncio
    async def test_get_contacts(self, client, recorder):
        await client.get_contacts()

        assert recorder.last.url.path == "/api/ext/v3/contacts"
        assert dict(recorder.last.url.params) == {"pageSize": "20", "pageNumber": "1"}

    @pytest.mark.asyncio
    async def test_get_contact_detail(self, client, recorder):
        await client.get_contact_detail("14155552671")

        assert recorder.last.url.path == "/api/ext/v3/contacts/14155552671"

    @pytest.mark.asyncio
    async def test_add_contact_without_custom_params(self, client, recorder):
        await client.add_contact("14155552671", "John Doe", [])

        assert recorder.last.method == "POST"
        assert recorder.last_json() == {"whatsapp_number": "14155552671", "name": "John Doe"}

    @pytest.mark.asyncio
    async def test_add_contact_with_custom_params(self, client, recorder):
        await client.add_contact(
            "14155552671",
            "John Doe",
            [CustomParam(name="company", value="Acme")],
        )

        assert recorder.last_json()["custom_params"] == [{"name": "company", "value": "Acme"}]


class TestMediaAndCredentials:

    @pytest.mark.asyncio
    async def test_download_media_returns_bytes(self, recorder, client):
        recorder.content = b"\x89PNG..."

        data = await client.download_media("data/images/abc.png")

        assert data == b"\x89PNG..."
        assert recorder.last.url.path == "/api/v1/getMedia"
        assert recorder.last.url.params["fileName"] == "data/images/abc.png"

    @pytest.mark.asyncio
    async def test_credentials_check(self, client, recorder):
        assert await client.test_credentials() is True
        assert recorder.last.url.path == "/api/ext/v3/contacts"
        assert recorder.last.url.params["pageSize"] == "1"


class TestClientErrors:

    @pytest.mark.asyncio
    async def test_error_status_raises(self):
        credentials = WatiCredentials(api_url=BASE, access_token="bad")
        client = WatiClient(
            credentials,
            transport=httpx.MockTransport(lambda r: httpx.Response(401, text="Unauthorized")),
        )

        with pytest.raises(WatiClientError) as exc_info:
            await client.get_contacts()

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_transport_failure_raises(self):
        def boom(request):
            raise httpx.ConnectError("unreachable", request=request)

        client = WatiClient(
            WatiCredentials(api_url=BASE, access_token="tok"),
            transport=httpx.MockTransport(boom),
        )

        with pytest.raises(WatiClientError, match="HTTP request failed"):
            await client.send_text_message("1", "hi")

    @pytest.mark.asyncio
    async def test_single_attempt_per_call(self):
        recorder = Recorder(status_code=500)
        client = WatiClient(
            WatiCredentials(api_url=BASE, access_token="tok"),
            transport=httpx.MockTransport(recorder),
        )

        with pytest.raises(WatiClientError):
            await client.get_templates()

        assert len(recorder.requests) == 1

    @pytest.mark.asyncio
    async def test_empty_response_body(self):
        client = WatiClient(
            WatiCredentials(api_url=BASE, access_token="tok"),
            transport=httpx.MockTransport(lambda r: httpx.Response(200)),
        )

        assert await client.get_contact_detail("1") == {}
