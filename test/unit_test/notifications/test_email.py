"""Unit tests for the Resend email client."""

import json

import httpx
import pytest

from tatvivah.notifications import EmailClient, EmailDeliveryError
from tatvivah.server.core.config import EmailConfig, settings

pytestmark = pytest.mark.asyncio

API_URL = "https://api.resend.com/emails"


def _config(**overrides) -> EmailConfig:
    data = {"api_key": "re_test", "sender": "no-reply@tatvivah.com", "mock": False, "api_url": API_URL}
    data.update(overrides)
    return EmailConfig(**data)


@pytest.fixture
def live_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(settings, "environment", "development")


class TestMockMode:
    async def test_test_environment_is_mocked(self):
        client = EmailClient(_config())
        assert client.mocked is True
        assert (await client.send("a@example.com", "Hi", "<p>Hi</p>")).startswith("mock_")

    async def test_mock_flag(self, live_environment):
        assert EmailClient(_config(mock=True)).mocked is True

    async def test_missing_api_key(self, live_environment):
        assert EmailClient(_config(api_key=None)).mocked is True


class TestSend:
    async def test_posts_to_resend(self, live_environment):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["auth"] = request.headers["authorization"]
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={"id": "msg_123"})

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            message_id = await EmailClient(_config(), client=http).send("buyer@example.com", "Subject", "<p>x</p>")

        assert message_id == "msg_123"
        assert captured["url"] == API_URL
        assert captured["auth"] == "Bearer re_test"
        assert captured["body"] == {
            "from": "no-reply@tatvivah.com",
            "to": ["buyer@example.com"],
            "subject": "Subject",
            "html": "<p>x</p>",
        }

    async def test_provider_error(self, live_environment):
        transport = httpx.MockTransport(lambda request: httpx.Response(422, text="invalid from"))
        async with httpx.AsyncClient(transport=transport) as http:
            with pytest.raises(EmailDeliveryError) as exc_info:
                await EmailClient(_config(), client=http).send("a@example.com", "s", "h")
        assert exc_info.value.status_code == 422
        assert "invalid from" in str(exc_info.value)

    async def test_transport_error(self, live_environment):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            with pytest.raises(EmailDeliveryError, match="Resend request failed"):
                await EmailClient(_config(), client=http).send("a@example.com", "s", "h")

    async def test_missing_message_id(self, live_environment):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={}))
        async with httpx.AsyncClient(transport=transport) as http:
            with pytest.raises(EmailDeliveryError, match="message id"):
                await EmailClient(_config(), client=http).send("a@example.com", "s", "h")
