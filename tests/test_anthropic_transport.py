"""
Diagnosis Transport Tests
=========================
Messages API transport and the HTTP status mapping of the shared API client.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.modules.plant_health.infrastructure.external import AnthropicDiagnosisTransport
from app.shared.core.exceptions import TransportError
from app.shared.infrastructure.external_apis import APIClient


def response_with(status: int, text: str = "", headers: dict = None):
    response = MagicMock()
    response.status = status
    response.headers = headers or {}
    response.text = AsyncMock(return_value=text)
    return response


class TestAnthropicTransport:

    def test_missing_key_fails_without_network(self, test_settings):
        settings = test_settings.model_copy(update={"ANTHROPIC_API_KEY": None})
        transport = AnthropicDiagnosisTransport.from_settings(settings)
        transport.api_client.post = AsyncMock()

        with pytest.raises(TransportError) as exc_info:
            asyncio.run(transport.send({"model": "m"}))

        assert "not configured" in exc_info.value.message
        transport.api_client.post.assert_not_awaited()

    def test_send_posts_to_messages_endpoint(self, test_settings):
        transport = AnthropicDiagnosisTransport.from_settings(test_settings)
        transport.api_client.post = AsyncMock(return_value={"content": []})

        body = asyncio.run(transport.send({"model": "m"}))

        assert body == {"content": []}
        transport.api_client.post.assert_awaited_once_with("v1/messages", data={"model": "m"})

    def test_headers_carry_key_and_version(self, test_settings):
        transport = AnthropicDiagnosisTransport.from_settings(test_settings)

        headers = transport.api_client._get_default_headers()

        assert headers["x-api-key"] == "test-key"
        assert headers["anthropic-version"] == test_settings.ANTHROPIC_API_VERSION
        assert "Authorization" not in headers


class TestStatusMapping:

    @pytest.fixture()
    def api_client(self):
        return APIClient(base_url="https://api.example.com", api_key="k", api_name="anthropic")

    def test_success_passes(self, api_client):
        asyncio.run(api_client._handle_response_status(response_with(200)))

    @pytest.mark.parametrize(
        "status, fragment",
        [
            (401, "Authentication failed"),
            (429, "Rate limit exceeded"),
            (400, "Client error"),
            (529, "Server error"),
        ],
    )
    def test_error_statuses_raise_transport_error(self, api_client, status, fragment):
        with pytest.raises(TransportError) as exc_info:
            asyncio.run(api_client._handle_response_status(response_with(status, "overloaded")))

        assert fragment in exc_info.value.message
        assert exc_info.value.details["status_code_received"] == status

    def test_timeouts_become_transport_errors(self, api_client):
        error = api_client._transform_exception(asyncio.TimeoutError(), "POST", "https://api.example.com/v1/messages")

        assert isinstance(error, TransportError)
        assert error.message.startswith("Timeout for anthropic")
