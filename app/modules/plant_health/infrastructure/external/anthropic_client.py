# 📄 File: app/modules/plant_health/infrastructure/external/anthropic_client.py
# 🧭 Purpose (Layman Explanation):
# Delivers the plant photo and questions to the Anthropic AI service and brings back
# its answer.
#
# 🧪 Purpose (Technical Summary):
# DiagnosisTransport implementation posting to the Anthropic Messages API through the
# shared aiohttp APIClient (x-api-key and anthropic-version headers). A missing API key
# fails as a TransportError before any network call.
#
# 🔗 Dependencies:
# - app.shared.infrastructure.external_apis.api_client (aiohttp, tenacity)
# - app.shared.config.settings (ANTHROPIC_* configuration)
#
# 🔄 Connected Modules / Calls From:
# - app.modules.plant_health.container
# - app.modules.plant_health.domain.services.diagnosis_service

from typing import Any, Dict

from app.shared.core.exceptions import TransportError
from app.shared.infrastructure.external_apis.api_client import APIClient, create_api_client
from app.shared.utils.logging import get_logger

from ...domain.services.diagnosis_service import DiagnosisTransport

logger = get_logger(__name__)

MESSAGES_ENDPOINT = "v1/messages"


class AnthropicDiagnosisTransport(DiagnosisTransport):
    """Messages API transport for plant diagnoses."""

    def __init__(self, api_client: APIClient):
        self.api_client = api_client

    @classmethod
    def from_settings(cls, settings) -> "AnthropicDiagnosisTransport":
        config = settings.get_diagnosis_api_config()
        client = create_api_client(
            api_name=config["api_name"],
            base_url=config["base_url"],
            api_key=config["api_key"],
            timeout=config["timeout"],
            max_retries=config["max_retries"],
            extra_headers=config["extra_headers"],
        )
        return cls(client)

    @property
    def configured(self) -> bool:
        return bool(self.api_client.api_key)

    async def send(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        if not self.configured:
            raise TransportError(
                "Diagnosis API key is not configured",
                api_name=self.api_client.api_name,
            )

        logger.debug(
            "Sending diagnosis request",
            extra={"model": payload.get("model"), "api_name": self.api_client.api_name}
        )
        return await self.api_client.post(MESSAGES_ENDPOINT, data=payload)

    async def close(self) -> None:
        await self.api_client.close()
