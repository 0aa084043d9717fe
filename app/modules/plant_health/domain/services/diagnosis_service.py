# 📄 File: app/modules/plant_health/domain/services/diagnosis_service.py
# 🧭 Purpose (Layman Explanation):
# Sends the plant photo and questionnaire answers to the AI plant expert and turns its
# answer into a diagnosis. If anything goes wrong the user still gets a clear
# "something went wrong, please try again" diagnosis instead of a crash.
# 🧪 Purpose (Technical Summary):
# Diagnosis orchestrator: builds one multimodal request, hands it to a DiagnosisTransport,
# extracts the first text block, strips code fences and validates the JSON into a
# Diagnosis. TransportError and MalformedResponseError are absorbed into a low-confidence
# fallback; the DiagnosisOutcome records which state the request ended in.
# 🔗 Dependencies:
# base64, json, re, pydantic, app.shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# plant_care_service.py, infrastructure.external.anthropic_client (transport)

import base64
import json
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from app.shared.core.exceptions import ExternalAPIError, MalformedResponseError

from ..models.plant import Confidence, Diagnosis, Questionnaire

logger = logging.getLogger(__name__)

IMAGE_MEDIA_TYPE = "image/jpeg"
DEFAULT_MODEL = "claude-sonnet-4-20250514"
DEFAULT_MAX_TOKENS = 1000

FENCE_PATTERN = re.compile(r"```[ \t]*json[ \t]*\n?|\n?```", re.IGNORECASE)

RESPONSE_TEMPLATE = (
    '{"primaryDiagnosis":"x","confidence":"high","explanation":"y",'
    '"causes":["a"],"treatment":["b"],"timeline":"c","prevention":["d"]}'
)


class DiagnosisState(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class DiagnosisOutcome:
    state: DiagnosisState
    diagnosis: Diagnosis
    error: Optional[ExternalAPIError] = None

    @property
    def succeeded(self) -> bool:
        return self.state == DiagnosisState.SUCCEEDED


class DiagnosisTransport(ABC):
    """Sends a built request body to the diagnosis API and returns its JSON body."""

    @abstractmethod
    async def send(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Raises:
            TransportError: On connection failures or non-success status
        """


def encode_image(image: Union[bytes, str]) -> str:
    """
    Base64 payload for an image.

    Raw bytes are encoded; strings are taken as base64 already, with any
    ``data:<type>;base64,`` prefix removed.
    """
    if isinstance(image, (bytes, bytearray)):
        return base64.b64encode(image).decode("ascii")
    if image.startswith("data:") and "," in image:
        return image.split(",", 1)[1]
    return image


def fallback_diagnosis(error: Exception) -> Diagnosis:
    """Low-confidence placeholder shown when a diagnosis could not be obtained."""
    message = getattr(error, "message", None) or str(error) or error.__class__.__name__
    return Diagnosis(
        primary_diagnosis="Error",
        confidence=Confidence.LOW,
        explanation=message,
        causes=["API Issue"],
        treatment=["Please try again"],
        timeline="N/A",
        prevention=[],
    )


class DiagnosisOrchestrator:
    """
    Runs one diagnosis request through Idle -> Requesting -> Succeeded | Failed.

    diagnose() never raises for transport or response-shape problems; the
    caller always gets a well-formed Diagnosis and checks the outcome state
    before counting usage.
    """

    def __init__(
        self,
        transport: DiagnosisTransport,
        model: str = DEFAULT_MODEL,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ):
        self.transport = transport
        self.model = model
        self.max_tokens = max_tokens

    @classmethod
    def from_settings(cls, transport: DiagnosisTransport, settings) -> "DiagnosisOrchestrator":
        return cls(
            transport=transport,
            model=settings.ANTHROPIC_MODEL,
            max_tokens=settings.ANTHROPIC_MAX_TOKENS,
        )

    def build_prompt(self, plant_name: str, questionnaire: Questionnaire) -> str:
        lines = [
            "Plant expert. Analyze.",
            f"Plant: {plant_name}",
            f"Watered: {questionnaire.last_watered}",
            f"Soil: {questionnaire.soil_condition}",
            f"Light: {questionnaire.light_condition}",
            f"Changes: {questionnaire.recent_changes}",
            f"Symptoms: {', '.join(questionnaire.symptoms)}",
            "",
            "JSON only:",
            RESPONSE_TEMPLATE,
        ]
        return "\n".join(lines)

    def build_request(
        self,
        image: Union[bytes, str],
        plant_name: str,
        questionnaire: Questionnaire,
    ) -> Dict[str, Any]:
        return {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "image",
                            "source": {
                                "type": "base64",
                                "media_type": IMAGE_MEDIA_TYPE,
                                "data": encode_image(image),
                            },
                        },
                        {
                            "type": "text",
                            "text": self.build_prompt(plant_name, questionnaire),
                        },
                    ],
                }
            ],
        }

    def parse_response(self, body: Dict[str, Any]) -> Diagnosis:
        """
        Extract the Diagnosis from a messages API body.

        Raises:
            MalformedResponseError: No text block, invalid JSON or wrong shape
        """
        content = body.get("content") if isinstance(body, dict) else None
        text = None
        if isinstance(content, list):
            for block in content:
                if isinstance(block, dict) and block.get("type") == "text":
                    text = block.get("text")
                    break
        if not isinstance(text, str) or not text:
            raise MalformedResponseError("Diagnosis response contained no text")

        cleaned = FENCE_PATTERN.sub("", text).strip()
        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError as e:
            raise MalformedResponseError(f"Diagnosis response is not valid JSON: {e.msg}") from e

        if not isinstance(data, dict):
            raise MalformedResponseError("Diagnosis response is not a JSON object")
        try:
            return Diagnosis.model_validate(data)
        except PydanticValidationError as e:
            raise MalformedResponseError(
                f"Diagnosis response has an unexpected shape ({e.error_count()} errors)"
            ) from e

    async def diagnose(
        self,
        image: Union[bytes, str],
        plant_name: str,
        questionnaire: Questionnaire,
    ) -> DiagnosisOutcome:
        payload = self.build_request(image, plant_name, questionnaire)

        logger.debug(f"Diagnosis {DiagnosisState.REQUESTING.value} for {plant_name!r}")
        try:
            body = await self.transport.send(payload)
            diagnosis = self.parse_response(body)
        except ExternalAPIError as e:
            logger.warning(f"Diagnosis failed ({e.error_code}): {e.message}")
            return DiagnosisOutcome(DiagnosisState.FAILED, fallback_diagnosis(e), e)

        logger.info(f"Diagnosis succeeded: {diagnosis.primary_diagnosis} ({diagnosis.confidence.value})")
        return DiagnosisOutcome(DiagnosisState.SUCCEEDED, diagnosis)
