"""
Shared test fixtures for the Plant Health test suite.

Provides:
- In-memory and flaky key-value stores
- A retry policy whose sleeps are recorded instead of awaited
- A controllable clock
- A fake diagnosis transport
- Service instances wired over the in-memory store
- A FastAPI TestClient over a prebuilt container

Async code is driven with asyncio.run from synchronous tests:

    def test_example(plant_repo, sample_plant):
        asyncio.run(plant_repo.save("a@b.com", sample_plant))
"""

import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Set

import pytest
from fastapi.testclient import TestClient

from app.main import create_application
from app.modules.plant_health.container import ServiceContainer
from app.modules.plant_health.domain.models import (
    Diagnosis,
    PlantRecord,
    ProgressPhoto,
    Questionnaire,
    WateringSchedule,
)
from app.modules.plant_health.domain.services.diagnosis_service import (
    DiagnosisOrchestrator,
    DiagnosisTransport,
)
from app.modules.plant_health.domain.services.entitlement_service import EntitlementGate
from app.modules.plant_health.domain.services.plant_care_service import PlantCareService
from app.modules.plant_health.domain.services.session_service import SessionManager
from app.modules.plant_health.domain.services.usage_service import UsageTracker
from app.modules.plant_health.infrastructure.storage import (
    KVPlantRepository,
    KVUsageRepository,
    KVUserRepository,
)
from app.shared.config.settings import Settings
from app.shared.core.exceptions import StorageError
from app.shared.core.retry import RetryPolicy
from app.shared.infrastructure.storage.kv_store import InMemoryKeyValueStore

logging.getLogger("app").setLevel(logging.DEBUG)

EMAIL = "fern@example.com"
NOW = datetime(2025, 3, 15, 12, 0, tzinfo=timezone.utc)

GOOD_DIAGNOSIS = {
    "primaryDiagnosis": "Overwatering",
    "confidence": "high",
    "explanation": "Soggy soil and yellow lower leaves point to root stress.",
    "causes": ["Watering too often", "Poor drainage"],
    "treatment": ["Let the top inch dry out", "Repot with fresh mix"],
    "timeline": "2-3 weeks",
    "prevention": ["Check soil before watering"],
}


# ========================== Store Doubles ==================================


class FlakyStore(InMemoryKeyValueStore):
    """
    In-memory store that fails on demand.

    set_failures: number of upcoming set() calls that fail
    fail_mode: "raise" raises StorageError, "reject" returns False
    broken_gets: keys whose get() raises StorageError
    """

    def __init__(self, set_failures: int = 0, fail_mode: str = "raise"):
        super().__init__()
        self.set_failures = set_failures
        self.fail_mode = fail_mode
        self.set_calls = 0
        self.broken_gets: Set[str] = set()
        self.fail_deletes = False

    async def get(self, key: str) -> Optional[str]:
        if key in self.broken_gets:
            raise StorageError("get failed", key=key, operation="get")
        return await super().get(key)

    async def set(self, key: str, value: str) -> bool:
        self.set_calls += 1
        if self.set_failures > 0:
            self.set_failures -= 1
            if self.fail_mode == "reject":
                return False
            raise StorageError("set failed", key=key, operation="set")
        return await super().set(key, value)

    async def delete(self, key: str) -> bool:
        if self.fail_deletes:
            raise StorageError("delete failed", key=key, operation="delete")
        return await super().delete(key)


class RecordingSleep:
    """Async sleep replacement that records requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class FixedClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class FakeTransport(DiagnosisTransport):
    """Diagnosis transport returning canned bodies or raising canned errors."""

    def __init__(self, body: Optional[Dict[str, Any]] = None, error: Optional[Exception] = None):
        self.body = body if body is not None else text_body(json.dumps(GOOD_DIAGNOSIS))
        self.error = error
        self.payloads: List[Dict[str, Any]] = []

    async def send(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        self.payloads.append(payload)
        if self.error is not None:
            raise self.error
        return self.body


def text_body(text: str) -> Dict[str, Any]:
    return {"content": [{"type": "text", "text": text}]}


# ========================== Model Factories ================================


def make_plant(plant_id: int = 1, name: str = "Fern", photos: int = 1, now: datetime = NOW) -> PlantRecord:
    return PlantRecord(
        id=plant_id,
        name=name,
        questionnaire=Questionnaire(
            last_watered="3-5 days ago",
            soil_condition="Very wet",
            light_condition="Bright indirect",
            symptoms=["Yellow leaves"],
        ),
        diagnosis=Diagnosis.model_validate(GOOD_DIAGNOSIS),
        progress_photos=[
            ProgressPhoto(image=f"data:image/jpeg;base64,cGhvdG8{i}", date=now, notes="Initial")
            for i in range(photos)
        ],
        watering_schedule=WateringSchedule(last_watered=now, next_watering=now + timedelta(days=8)),
        date_added=now,
    )


@pytest.fixture()
def sample_plant() -> PlantRecord:
    return make_plant()


@pytest.fixture()
def questionnaire() -> Questionnaire:
    return Questionnaire(
        last_watered="1 week ago",
        recent_changes="Moved to a new window",
        soil_condition="Bone dry",
        light_condition="Direct sunlight",
        symptoms=["Wilting", "Brown tips"],
    )


# ========================== Store Fixtures =================================


@pytest.fixture()
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture()
def recorded_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture()
def retry_policy(recorded_sleep) -> RetryPolicy:
    return RetryPolicy(max_attempts=3, base_delay=0.1, multiplier=2.0, sleep=recorded_sleep)


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture()
def gate() -> EntitlementGate:
    return EntitlementGate(plant_limit=3, diagnosis_limit=2, photo_limit=5)


# ========================== Repository Fixtures ============================


@pytest.fixture()
def user_repo(store, retry_policy) -> KVUserRepository:
    return KVUserRepository(store, retry_policy)


@pytest.fixture()
def usage_repo(store, retry_policy) -> KVUsageRepository:
    return KVUsageRepository(store, retry_policy)


@pytest.fixture()
def plant_repo(store, retry_policy, gate) -> KVPlantRepository:
    return KVPlantRepository(store, retry_policy, gate)


# ========================== Service Fixtures ===============================


@pytest.fixture()
def usage_tracker(usage_repo, clock) -> UsageTracker:
    return UsageTracker(usage_repo, clock=clock)


@pytest.fixture()
def session_manager(user_repo, clock) -> SessionManager:
    return SessionManager(user_repo, min_password_length=4, clock=clock)


@pytest.fixture()
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture()
def orchestrator(transport) -> DiagnosisOrchestrator:
    return DiagnosisOrchestrator(transport)


@pytest.fixture()
def plant_care(plant_repo, usage_tracker, gate, orchestrator, clock) -> PlantCareService:
    return PlantCareService(
        plant_repository=plant_repo,
        usage_tracker=usage_tracker,
        gate=gate,
        orchestrator=orchestrator,
        clock=clock,
    )


# ========================== API Fixtures ===================================


@pytest.fixture()
def test_settings() -> Settings:
    return Settings(
        ENVIRONMENT="test",
        STORAGE_BACKEND="memory",
        ANTHROPIC_API_KEY="test-key",
        LOG_FORMAT="text",
        DEBUG=False,
    )


@pytest.fixture()
def container(test_settings, store, retry_policy, transport) -> ServiceContainer:
    return ServiceContainer.build(test_settings, store, transport, retry_policy=retry_policy)


@pytest.fixture()
def client(container):
    app = create_application(container)
    with TestClient(app) as test_client:
        yield test_client
