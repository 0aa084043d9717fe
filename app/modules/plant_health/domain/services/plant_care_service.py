# 📄 File: app/modules/plant_health/domain/services/plant_care_service.py
# 🧭 Purpose (Layman Explanation):
# The main "plant doctor" workflow: showing the home screen, diagnosing a sick plant,
# saving it to the user's collection, and keeping track of watering and recovery photos.
# 🧪 Purpose (Technical Summary):
# Application-facing domain service composing the plant repository, usage tracker,
# entitlement gate, diagnosis orchestrator and watering calculator. Every operation takes
# the caller's Session explicitly.
# 🔗 Dependencies:
# asyncio, repositories, UsageTracker, EntitlementGate, DiagnosisOrchestrator, watering
# 🔄 Connected Modules / Calls From:
# Plants and diagnoses API endpoints, app.modules.plant_health.container

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional, Union

from app.shared.core.exceptions import NotFoundError, StorageError

from ..models.plant import (
    INITIAL_PHOTO_NOTES,
    UPDATE_PHOTO_NOTES,
    Diagnosis,
    PlantRecord,
    ProgressPhoto,
    Questionnaire,
)
from ..models.user import Session
from ..repositories.plant_repository import PlantRepository
from .diagnosis_service import DiagnosisOrchestrator, DiagnosisOutcome, encode_image
from .entitlement_service import EntitlementGate
from .usage_service import UsageTracker
from .watering_service import overdue_plants, schedule_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HomeDashboard:
    plants: List[PlantRecord]
    diagnoses_this_month: int
    overdue: List[PlantRecord]
    is_premium: bool
    diagnoses_remaining: Optional[int]
    plants_remaining: Optional[int]


class PlantIdGenerator:
    """
    Millisecond timestamp ids, strictly increasing within the process.

    Newest-first ordering of a user's plants relies on ids growing with
    creation time.
    """

    def __init__(self, clock_ms: Optional[Callable[[], int]] = None):
        self.clock_ms = clock_ms or (lambda: time.time_ns() // 1_000_000)
        self._last = 0

    def __call__(self) -> int:
        candidate = self.clock_ms()
        if candidate <= self._last:
            candidate = self._last + 1
        self._last = candidate
        return candidate


def as_data_url(image: Union[bytes, str]) -> str:
    """Image as stored on a progress photo."""
    if isinstance(image, str) and image.startswith("data:"):
        return image
    return f"data:image/jpeg;base64,{encode_image(image)}"


class PlantCareService:
    """
    Plant health workflows for an authenticated session.

    Business rules:
    - Free users can keep 3 plants, get 2 diagnoses a month and add 5 photos per plant
    - A diagnosis only counts against the quota when it succeeded
    - A new plant starts with its diagnosis photo and a schedule from its questionnaire
    """

    def __init__(
        self,
        plant_repository: PlantRepository,
        usage_tracker: UsageTracker,
        gate: EntitlementGate,
        orchestrator: DiagnosisOrchestrator,
        clock: Optional[Callable[[], datetime]] = None,
        id_generator: Optional[Callable[[], int]] = None,
    ):
        self.plant_repository = plant_repository
        self.usage_tracker = usage_tracker
        self.gate = gate
        self.orchestrator = orchestrator
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.id_generator = id_generator or PlantIdGenerator()

    async def load_home(self, session: Session) -> HomeDashboard:
        plants, usage = await asyncio.gather(
            self.plant_repository.list_for_user(session.email),
            self.usage_tracker.read(session.email),
        )
        now = self.clock()
        diagnosis_decision = self.gate.evaluate_diagnosis(session.is_premium, usage.effective_count)
        plant_decision = self.gate.evaluate_add_plant(session.is_premium, len(plants))
        return HomeDashboard(
            plants=plants,
            diagnoses_this_month=usage.effective_count,
            overdue=overdue_plants(plants, now),
            is_premium=session.is_premium,
            diagnoses_remaining=diagnosis_decision.remaining,
            plants_remaining=plant_decision.remaining,
        )

    async def request_diagnosis(
        self,
        session: Session,
        image: Union[bytes, str],
        plant_name: str,
        questionnaire: Questionnaire,
    ) -> DiagnosisOutcome:
        """
        Diagnose a plant photo.

        Raises:
            QuotaExceededError: Free plant or monthly diagnosis limit reached
        """
        plant_count, usage = await asyncio.gather(
            self.plant_repository.count(session.email),
            self.usage_tracker.read(session.email),
        )
        self.gate.enforce_add_plant(session.is_premium, plant_count)
        self.gate.enforce_diagnosis(session.is_premium, usage.effective_count)

        outcome = await self.orchestrator.diagnose(image, plant_name, questionnaire)
        if not outcome.succeeded:
            return outcome

        # Re-read so a diagnosis finished concurrently is not overwritten
        latest = await self.usage_tracker.read(session.email)
        try:
            await self.usage_tracker.increment(session.email, latest.effective_count)
        except StorageError as e:
            logger.error(f"Diagnosis for {session.email} succeeded but usage was not recorded: {e.message}")
        return outcome

    async def save_plant(
        self,
        session: Session,
        name: Optional[str],
        questionnaire: Questionnaire,
        diagnosis: Diagnosis,
        image: Union[bytes, str],
    ) -> PlantRecord:
        """
        Add a diagnosed plant to the user's collection.

        Raises:
            QuotaExceededError: Free plant limit reached
            StorageWriteError: The record could not be persisted
        """
        plant_count = await self.plant_repository.count(session.email)
        self.gate.enforce_add_plant(session.is_premium, plant_count)

        now = self.clock()
        plant = PlantRecord(
            id=self.id_generator(),
            name=name or "",
            questionnaire=questionnaire,
            diagnosis=diagnosis,
            progress_photos=[
                ProgressPhoto(image=as_data_url(image), date=now, notes=INITIAL_PHOTO_NOTES)
            ],
            watering_schedule=schedule_for(
                questionnaire.light_condition, questionnaire.soil_condition, now
            ),
            date_added=now,
        )
        saved = await self.plant_repository.save(session.email, plant)
        logger.info(f"Plant {saved.id} saved for {session.email}")
        return saved

    async def list_plants(self, session: Session) -> List[PlantRecord]:
        return await self.plant_repository.list_for_user(session.email)

    async def get_plant(self, session: Session, plant_id: int) -> PlantRecord:
        plant = await self.plant_repository.get(session.email, plant_id)
        if plant is None:
            raise NotFoundError("Plant not found", resource_type="plant", resource_id=str(plant_id))
        return plant

    async def mark_watered(self, session: Session, plant_id: int) -> PlantRecord:
        plant = await self.get_plant(session, plant_id)
        return await self.plant_repository.mark_watered(session.email, plant, self.clock())

    async def add_photo(
        self,
        session: Session,
        plant_id: int,
        image: Union[bytes, str],
        notes: Optional[str] = None,
    ) -> PlantRecord:
        """
        Append a recovery photo.

        Raises:
            NotFoundError: Unknown plant id
            QuotaExceededError: Free photo limit reached for this plant
        """
        plant = await self.get_plant(session, plant_id)
        photo = ProgressPhoto(
            image=as_data_url(image),
            date=self.clock(),
            notes=(notes or "").strip() or UPDATE_PHOTO_NOTES,
        )
        return await self.plant_repository.add_photo(session.email, plant, photo, session.is_premium)

    async def delete_plant(self, session: Session, plant_id: int) -> bool:
        await self.get_plant(session, plant_id)
        return await self.plant_repository.delete(session.email, plant_id)
