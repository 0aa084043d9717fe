# 📄 File: app/modules/plant_health/infrastructure/storage/plant_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Keeps each user's saved plants in the key-value store: saving them (trying again if
# the store hiccups), listing them newest first, and recording waterings and new photos
# 🧪 Purpose (Technical Summary):
# KV-store implementation of PlantRepository over plant:<email>:<id>. Writes use the
# shared RetryPolicy; listing fetches records concurrently and drops unreadable ones;
# watering and photo mutations are serialized per plant through an asyncio.Lock and
# re-read the latest stored record before writing
# 🔗 Dependencies:
# asyncio, KeyValueStore, RetryPolicy, EntitlementGate, watering calculator, pydantic
# 🔄 Connected Modules / Calls From:
# plant_care_service.py via app.modules.plant_health.container

import asyncio
from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from app.shared.core.exceptions import StorageError
from app.shared.core.retry import RetryPolicy
from app.shared.infrastructure.storage.kv_store import KeyValueStore
from app.shared.utils.logging import get_logger

from ...domain.models.plant import PlantRecord, ProgressPhoto
from ...domain.repositories.plant_repository import PlantRepository
from ...domain.services.entitlement_service import EntitlementGate
from ...domain.services.watering_service import schedule_after_watering
from .keys import plant_key, plant_prefix

logger = get_logger(__name__)


class KVPlantRepository(PlantRepository):
    """
    PlantRepository backed by the key-value store.

    Per-plant locks only serialize mutations issued through this instance;
    writers in other processes still race under last-write-wins.
    """

    def __init__(self, store: KeyValueStore, retry_policy: RetryPolicy, gate: EntitlementGate):
        self.store = store
        self.retry_policy = retry_policy
        self.gate = gate
        self._locks: Dict[Tuple[str, int], asyncio.Lock] = defaultdict(asyncio.Lock)

    async def save(self, email: str, plant: PlantRecord) -> PlantRecord:
        key = plant_key(email, plant.id)
        payload = plant.to_json()
        await self.retry_policy.write(key, lambda: self.store.set(key, payload))
        logger.debug(f"Saved plant {plant.id}", extra={"plant_id": plant.id})
        return plant

    def _parse(self, key: str, raw: Optional[str]) -> Optional[PlantRecord]:
        if raw is None:
            return None
        try:
            return PlantRecord.model_validate_json(raw)
        except PydanticValidationError as e:
            logger.warning(
                f"Dropping unreadable plant record {key}",
                extra={"key": key, "errors": e.error_count()}
            )
            return None

    async def get(self, email: str, plant_id: int) -> Optional[PlantRecord]:
        key = plant_key(email, plant_id)
        return self._parse(key, await self.store.get(key))

    async def list_for_user(self, email: str) -> List[PlantRecord]:
        keys = sorted(await self.store.list(plant_prefix(email)))
        results = await asyncio.gather(
            *(self.store.get(key) for key in keys),
            return_exceptions=True,
        )

        plants = []
        for key, result in zip(keys, results):
            if isinstance(result, StorageError):
                logger.warning(f"Dropping plant record {key}: {result.message}", extra={"key": key})
                continue
            if isinstance(result, BaseException):
                raise result
            plant = self._parse(key, result)
            if plant is not None:
                plants.append(plant)

        if len(plants) < len(keys):
            logger.info(
                f"Listed {len(plants)} of {len(keys)} plant records",
                extra={"dropped": len(keys) - len(plants)}
            )
        return sorted(plants, key=lambda p: p.id, reverse=True)

    async def count(self, email: str) -> int:
        # Readable records only, matching list_for_user
        return len(await self.list_for_user(email))

    async def delete(self, email: str, plant_id: int) -> bool:
        key = plant_key(email, plant_id)
        try:
            removed = await self.store.delete(key)
        except StorageError as e:
            logger.error(f"Failed to delete plant record {key}: {e.message}", extra={"key": key})
            return False
        if not removed:
            logger.warning(f"Delete found no plant record at {key}", extra={"key": key})
        self._locks.pop((email, plant_id), None)
        return removed

    async def _latest(self, email: str, plant: PlantRecord) -> PlantRecord:
        stored = await self.get(email, plant.id)
        return stored if stored is not None else plant

    async def mark_watered(self, email: str, plant: PlantRecord, now: datetime) -> PlantRecord:
        async with self._locks[(email, plant.id)]:
            current = await self._latest(email, plant)
            updated = current.model_copy(
                update={"watering_schedule": schedule_after_watering(current, now)}
            )
            return await self.save(email, updated)

    async def add_photo(
        self,
        email: str,
        plant: PlantRecord,
        photo: ProgressPhoto,
        is_premium: bool,
    ) -> PlantRecord:
        async with self._locks[(email, plant.id)]:
            current = await self._latest(email, plant)
            self.gate.enforce_add_photo(is_premium, current.photo_count)
            updated = current.model_copy(
                update={"progress_photos": [*current.progress_photos, photo]}
            )
            return await self.save(email, updated)
