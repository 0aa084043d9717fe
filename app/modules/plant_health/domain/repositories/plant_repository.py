# 📄 File: app/modules/plant_health/domain/repositories/plant_repository.py
# 🧭 Purpose (Layman Explanation):
# Defines the contract for saving, listing, updating and deleting the plants a user
# is looking after
# 🧪 Purpose (Technical Summary):
# Repository interface for PlantRecord aggregates partitioned by owner email, including
# the watering and photo mutations that recompute or append state before saving
# 🔗 Dependencies:
# Domain models (PlantRecord, ProgressPhoto), typing, abc
# 🔄 Connected Modules / Calls From:
# plant_care_service.py, infrastructure KV implementation

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from ..models.plant import PlantRecord, ProgressPhoto


class PlantRepository(ABC):
    """
    Repository interface for PlantRecord data access.

    Records are owned by exactly one user; every method takes the owner's
    email and never crosses into another user's partition.
    """

    @abstractmethod
    async def save(self, email: str, plant: PlantRecord) -> PlantRecord:
        """
        Write the record under (email, plant.id).

        Raises:
            StorageWriteError: If every write attempt failed. Callers must
                not update in-memory state in that case.
        """

    @abstractmethod
    async def get(self, email: str, plant_id: int) -> Optional[PlantRecord]:
        """Return one record, None when absent or unreadable."""

    @abstractmethod
    async def list_for_user(self, email: str) -> List[PlantRecord]:
        """
        Return every readable record for email, newest (highest id) first.

        Records that fail to load or parse are dropped.
        """

    @abstractmethod
    async def count(self, email: str) -> int:
        """Number of readable plant records stored for email."""

    @abstractmethod
    async def delete(self, email: str, plant_id: int) -> bool:
        """Best-effort removal without retry. Returns False on failure."""

    @abstractmethod
    async def mark_watered(self, email: str, plant: PlantRecord, now: datetime) -> PlantRecord:
        """Recompute the watering schedule from now and save."""

    @abstractmethod
    async def add_photo(
        self,
        email: str,
        plant: PlantRecord,
        photo: ProgressPhoto,
        is_premium: bool,
    ) -> PlantRecord:
        """
        Append a progress photo and save.

        Raises:
            QuotaExceededError: If the free photo limit is reached
        """
