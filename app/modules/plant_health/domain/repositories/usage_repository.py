# 📄 File: app/modules/plant_health/domain/repositories/usage_repository.py
# 🧭 Purpose (Layman Explanation):
# Defines how the monthly diagnosis counter for each user is loaded and saved
# 🧪 Purpose (Technical Summary):
# Repository interface for raw (stored) UsageStats records keyed per user email
# 🔗 Dependencies:
# Domain models (UsageStats), typing, abc
# 🔄 Connected Modules / Calls From:
# usage_service.py, infrastructure KV implementation

from abc import ABC, abstractmethod
from typing import Optional

from ..models.usage import UsageStats


class UsageRepository(ABC):
    """Stored usage records. No month projection happens at this layer."""

    @abstractmethod
    async def get(self, email: str) -> Optional[UsageStats]:
        """Return the stored record, None when absent or unreadable."""

    @abstractmethod
    async def save(self, email: str, stats: UsageStats) -> UsageStats:
        """
        Overwrite the stored record.

        Raises:
            StorageWriteError: If every write attempt failed
        """
