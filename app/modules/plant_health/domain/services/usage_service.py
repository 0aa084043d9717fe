# 📄 File: app/modules/plant_health/domain/services/usage_service.py
# 🧭 Purpose (Layman Explanation):
# Tracks how many diagnoses a user has asked for this month so free users can be held
# to their monthly allowance
# 🧪 Purpose (Technical Summary):
# Usage quota tracker. read() projects the stored record onto the current calendar month
# without writing; increment() persists effective+1 with lastReset=now, which is also
# where a stale month gets corrected
# 🔗 Dependencies:
# UsageRepository, usage domain models
# 🔄 Connected Modules / Calls From:
# plant_care_service.py (home dashboard, diagnosis flow)

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from ..models.usage import UsageSnapshot, UsageStats, effective_count
from ..repositories.usage_repository import UsageRepository

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class UsageTracker:
    """
    Monthly diagnosis counter per user.

    Only call increment() after a diagnosis succeeded; failed or fallback
    diagnoses never count against the quota.
    """

    def __init__(self, repository: UsageRepository, clock: Optional[Clock] = None):
        self.repository = repository
        self.clock = clock or utc_now

    async def read(self, email: str) -> UsageSnapshot:
        stored = await self.repository.get(email)
        snapshot = UsageSnapshot(stored=stored, effective_count=effective_count(stored, self.clock()))
        if snapshot.is_stale:
            logger.debug(f"Usage for {email} is from an earlier month, effective count is 0")
        return snapshot

    async def increment(self, email: str, current_effective_count: int) -> UsageStats:
        """
        Record one more diagnosis.

        Raises:
            StorageWriteError: If the write could not be persisted
        """
        stats = UsageStats(
            diagnoses_this_month=current_effective_count + 1,
            last_reset=self.clock(),
        )
        await self.repository.save(email, stats)
        logger.info(f"Diagnosis usage for {email} is now {stats.diagnoses_this_month}")
        return stats
