# 📄 File: app/modules/plant_health/domain/models/usage.py
# 🧭 Purpose (Layman Explanation):
# Keeps count of how many diagnoses a user has asked for this month, and knows that a
# new month starts the count again from zero.
# 🧪 Purpose (Technical Summary):
# UsageStats record (stored value) plus the pure effective-count projection applied at
# read time. The stored record is only corrected on the next increment.
# 🔗 Dependencies:
# pydantic, datetime
# 🔄 Connected Modules / Calls From:
# usage_service.py, usage repository, plant_care_service.py

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .user import CamelModel


class UsageStats(CamelModel):
    """Stored usage record for one user (``usage:<email>``)."""

    diagnoses_this_month: int = Field(default=0, ge=0)
    last_reset: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def same_calendar_month(a: datetime, b: datetime) -> bool:
    a, b = _as_utc(a), _as_utc(b)
    return (a.year, a.month) == (b.year, b.month)


def effective_count(stats: Optional[UsageStats], now: datetime) -> int:
    """
    Project a stored usage record onto the current month.

    A record last incremented in an earlier calendar month counts as zero.
    """
    if stats is None:
        return 0
    if not same_calendar_month(stats.last_reset, now):
        return 0
    return stats.diagnoses_this_month


class UsageSnapshot(BaseModel):
    """Stored record alongside the effective count derived from it."""

    model_config = ConfigDict(frozen=True)

    stored: Optional[UsageStats] = None
    effective_count: int = 0

    @property
    def is_stale(self) -> bool:
        return self.stored is not None and self.stored.diagnoses_this_month != self.effective_count
