"""
Usage Tracker Tests
===================
Monthly diagnosis counter with lazy calendar-month reset.
"""

import asyncio
from datetime import datetime, timezone

from app.modules.plant_health.domain.models import UsageStats, effective_count
from app.modules.plant_health.infrastructure.storage.keys import usage_key

from .conftest import EMAIL, NOW


class TestEffectiveCount:

    def test_missing_record_is_zero(self):
        assert effective_count(None, NOW) == 0

    def test_same_month_keeps_count(self):
        stats = UsageStats(diagnoses_this_month=2, last_reset=datetime(2025, 3, 1, tzinfo=timezone.utc))
        assert effective_count(stats, NOW) == 2

    def test_new_month_resets(self):
        stats = UsageStats(diagnoses_this_month=2, last_reset=datetime(2025, 2, 28, 23, 59, tzinfo=timezone.utc))
        assert effective_count(stats, NOW) == 0

    def test_same_month_previous_year_resets(self):
        stats = UsageStats(diagnoses_this_month=1, last_reset=datetime(2024, 3, 20, tzinfo=timezone.utc))
        assert effective_count(stats, NOW) == 0


class TestUsageTracker:

    def test_read_without_record(self, usage_tracker):
        snapshot = asyncio.run(usage_tracker.read(EMAIL))

        assert snapshot.stored is None
        assert snapshot.effective_count == 0

    def test_increment_then_read(self, usage_tracker):
        asyncio.run(usage_tracker.increment(EMAIL, 0))
        snapshot = asyncio.run(usage_tracker.read(EMAIL))

        assert snapshot.effective_count == 1
        assert snapshot.stored.last_reset == NOW

    def test_new_month_read_does_not_write(self, usage_tracker, store, clock):
        asyncio.run(usage_tracker.increment(EMAIL, 1))
        stored_before = store.data[usage_key(EMAIL)]

        clock.now = datetime(2025, 4, 2, tzinfo=timezone.utc)
        snapshot = asyncio.run(usage_tracker.read(EMAIL))

        assert snapshot.effective_count == 0
        assert snapshot.stored.diagnoses_this_month == 2
        assert snapshot.is_stale
        assert store.data[usage_key(EMAIL)] == stored_before

    def test_increment_overwrites_stale_month(self, usage_tracker, clock):
        asyncio.run(usage_tracker.increment(EMAIL, 1))
        clock.now = datetime(2025, 4, 2, tzinfo=timezone.utc)

        snapshot = asyncio.run(usage_tracker.read(EMAIL))
        stats = asyncio.run(usage_tracker.increment(EMAIL, snapshot.effective_count))

        assert stats.diagnoses_this_month == 1
        assert stats.last_reset == clock.now
        assert not asyncio.run(usage_tracker.read(EMAIL)).is_stale

    def test_stored_record_is_camel_case(self, usage_tracker, store):
        asyncio.run(usage_tracker.increment(EMAIL, 0))

        raw = store.data[usage_key(EMAIL)]
        assert '"diagnosesThisMonth":1' in raw
        assert '"lastReset"' in raw
