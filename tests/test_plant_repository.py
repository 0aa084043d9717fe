"""
Plant Repository Tests
======================
KV-backed plant records: retrying saves, tolerant listing, best-effort delete
and serialized per-plant mutations.
"""

import asyncio
import logging
from datetime import timedelta

import pytest

from app.modules.plant_health.domain.models import PlantRecord, ProgressPhoto
from app.modules.plant_health.infrastructure.storage import KVPlantRepository
from app.modules.plant_health.infrastructure.storage.keys import plant_key
from app.shared.core.exceptions import QuotaExceededError, StorageWriteError

from .conftest import EMAIL, NOW, FlakyStore, make_plant


@pytest.fixture()
def flaky_store():
    return FlakyStore()


@pytest.fixture()
def flaky_repo(flaky_store, retry_policy, gate):
    return KVPlantRepository(flaky_store, retry_policy, gate)


class TestSave:

    def test_round_trip(self, plant_repo, sample_plant):
        asyncio.run(plant_repo.save(EMAIL, sample_plant))

        assert asyncio.run(plant_repo.list_for_user(EMAIL)) == [sample_plant]
        assert asyncio.run(plant_repo.get(EMAIL, sample_plant.id)) == sample_plant

    def test_record_is_flat_camel_case_json(self, plant_repo, store, sample_plant):
        asyncio.run(plant_repo.save(EMAIL, sample_plant))

        raw = store.data[plant_key(EMAIL, sample_plant.id)]
        assert '"progressPhotos"' in raw
        assert '"wateringSchedule"' in raw
        assert '"primaryDiagnosis":"Overwatering"' in raw
        assert PlantRecord.model_validate_json(raw) == sample_plant

    def test_retries_with_backoff(self, flaky_store, flaky_repo, recorded_sleep, sample_plant):
        flaky_store.set_failures = 2

        asyncio.run(flaky_repo.save(EMAIL, sample_plant))

        assert flaky_store.set_calls == 3
        assert recorded_sleep.delays == [pytest.approx(0.1), pytest.approx(0.2)]
        assert asyncio.run(flaky_repo.get(EMAIL, sample_plant.id)) == sample_plant

    def test_gives_up_after_three_attempts(self, flaky_store, flaky_repo, sample_plant):
        flaky_store.set_failures = 3

        with pytest.raises(StorageWriteError):
            asyncio.run(flaky_repo.save(EMAIL, sample_plant))

        assert flaky_store.data == {}


class TestList:

    def test_newest_first(self, plant_repo):
        for plant_id in (1700000000001, 1700000000300, 1700000000020):
            asyncio.run(plant_repo.save(EMAIL, make_plant(plant_id=plant_id)))

        ids = [p.id for p in asyncio.run(plant_repo.list_for_user(EMAIL))]
        assert ids == [1700000000300, 1700000000020, 1700000000001]

    def test_only_lists_owner_records(self, plant_repo):
        asyncio.run(plant_repo.save(EMAIL, make_plant(plant_id=1)))
        asyncio.run(plant_repo.save("other@example.com", make_plant(plant_id=2)))

        assert [p.id for p in asyncio.run(plant_repo.list_for_user(EMAIL))] == [1]
        assert asyncio.run(plant_repo.count(EMAIL)) == 1

    def test_drops_corrupt_record(self, plant_repo, store, sample_plant, caplog):
        asyncio.run(plant_repo.save(EMAIL, sample_plant))
        store.data[plant_key(EMAIL, 99)] = '{"id": 99, "name": "trunc'
        store.data[plant_key(EMAIL, 98)] = '{"id": 98}'

        with caplog.at_level(logging.WARNING):
            plants = asyncio.run(plant_repo.list_for_user(EMAIL))

        assert plants == [sample_plant]
        assert any("Dropping unreadable plant record" in r.getMessage() for r in caplog.records)

    def test_drops_record_that_fails_to_load(self, flaky_store, flaky_repo):
        asyncio.run(flaky_repo.save(EMAIL, make_plant(plant_id=1)))
        asyncio.run(flaky_repo.save(EMAIL, make_plant(plant_id=2)))
        flaky_store.broken_gets.add(plant_key(EMAIL, 2))

        assert [p.id for p in asyncio.run(flaky_repo.list_for_user(EMAIL))] == [1]

    def test_get_missing_is_none(self, plant_repo):
        assert asyncio.run(plant_repo.get(EMAIL, 404)) is None


class TestDelete:

    def test_delete_removes_record(self, plant_repo, sample_plant):
        asyncio.run(plant_repo.save(EMAIL, sample_plant))

        assert asyncio.run(plant_repo.delete(EMAIL, sample_plant.id)) is True
        assert asyncio.run(plant_repo.list_for_user(EMAIL)) == []

    def test_delete_failure_returns_false(self, flaky_store, flaky_repo, sample_plant, caplog):
        asyncio.run(flaky_repo.save(EMAIL, sample_plant))
        flaky_store.fail_deletes = True

        with caplog.at_level(logging.ERROR):
            assert asyncio.run(flaky_repo.delete(EMAIL, sample_plant.id)) is False

        assert any("Failed to delete plant record" in r.getMessage() for r in caplog.records)
        assert asyncio.run(flaky_repo.count(EMAIL)) == 1


class TestMutations:

    def test_mark_watered_recomputes_schedule(self, plant_repo, sample_plant):
        asyncio.run(plant_repo.save(EMAIL, sample_plant))
        later = NOW + timedelta(days=3)

        updated = asyncio.run(plant_repo.mark_watered(EMAIL, sample_plant, later))

        # Bright indirect light with the "Slightly moist" assumption: 5 days
        assert updated.watering_schedule.last_watered == later
        assert updated.watering_schedule.next_watering == later + timedelta(days=5)
        assert asyncio.run(plant_repo.get(EMAIL, sample_plant.id)) == updated

    def test_add_photo_appends(self, plant_repo, sample_plant):
        asyncio.run(plant_repo.save(EMAIL, sample_plant))
        photo = ProgressPhoto(image="data:image/jpeg;base64,bmV3", date=NOW, notes="New leaf")

        updated = asyncio.run(plant_repo.add_photo(EMAIL, sample_plant, photo, False))

        assert updated.photo_count == 2
        assert updated.progress_photos[-1].notes == "New leaf"

    def test_add_photo_enforces_free_limit(self, plant_repo):
        plant = make_plant(photos=5)
        asyncio.run(plant_repo.save(EMAIL, plant))
        photo = ProgressPhoto(image="x", date=NOW)

        with pytest.raises(QuotaExceededError) as exc_info:
            asyncio.run(plant_repo.add_photo(EMAIL, plant, photo, False))

        assert exc_info.value.limit == "photos"
        assert asyncio.run(plant_repo.get(EMAIL, plant.id)).photo_count == 5

    def test_premium_photos_unlimited(self, plant_repo):
        plant = make_plant(photos=5)
        asyncio.run(plant_repo.save(EMAIL, plant))

        updated = asyncio.run(plant_repo.add_photo(EMAIL, plant, ProgressPhoto(image="x", date=NOW), True))

        assert updated.photo_count == 6

    def test_concurrent_photo_additions_both_persist(self, plant_repo, sample_plant):
        async def add_two():
            await plant_repo.save(EMAIL, sample_plant)
            first = ProgressPhoto(image="one", date=NOW, notes="first")
            second = ProgressPhoto(image="two", date=NOW, notes="second")
            # Both callers hold the same stale copy of the plant
            await asyncio.gather(
                plant_repo.add_photo(EMAIL, sample_plant, first, False),
                plant_repo.add_photo(EMAIL, sample_plant, second, False),
            )
            return await plant_repo.get(EMAIL, sample_plant.id)

        stored = asyncio.run(add_two())

        assert stored.photo_count == 3
        assert {p.notes for p in stored.progress_photos[1:]} == {"first", "second"}


class TestCount:

    def test_save_stores_record_under_plant_key(self, plant_repo, store, sample_plant):
        asyncio.run(plant_repo.save(EMAIL, sample_plant))

        assert list(store.data) == [plant_key(EMAIL, sample_plant.id)]

    def test_unreadable_records_are_not_counted(self, plant_repo, store):
        asyncio.run(plant_repo.save(EMAIL, make_plant(plant_id=1)))
        asyncio.run(plant_repo.save(EMAIL, make_plant(plant_id=2)))
        store.data[plant_key(EMAIL, 3)] = '{"id": 3, "name": "trunc'

        assert asyncio.run(plant_repo.count(EMAIL)) == 2
        assert asyncio.run(plant_repo.count(EMAIL)) == len(asyncio.run(plant_repo.list_for_user(EMAIL)))
