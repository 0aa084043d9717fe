"""
Store Retry Policy Tests
========================
Exponential backoff for key-value store writes.
"""

import asyncio

import pytest

from app.shared.core.exceptions import StorageError, StorageWriteError
from app.shared.core.retry import RetryPolicy

from .conftest import FlakyStore


def test_delay_schedule():
    policy = RetryPolicy()

    assert policy.delay_for(1) == pytest.approx(0.1)
    assert policy.delay_for(2) == pytest.approx(0.2)


def test_first_attempt_success_does_not_sleep(retry_policy, recorded_sleep, store):
    asyncio.run(retry_policy.write("k", lambda: store.set("k", "v")))

    assert store.data == {"k": "v"}
    assert recorded_sleep.delays == []


@pytest.mark.parametrize("fail_mode", ["raise", "reject"])
def test_succeeds_on_third_attempt(retry_policy, recorded_sleep, fail_mode):
    store = FlakyStore(set_failures=2, fail_mode=fail_mode)

    asyncio.run(retry_policy.write("k", lambda: store.set("k", "v")))

    assert store.set_calls == 3
    assert store.data == {"k": "v"}
    assert recorded_sleep.delays == [pytest.approx(0.1), pytest.approx(0.2)]


def test_exhaustion_raises_storage_write_error(retry_policy, recorded_sleep):
    store = FlakyStore(set_failures=5)

    with pytest.raises(StorageWriteError) as exc_info:
        asyncio.run(retry_policy.write("plant:a@b.com:1", lambda: store.set("plant:a@b.com:1", "v")))

    assert store.set_calls == 3
    assert store.data == {}
    assert exc_info.value.attempts == 3
    assert exc_info.value.details["key"] == "plant:a@b.com:1"
    assert isinstance(exc_info.value.cause, StorageError)
    assert len(recorded_sleep.delays) == 2


def test_rejected_writes_exhaust_without_cause(retry_policy):
    store = FlakyStore(set_failures=3, fail_mode="reject")

    with pytest.raises(StorageWriteError) as exc_info:
        asyncio.run(retry_policy.write("k", lambda: store.set("k", "v")))

    assert exc_info.value.cause is None


def test_unexpected_errors_are_not_retried(retry_policy, recorded_sleep):
    calls = []

    async def broken() -> bool:
        calls.append(1)
        raise KeyError("boom")

    with pytest.raises(KeyError):
        asyncio.run(retry_policy.write("k", broken))

    assert len(calls) == 1
    assert recorded_sleep.delays == []


def test_from_settings(test_settings, recorded_sleep):
    policy = RetryPolicy.from_settings(test_settings, sleep=recorded_sleep)

    assert policy.max_attempts == 3
    assert policy.delay_for(2) == pytest.approx(0.2)
    assert policy.sleep is recorded_sleep


def test_rejects_zero_attempts():
    with pytest.raises(ValueError):
        RetryPolicy(max_attempts=0)


def test_plain_callable_write_reaches_store(retry_policy, store):
    asyncio.run(retry_policy.write("usage:a@b.com", lambda: store.set("usage:a@b.com", "{}")))

    assert store.data == {"usage:a@b.com": "{}"}


def test_rejected_then_accepted_write_is_stored(retry_policy, recorded_sleep):
    store = FlakyStore(set_failures=1, fail_mode="reject")

    asyncio.run(retry_policy.write("k", lambda: store.set("k", "v")))

    assert store.data == {"k": "v"}
    assert store.set_calls == 2
    assert recorded_sleep.delays == [pytest.approx(0.1)]
