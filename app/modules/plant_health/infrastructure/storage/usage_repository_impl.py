# 📄 File: app/modules/plant_health/infrastructure/storage/usage_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Saves and loads each user's monthly diagnosis counter
# 🧪 Purpose (Technical Summary):
# KV-store implementation of UsageRepository over usage:<email>, retrying writes
# 🔗 Dependencies:
# KeyValueStore, RetryPolicy, pydantic, structured logging
# 🔄 Connected Modules / Calls From:
# usage_service.py via app.modules.plant_health.container

from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from app.shared.core.retry import RetryPolicy
from app.shared.infrastructure.storage.kv_store import KeyValueStore
from app.shared.utils.logging import get_logger

from ...domain.models.usage import UsageStats
from ...domain.repositories.usage_repository import UsageRepository
from .keys import usage_key

logger = get_logger(__name__)


class KVUsageRepository(UsageRepository):

    def __init__(self, store: KeyValueStore, retry_policy: RetryPolicy):
        self.store = store
        self.retry_policy = retry_policy

    async def get(self, email: str) -> Optional[UsageStats]:
        key = usage_key(email)
        raw = await self.store.get(key)
        if raw is None:
            return None
        try:
            return UsageStats.model_validate_json(raw)
        except PydanticValidationError:
            logger.warning(f"Unreadable usage record at {key}, treating as empty")
            return None

    async def save(self, email: str, stats: UsageStats) -> UsageStats:
        key = usage_key(email)
        payload = stats.to_json()
        await self.retry_policy.write(key, lambda: self.store.set(key, payload))
        return stats
