# 📄 File: app/modules/plant_health/infrastructure/storage/user_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Saves user accounts and the "who is signed in" pointer in the key-value store
# 🧪 Purpose (Technical Summary):
# KV-store implementation of UserRepository; user:<email> and current-user hold the
# camelCase JSON of the User, writes go through the shared RetryPolicy
# 🔗 Dependencies:
# KeyValueStore, RetryPolicy, pydantic, structured logging
# 🔄 Connected Modules / Calls From:
# session_service.py via app.modules.plant_health.container

from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from app.shared.core.retry import RetryPolicy
from app.shared.infrastructure.storage.kv_store import KeyValueStore
from app.shared.utils.logging import get_logger

from ...domain.models.user import User
from ...domain.repositories.user_repository import UserRepository
from .keys import CURRENT_USER_KEY, user_key

logger = get_logger(__name__)


class KVUserRepository(UserRepository):
    """UserRepository backed by the key-value store."""

    def __init__(self, store: KeyValueStore, retry_policy: RetryPolicy):
        self.store = store
        self.retry_policy = retry_policy

    async def _load(self, key: str) -> Optional[User]:
        raw = await self.store.get(key)
        if raw is None:
            return None
        try:
            return User.model_validate_json(raw)
        except PydanticValidationError as e:
            logger.warning(f"Unreadable user record at {key}", extra={"errors": e.error_count()})
            return None

    async def _write(self, key: str, user: User) -> None:
        payload = user.to_json()
        await self.retry_policy.write(key, lambda: self.store.set(key, payload))

    async def get_by_email(self, email: str) -> Optional[User]:
        return await self._load(user_key(email))

    async def save(self, user: User) -> User:
        await self._write(user_key(user.email), user)
        return user

    async def get_current(self) -> Optional[User]:
        return await self._load(CURRENT_USER_KEY)

    async def set_current(self, user: User) -> None:
        await self._write(CURRENT_USER_KEY, user)

    async def clear_current(self) -> None:
        await self.store.delete(CURRENT_USER_KEY)
