# 📄 File: app/modules/plant_health/domain/repositories/user_repository.py
# 🧭 Purpose (Layman Explanation):
# Defines the contract for how to save and find user accounts and remember who is
# currently signed in, without saying which store actually holds them
# 🧪 Purpose (Technical Summary):
# Repository interface for User records and the persisted current-session pointer
# following the Repository pattern and dependency inversion principle
# 🔗 Dependencies:
# Domain models (User), typing, abc
# 🔄 Connected Modules / Calls From:
# session_service.py, infrastructure KV implementation

from abc import ABC, abstractmethod
from typing import Optional

from ..models.user import User


class UserRepository(ABC):
    """
    Repository interface for User records.

    Implementation Notes:
    - Concrete implementations are in infrastructure layer
    - Methods return domain entities (User), not raw stored values
    - All operations are async for non-blocking I/O
    - Writes go through the store retry policy and raise StorageWriteError
      once it is exhausted
    """

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email address.

        Returns:
            User entity if found, None otherwise
        """

    @abstractmethod
    async def save(self, user: User) -> User:
        """
        Create or overwrite the user record keyed by its email.

        Raises:
            StorageWriteError: If every write attempt failed
        """

    @abstractmethod
    async def get_current(self) -> Optional[User]:
        """
        Read the persisted current-session pointer.

        Returns:
            The User stored in the pointer, None when absent or unreadable
        """

    @abstractmethod
    async def set_current(self, user: User) -> None:
        """Point the current session at user."""

    @abstractmethod
    async def clear_current(self) -> None:
        """Remove the current-session pointer. Idempotent."""
