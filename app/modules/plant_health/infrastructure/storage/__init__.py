"""
Key-value store implementations of the plant health repositories.
"""

from .keys import CURRENT_USER_KEY, plant_key, plant_prefix, usage_key, user_key
from .plant_repository_impl import KVPlantRepository
from .usage_repository_impl import KVUsageRepository
from .user_repository_impl import KVUserRepository

__all__ = [
    "CURRENT_USER_KEY",
    "plant_key",
    "plant_prefix",
    "usage_key",
    "user_key",
    "KVPlantRepository",
    "KVUsageRepository",
    "KVUserRepository",
]
