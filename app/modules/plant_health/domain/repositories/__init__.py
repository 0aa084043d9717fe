"""
Plant Health Repository Interfaces

Abstract data access contracts; KV-store implementations live in
app.modules.plant_health.infrastructure.storage.
"""

from .plant_repository import PlantRepository
from .usage_repository import UsageRepository
from .user_repository import UserRepository

__all__ = [
    "PlantRepository",
    "UsageRepository",
    "UserRepository",
]
