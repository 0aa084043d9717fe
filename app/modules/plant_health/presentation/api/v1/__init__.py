"""
Plant Health API v1 routers.
"""

from .auth import auth_router
from .diagnoses import diagnoses_router
from .plants import plants_router

__all__ = [
    "auth_router",
    "diagnoses_router",
    "plants_router",
]
