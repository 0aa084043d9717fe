# 📄 File: app/shared/config/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Contains the settings that tell our Plant Health app how to connect to the store,
# the diagnosis service, and how generous the free plan is.
#
# 🧪 Purpose (Technical Summary):
# Configuration package initialization with exports for settings management
# and Redis connection configuration.
#
# 🔗 Dependencies:
# - settings.py (application settings)
# - redis.py (Redis configuration)
#
# 🔄 Connected Modules / Calls From:
# - app.main (application startup)
# - All modules requiring configuration

"""
Configuration Management Package

Handles all application configuration including:
- Environment-based settings
- Redis connection configuration
- Diagnosis API credentials
- Free tier entitlement limits
"""

from .settings import get_settings, Settings

__all__ = [
    "get_settings",
    "Settings",
]
