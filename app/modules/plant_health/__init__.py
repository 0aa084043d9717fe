# 📄 File: app/modules/plant_health/__init__.py
# 🧭 Purpose (Layman Explanation):
# Organizes the plant doctor features: accounts, diagnosing sick plants from a photo,
# tracking recovering plants and reminding users when to water them
# 🧪 Purpose (Technical Summary):
# Package initialization for the plant health module, laid out in domain, infrastructure
# and presentation layers around a key-value store
# 🔗 Dependencies:
# FastAPI, pydantic, redis, aiohttp, tenacity, passlib, python-jose
# 🔄 Connected Modules / Calls From:
# app.main, API v1 router

"""
Plant Health Module

- Session management (sign-up, login, premium upgrade)
- Monthly diagnosis quota and free tier entitlements
- AI diagnosis with a low-confidence fallback on any failure
- Plant records with recovery photos and watering schedules

Architecture:
- Domain: models, repository interfaces and services
- Infrastructure: key-value repositories and the diagnosis API transport
- Presentation: API endpoints, request/response schemas and dependencies
"""

__version__ = "1.0.0"
__module_name__ = "plant_health"
__description__ = "Plant Health Diagnosis and Care Module"

__all__ = [
    "__version__",
    "__module_name__",
    "__description__",
]
