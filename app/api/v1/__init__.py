# 📄 File: app/api/v1/__init__.py
# 🧭 Purpose (Layman Explanation):
# Organizes version 1 of our API so new versions can be added later without breaking
# existing apps.
# 🧪 Purpose (Technical Summary):
# Package initialization for API version 1: route prefixes, tags and version metadata.
# 🔗 Dependencies:
# None
# 🔄 Connected Modules / Calls From:
# app.api.v1.router, app.main.py

"""
Plant Health API Version 1

- Authentication and premium upgrade
- Plant collection, watering and recovery photos
- AI diagnosis
"""

from typing import Any, Dict

__version__ = "1.0.0"
__api_version__ = "v1"

ROUTE_PREFIXES = {
    "auth": "/auth",
    "plants": "/plants",
    "diagnoses": "/diagnoses",
}

API_TAGS = [
    {"name": "Authentication", "description": "Sign-up, login and premium upgrade"},
    {"name": "Plants", "description": "Saved plants, watering and recovery photos"},
    {"name": "Diagnoses", "description": "AI plant diagnosis"},
    {"name": "Health Check", "description": "Service status"},
]


def get_api_info() -> Dict[str, Any]:
    return {
        "version": __version__,
        "api_version": __api_version__,
        "route_prefixes": ROUTE_PREFIXES,
    }
