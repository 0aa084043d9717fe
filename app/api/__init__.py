# 📄 File: app/api/__init__.py
# 🧭 Purpose (Layman Explanation):
# Marks the api folder as a Python package so the app can find its web endpoints and
# request middleware.
# 🧪 Purpose (Technical Summary):
# Package initialization for the API layer: versioned routers and HTTP middleware.
# 🔗 Dependencies:
# None (package initialization)
# 🔄 Connected Modules / Calls From:
# app.main.py

"""
Plant Health API Package

Structure:
    api/
    ├── middleware/
    │   └── logging.py       # Request logging and id correlation
    └── v1/
        ├── router.py        # Main v1 router
        └── health.py        # Health check endpoint
"""

__version__ = "1.0.0"
__description__ = "Plant Health REST API"
