# 📄 File: app/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Tells Python this 'app' folder holds the Plant Health application code and records its
# version and package information.
#
# 🧪 Purpose (Technical Summary):
# Application package initialization with version metadata for the Plant Health
# FastAPI service.
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - main.py (application entry point)
# - pyproject.toml (dynamic metadata)

"""
Plant Health Engine - AI-Assisted Plant Diagnosis and Care Tracking

Backend API for diagnosing sick plants from a photo and questionnaire,
keeping a collection of recovering plants, and scheduling their watering.
"""

__version__ = "1.0.0"
__title__ = "Plant Health Engine"
__description__ = "AI-assisted plant diagnosis and care tracking"
__license__ = "MIT"

__all__ = [
    "__version__",
    "__title__",
    "__description__",
    "__license__",
]
