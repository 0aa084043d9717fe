# 📄 File: app/shared/utils/__init__.py

# 🧭 Purpose (Layman Explanation):
# Sets up the shared helper tools, mainly the structured logging every part of the app
# writes through.

# 🧪 Purpose (Technical Summary):
# Initializes the utilities package and re-exports the structured logging helpers.

# 🔗 Dependencies:
# - logging: Structured logging utilities (python-json-logger)

# 🔄 Connected Modules / Calls From:
# Used by: app.main, infrastructure adapters and repositories

"""
Shared Utilities Package

Structured logging with JSON formatting and request context binding.
"""

from .logging import (
    StructuredLogger,
    get_logger,
    log_context,
    log_shutdown_event,
    log_startup_event,
    setup_logging,
)

__all__ = [
    "StructuredLogger",
    "get_logger",
    "log_context",
    "log_shutdown_event",
    "log_startup_event",
    "setup_logging",
]
