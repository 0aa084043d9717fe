# 📄 File: app/shared/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Marks the 'shared' folder as a Python package containing common tools that every part
# of the Plant Health app can use, like settings, logging and the key-value store.
#
# 🧪 Purpose (Technical Summary):
# Shared kernel package initialization for configuration, infrastructure adapters and
# cross-cutting concerns used by the plant_health module.
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - app.modules.plant_health
# - app.main

"""
Shared Kernel - Common Utilities and Infrastructure

- Configuration management (pydantic-settings, Redis pool)
- Exception hierarchy, security helpers and the storage retry policy
- Key-value store adapters and the external API client
- Structured logging
"""

__all__ = []
