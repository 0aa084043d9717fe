# 📄 File: app/modules/plant_health/infrastructure/__init__.py
# 🧭 Purpose (Layman Explanation):
# Sets up the layer that actually stores users, plants and usage counters, and talks to
# the AI diagnosis service.
#
# 🧪 Purpose (Technical Summary):
# Infrastructure layer initialization: key-value repository implementations and the
# Anthropic diagnosis transport.
#
# 🔗 Dependencies:
# - app.modules.plant_health.domain.repositories (repository interfaces)
# - app.shared.infrastructure (KV store, API client)
#
# 🔄 Connected Modules / Calls From:
# - app.modules.plant_health.container

"""
Plant Health Infrastructure Layer

- Storage: KV-store repositories for users, usage and plants
- External: Anthropic Messages API diagnosis transport
"""
