"""
Infrastructure layer package for the Plant Health application.
Provides the key-value store adapters and the external API client.
"""

__all__ = []
