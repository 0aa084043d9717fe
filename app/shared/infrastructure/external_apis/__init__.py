"""
External API clients.

Async aiohttp client with status mapping and connection retry, used by the
diagnosis transport.
"""

from .api_client import APIClient, create_api_client

__all__ = [
    "APIClient",
    "create_api_client",
]
