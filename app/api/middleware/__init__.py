"""
HTTP middleware for the Plant Health API.
"""

from .logging import RequestLoggingMiddleware

__all__ = ["RequestLoggingMiddleware"]
