"""
Core utilities package for the Plant Health application.
Provides the exception hierarchy, security helpers and the storage retry policy.
"""

from .exceptions import (
    PlantCareException,
    AuthenticationError,
    InvalidCredentialError,
    ValidationError,
    NotFoundError,
    DuplicateResourceError,
    AlreadyExistsError,
    SubscriptionError,
    QuotaExceededError,
    ExternalAPIError,
    TransportError,
    MalformedResponseError,
    StorageError,
    StorageWriteError,
    is_client_error,
)

from .security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)

from .retry import RetryPolicy

__all__ = [
    # Exceptions
    "PlantCareException",
    "AuthenticationError",
    "InvalidCredentialError",
    "ValidationError",
    "NotFoundError",
    "DuplicateResourceError",
    "AlreadyExistsError",
    "SubscriptionError",
    "QuotaExceededError",
    "ExternalAPIError",
    "TransportError",
    "MalformedResponseError",
    "StorageError",
    "StorageWriteError",
    "is_client_error",

    # Security
    "create_access_token",
    "decode_access_token",
    "get_password_hash",
    "verify_password",

    # Retry
    "RetryPolicy",
]
