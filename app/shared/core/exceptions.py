# 📄 File: app/shared/core/exceptions.py
# 🧭 Purpose (Layman Explanation):
# This file defines all the special error types our Plant Health app uses to communicate
# what went wrong in a clear, organized way instead of generic error messages.
# 🧪 Purpose (Technical Summary):
# Custom exception hierarchy providing specific error types with HTTP status codes,
# error details, and proper serialization for API responses and error handling.
# 🔗 Dependencies:
# FastAPI status constants, typing
# 🔄 Connected Modules / Calls From:
# Domain services, storage adapters, diagnosis client, app.main exception handler

from typing import Any, Dict, Optional
from fastapi import status


class PlantCareException(Exception):
    """
    Base exception class for the Plant Health application.
    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.error_code = error_code or self.__class__.__name__.upper()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format."""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details,
                "status_code": self.status_code
            }
        }


# =============================================================================
# AUTHENTICATION EXCEPTIONS
# =============================================================================

class AuthenticationError(PlantCareException):
    """
    Exception raised for authentication failures.
    Used when user credentials or session tokens are invalid or missing.
    """

    def __init__(
        self,
        message: str = "Authentication failed",
        details: Optional[Dict[str, Any]] = None,
        error_code: str = "AUTHENTICATION_ERROR"
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            details=details,
            error_code=error_code
        )


class InvalidCredentialError(AuthenticationError):
    """Raised when the stored credential does not match the supplied password."""

    def __init__(self, email: Optional[str] = None):
        details = {"email": email} if email else {}
        super().__init__(
            message="Incorrect password",
            details=details,
            error_code="INVALID_CREDENTIAL"
        )


# =============================================================================
# VALIDATION & DATA EXCEPTIONS
# =============================================================================

class ValidationError(PlantCareException):
    """
    Exception raised for data validation failures.
    Used when input data doesn't meet validation requirements.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        constraint: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if field:
            details["field"] = field
        if constraint:
            details["constraint"] = constraint

        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details,
            error_code="VALIDATION_ERROR"
        )


class NotFoundError(PlantCareException):
    """
    Exception raised when requested resource is not found.
    Used for unknown users at login and missing plant records.
    """

    def __init__(
        self,
        message: str = "Resource not found",
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if resource_type:
            details["resource_type"] = resource_type
        if resource_id:
            details["resource_id"] = resource_id

        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details=details,
            error_code="NOT_FOUND"
        )


class DuplicateResourceError(PlantCareException):
    """
    Exception raised when attempting to create duplicate resources.
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        resource_type: Optional[str] = None,
        field: Optional[str] = None,
        value: Optional[str] = None,
        error_code: str = "DUPLICATE_RESOURCE"
    ):
        details = {}
        if resource_type:
            details["resource_type"] = resource_type
        if field:
            details["field"] = field
        if value:
            details["value"] = value

        super().__init__(
            message=message,
            status_code=status.HTTP_409_CONFLICT,
            details=details,
            error_code=error_code
        )


class AlreadyExistsError(DuplicateResourceError):
    """Raised on signup when a user record for the email is already present."""

    def __init__(self, email: str):
        super().__init__(
            message="User exists. Please login.",
            resource_type="user",
            field="email",
            value=email,
            error_code="ALREADY_EXISTS"
        )


# =============================================================================
# ENTITLEMENT EXCEPTIONS
# =============================================================================

class SubscriptionError(PlantCareException):
    """
    Exception raised for subscription-related failures.
    Used when a gated feature requires the premium tier.
    """

    def __init__(
        self,
        message: str = "Subscription required",
        feature: Optional[str] = None,
        required_plan: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        error_code: str = "SUBSCRIPTION_ERROR"
    ):
        if not details:
            details = {}

        if feature:
            details["feature"] = feature
        if required_plan:
            details["required_plan"] = required_plan

        super().__init__(
            message=message,
            status_code=status.HTTP_402_PAYMENT_REQUIRED,
            details=details,
            error_code=error_code
        )


class QuotaExceededError(SubscriptionError):
    """
    Raised when a free tier limit blocks a gated action.

    Carries the limit that was hit so callers can show an upgrade prompt.
    """

    def __init__(self, limit: str, current: int, maximum: int):
        self.limit = limit
        self.current = current
        self.maximum = maximum
        super().__init__(
            message=f"Free plan limit reached for {limit} ({current}/{maximum})",
            feature=limit,
            required_plan="premium",
            details={"limit": limit, "current": current, "maximum": maximum},
            error_code="QUOTA_EXCEEDED"
        )


# =============================================================================
# EXTERNAL SERVICE EXCEPTIONS
# =============================================================================

class ExternalAPIError(PlantCareException):
    """
    Exception raised when external API calls fail.
    """

    def __init__(
        self,
        message: str = "External API error",
        api_name: Optional[str] = None,
        status_code_received: Optional[int] = None,
        error_code: str = "EXTERNAL_API_ERROR"
    ):
        details = {}
        if api_name:
            details["api_name"] = api_name
        if status_code_received is not None:
            details["status_code_received"] = status_code_received

        super().__init__(
            message=message,
            status_code=status.HTTP_502_BAD_GATEWAY,
            details=details,
            error_code=error_code
        )


class TransportError(ExternalAPIError):
    """Non-success transport or HTTP status from the diagnosis API."""

    def __init__(
        self,
        message: str,
        api_name: Optional[str] = None,
        status_code_received: Optional[int] = None
    ):
        super().__init__(
            message=message,
            api_name=api_name,
            status_code_received=status_code_received,
            error_code="TRANSPORT_ERROR"
        )


class MalformedResponseError(ExternalAPIError):
    """Diagnosis API answered, but the payload is not a conforming diagnosis."""

    def __init__(self, message: str, api_name: Optional[str] = None):
        super().__init__(
            message=message,
            api_name=api_name,
            error_code="MALFORMED_RESPONSE"
        )


# =============================================================================
# STORAGE EXCEPTIONS
# =============================================================================

class StorageError(PlantCareException):
    """
    Exception raised when the key-value store is unavailable.
    Transient; writes are retried by the store retry policy.
    """

    def __init__(
        self,
        message: str = "Storage operation failed",
        key: Optional[str] = None,
        operation: Optional[str] = None,
        error_code: str = "STORAGE_ERROR"
    ):
        details = {}
        if key:
            details["key"] = key
        if operation:
            details["operation"] = operation

        super().__init__(
            message=message,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details=details,
            error_code=error_code
        )


class StorageWriteError(StorageError):
    """Raised once every attempt of a store write has failed."""

    def __init__(self, key: str, attempts: int, cause: Optional[BaseException] = None):
        self.attempts = attempts
        self.cause = cause
        reason = f": {cause}" if cause else ""
        super().__init__(
            message=f"Could not save {key} after {attempts} attempts{reason}",
            key=key,
            operation="set",
            error_code="STORAGE_WRITE_FAILURE"
        )
        self.details["attempts"] = attempts


def is_client_error(exception: Exception) -> bool:
    """
    Check if exception represents a client error (4xx).

    Args:
        exception: Exception to check

    Returns:
        True if client error, False otherwise
    """
    if isinstance(exception, PlantCareException):
        return 400 <= exception.status_code < 500
    return False
