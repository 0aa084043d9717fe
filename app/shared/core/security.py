"""
Security utilities for password credentials and session tokens.
Provides password hashing via passlib and bearer tokens via python-jose.
"""

import logging
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from ..config.settings import get_settings
from .exceptions import AuthenticationError

logger = logging.getLogger(__name__)


@lru_cache()
def get_password_context() -> CryptContext:
    """Password hashing context built from the configured schemes."""
    return CryptContext(schemes=get_settings().password_hash_schemes, deprecated="auto")


def get_password_hash(password: str) -> str:
    """Hash a plain password into a storable credential."""
    return get_password_context().hash(password)


def verify_password(plain_password: str, password_credential: str) -> bool:
    """
    Verify a plain password against a stored credential.

    Returns False for credentials that passlib cannot identify rather than raising.
    """
    try:
        return get_password_context().verify(plain_password, password_credential)
    except (ValueError, TypeError) as e:
        logger.warning(f"Unverifiable password credential: {e}")
        return False


def create_access_token(
    data: Dict[str, Any],
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a signed session token.

    Args:
        data: Token payload data, "sub" should carry the user email
        expires_delta: Custom expiration time

    Returns:
        str: Encoded JWT token
    """
    settings = get_settings()
    to_encode = data.copy()

    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({
        "exp": expire,
        "iat": now,
        "type": "access"
    })

    encoded_jwt = jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    logger.debug(f"Access token created for user: {data.get('sub')}")
    return encoded_jwt


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate a session token.

    Raises:
        AuthenticationError: If the token is invalid, expired or has no subject
    """
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        raise AuthenticationError("Invalid or expired session token") from e

    if payload.get("type") != "access" or not payload.get("sub"):
        raise AuthenticationError("Malformed session token")
    return payload
