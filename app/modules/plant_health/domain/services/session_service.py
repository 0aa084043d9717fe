# 📄 File: app/modules/plant_health/domain/services/session_service.py
# 🧭 Purpose (Layman Explanation):
# Handles signing up, logging in and out, remembering who was signed in last time, and
# upgrading an account to premium
# 🧪 Purpose (Technical Summary):
# Session manager over UserRepository. Returns immutable Session values that callers pass
# explicitly; the persisted current-user pointer only backs "remember me" resume
# 🔗 Dependencies:
# UserRepository, app.shared.core.security (passlib), app.shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# Auth API endpoints, presentation dependencies (token resolution), container

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from app.shared.core.exceptions import (
    AlreadyExistsError,
    InvalidCredentialError,
    NotFoundError,
    ValidationError,
)
from app.shared.core.security import get_password_hash, verify_password

from ..models.user import Session, User
from ..repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class SessionManager:
    """
    Domain service for sign-up, login and the current session.

    Business rules:
    - Email and password are required, password at least 4 characters
    - One account per email
    - Logging out keeps the account, only the session pointer is cleared
    - Premium is a one-way flag
    """

    def __init__(
        self,
        user_repository: UserRepository,
        min_password_length: int = 4,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.user_repository = user_repository
        self.min_password_length = min_password_length
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def _validate_credentials(self, email: Optional[str], password: Optional[str]) -> str:
        email = (email or "").strip().lower()
        if not email:
            raise ValidationError("Email is required", field="email", constraint="required")
        if not password:
            raise ValidationError("Password is required", field="password", constraint="required")
        if len(password) < self.min_password_length:
            raise ValidationError(
                f"Password must be at least {self.min_password_length} characters",
                field="password",
                constraint="min_length",
            )
        return email

    async def _establish(self, user: User) -> Session:
        await self.user_repository.set_current(user)
        return Session(user=user, started_at=self.clock())

    async def sign_up(self, email: Optional[str], password: Optional[str]) -> Session:
        """
        Create an account and sign it in.

        Raises:
            ValidationError: Missing email/password or password too short
            AlreadyExistsError: An account with this email exists
            StorageWriteError: The account could not be persisted
        """
        email = self._validate_credentials(email, password)

        if await self.user_repository.get_by_email(email) is not None:
            logger.info(f"Sign-up rejected, account exists: {email}")
            raise AlreadyExistsError(email)

        user = User(
            email=email,
            password_credential=get_password_hash(password),
            is_premium=False,
            created_at=self.clock(),
        )
        await self.user_repository.save(user)
        logger.info(f"User signed up: {email}")
        return await self._establish(user)

    async def log_in(self, email: Optional[str], password: Optional[str]) -> Session:
        """
        Sign in an existing account.

        Raises:
            ValidationError: Missing email/password or password too short
            NotFoundError: No account for this email, sign up instead
            InvalidCredentialError: Password does not match
        """
        email = self._validate_credentials(email, password)

        user = await self.user_repository.get_by_email(email)
        if user is None:
            raise NotFoundError("User not found. Please sign up.", resource_type="user", resource_id=email)

        if not verify_password(password, user.password_credential):
            logger.warning(f"Failed login for {email}")
            raise InvalidCredentialError(email)

        logger.info(f"User logged in: {email}")
        return await self._establish(user)

    async def log_out(self) -> None:
        await self.user_repository.clear_current()
        logger.info("Current session cleared")

    async def current_session(self) -> Optional[Session]:
        """Resume the persisted session, if any."""
        user = await self.user_repository.get_current()
        if user is None:
            return None
        return Session(user=user, started_at=self.clock())

    async def resolve_session(self, email: str) -> Optional[Session]:
        """Build a session for an already authenticated email (bearer token subject)."""
        user = await self.user_repository.get_by_email(email)
        if user is None:
            return None
        return Session(user=user, started_at=self.clock())

    async def upgrade_to_premium(self, session: Session) -> Session:
        """
        Flip the account to premium and return the upgraded session.

        Both the account record and the current-session pointer are rewritten.
        """
        stored = await self.user_repository.get_by_email(session.email)
        user = (stored or session.user).with_premium()

        await self.user_repository.save(user)
        await self.user_repository.set_current(user)
        logger.info(f"User upgraded to premium: {user.email}")
        return Session(user=user, started_at=session.started_at)
