# 📄 File: app/modules/plant_health/domain/models/user.py
# 🧭 Purpose (Layman Explanation):
# Defines what a "user" is in our plant health app - their email, password credential
# and whether they have upgraded to premium - plus the signed-in session built around them.
# 🧪 Purpose (Technical Summary):
# Domain models for User and Session. User serializes to the flat camelCase JSON stored
# under user:<email> and current-user; Session is the immutable value passed explicitly
# to every operation that needs to know who is authenticated.
# 🔗 Dependencies:
# pydantic, datetime
# 🔄 Connected Modules / Calls From:
# session_service.py, user repository, plant_care_service.py, presentation dependencies

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model for records persisted as flat camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class User(CamelModel):
    """
    Plant Health application user.

    The email is the unique key. Apart from creation, the record is only
    ever mutated to flip ``is_premium``.
    """

    email: str
    password_credential: str
    is_premium: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v: str) -> str:
        email = v.strip().lower()
        if not email:
            raise ValueError('Email is required')
        return email

    def with_premium(self) -> "User":
        return self.model_copy(update={"is_premium": True})


class Session(BaseModel):
    """
    Authenticated session.

    Frozen so a stale copy can never be upgraded in place; upgrading
    produces a new Session.
    """

    model_config = ConfigDict(frozen=True)

    user: User
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def email(self) -> str:
        return self.user.email

    @property
    def is_premium(self) -> bool:
        return self.user.is_premium
