"""User-related Pydantic schemas."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tuiter_stage.core.security import REDACTED_PASSWORD
from tuiter_stage.models.user import Role


class Credentials(BaseModel):
    """Username/password pair submitted to login and register.

    Both fields are optional at the schema level so a missing value surfaces as
    ``InvalidInputError`` rather than a validation failure.
    """

    username: str | None = None
    password: str | None = None
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None


class UserCreate(BaseModel):
    """Schema used by admins to create accounts directly."""

    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1)
    role: Role = Role.REGULAR
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    biography: str | None = None


class _Redacted(BaseModel):
    """Base for outward-facing user views; the password digest never leaves."""

    password: str = REDACTED_PASSWORD

    @field_validator("password", mode="before")
    @classmethod
    def _redact_password(cls, value: Any) -> str:
        return REDACTED_PASSWORD


class PrincipalSnapshot(_Redacted):
    """Copy of a user taken at login/registration and stored in the session."""

    id: str
    username: str
    role: Role = Role.REGULAR
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_photo: str | None = None
    header_image: str | None = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class UserResponse(_Redacted):
    """Public view of a user account."""

    id: str
    username: str
    role: Role
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    biography: str | None = None
    date_of_birth: datetime | None = None
    account_type: str
    marital_status: str
    latitude: float | None = None
    longitude: float | None = None
    profile_photo: str | None = None
    header_image: str | None = None
    joined: datetime

    model_config = ConfigDict(from_attributes=True)


class UserUpdate(BaseModel):
    """Partial profile update; only fields present in the request are applied."""

    username: str | None = Field(None, min_length=1, max_length=64)
    role: Role | None = None
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    biography: str | None = None
    date_of_birth: datetime | None = None
    account_type: Literal["PERSONAL", "ACADEMIC", "PROFESSIONAL"] | None = None
    marital_status: Literal["MARRIED", "SINGLE", "WIDOWED"] | None = None
    latitude: float | None = None
    longitude: float | None = None
    profile_photo: str | None = None
    header_image: str | None = None
