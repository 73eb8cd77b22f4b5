"""
Request / response schemas for the auth API.

JSON on the wire is camelCase (``firstName``, ``dateOfBirth`` …); Python
code uses the snake_case field names.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Annotated, List, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from auth.password import MAX_PASSWORD_BYTES

Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _password_fits_bcrypt(value: str) -> str:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


# ── Requests ───────────────────────────────────────────────────────────


class RegisterRequest(_CamelModel):
    email: EmailStr
    password: Annotated[str, Field(min_length=6, max_length=128), AfterValidator(_password_fits_bcrypt)]
    confirm_password: Optional[str] = None
    first_name: Name
    last_name: Name
    date_of_birth: date

    @field_validator("date_of_birth")
    @classmethod
    def _not_in_future(cls, value: date) -> date:
        if value > date.today():
            raise ValueError("Date of birth cannot be in the future")
        return value

    @model_validator(mode="after")
    def _passwords_match(self) -> "RegisterRequest":
        if self.confirm_password is not None and self.confirm_password != self.password:
            raise ValueError("Passwords do not match")
        return self


class LoginRequest(_CamelModel):
    email: EmailStr
    password: Annotated[str, Field(min_length=1, max_length=128), AfterValidator(_password_fits_bcrypt)]


# ── Responses ──────────────────────────────────────────────────────────


def _as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; stored values are always UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class UserInfo(_CamelModel):
    id: str
    email: str
    first_name: str
    last_name: str
    date_of_birth: date
    created_at: datetime

    @classmethod
    def from_user(cls, user) -> "UserInfo":
        """Public view of a ``User`` row (never includes the password hash)."""
        return cls(
            id=str(user.id),
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            date_of_birth=user.date_of_birth,
            created_at=_as_utc(user.created_at),
        )


class AuthResponse(_CamelModel):
    success: bool
    message: str
    user: Optional[UserInfo] = None
    errors: Optional[List[str]] = None

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
