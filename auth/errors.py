"""
Authentication error taxonomy.

Exceptions are raised by the building blocks (store, token issuer, startup
wiring).  ``AuthService`` turns the expected ones into a ``FailureKind`` on
a structured outcome instead of letting them escape to the caller.
"""

from __future__ import annotations

from enum import Enum


class AuthError(Exception):
    """Base class for authentication errors."""


class ConfigurationError(AuthError):
    """Signing material is missing or unusable.  Fatal at startup."""


class DuplicateEmailError(AuthError):
    """A user with the same (case-insensitive) e-mail already exists."""

    def __init__(self, email: str) -> None:
        super().__init__(f"E-mail already registered: {email}")
        self.email = email


class InvalidTokenError(AuthError):
    """Token failed validation.  The reason is deliberately not exposed."""

    def __init__(self) -> None:
        super().__init__("Invalid or expired token")


class FailureKind(str, Enum):
    VALIDATION = "validation"
    ALREADY_EXISTS = "already_exists"
    INVALID_CREDENTIALS = "invalid_credentials"
    NOT_AUTHENTICATED = "not_authenticated"
    NOT_FOUND = "not_found"
