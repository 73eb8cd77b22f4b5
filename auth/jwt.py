"""
JWT token creation and verification.

Tokens are HS256-signed JWTs carrying ``sub`` (user id), ``email``, a unique
``jti``, ``iat``/``exp`` and the configured ``iss``/``aud``.  They are not
stored server-side, so a token stays valid until it expires.

Signing material comes from ``TokenConfig`` (env vars: ``JWT_SECRET``,
``JWT_ISSUER``, ``JWT_AUDIENCE``).
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from auth.errors import ConfigurationError, InvalidTokenError

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
MIN_KEY_BYTES = 32
DEFAULT_LIFETIME = timedelta(hours=24)
_REQUIRED_CLAIMS = ["sub", "email", "jti", "iat", "exp", "iss", "aud"]


@dataclass(frozen=True)
class TokenConfig:
    signing_key: str
    issuer: str
    audience: str
    lifetime: timedelta = DEFAULT_LIFETIME

    @classmethod
    def from_settings(cls, settings) -> "TokenConfig":
        return cls(
            signing_key=settings.jwt_secret,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            lifetime=timedelta(seconds=settings.jwt_expiry_seconds),
        )


@dataclass(frozen=True)
class IssuedToken:
    token: str
    token_id: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class TokenIdentity:
    user_id: str
    email: str


class TokenIssuer:
    """Issues and validates signed identity tokens."""

    def __init__(self, config: TokenConfig) -> None:
        if not config.signing_key:
            raise ConfigurationError("JWT signing key not configured")
        if not config.issuer:
            raise ConfigurationError("JWT issuer not configured")
        if not config.audience:
            raise ConfigurationError("JWT audience not configured")
        if len(config.signing_key.encode("utf-8")) < MIN_KEY_BYTES:
            raise ConfigurationError(
                f"JWT signing key must be at least {MIN_KEY_BYTES} bytes for {ALGORITHM}"
            )
        if config.lifetime <= timedelta(0):
            raise ConfigurationError("JWT lifetime must be positive")
        self._config = config

    @property
    def lifetime(self) -> timedelta:
        return self._config.lifetime

    def issue(self, user_id: str, email: str, *, now: Optional[datetime] = None) -> IssuedToken:
        """Create a signed token for ``user_id``, valid for the configured lifetime."""
        issued_at = (now or datetime.now(timezone.utc)).replace(microsecond=0)
        expires_at = issued_at + self._config.lifetime
        token_id = str(uuid.uuid4())
        payload = {
            "sub": str(user_id),
            "email": email,
            "jti": token_id,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
            "iss": self._config.issuer,
            "aud": self._config.audience,
        }
        token = jwt.encode(payload, self._config.signing_key, algorithm=ALGORITHM)
        return IssuedToken(
            token=token,
            token_id=token_id,
            issued_at=issued_at,
            expires_at=expires_at,
        )

    def validate(self, token: str) -> TokenIdentity:
        """
        Verify signature, issuer, audience and expiry; return the identity.

        Raises ``InvalidTokenError`` for every kind of failure, so callers
        cannot tell a forged token from an expired one.
        """
        if not token:
            raise InvalidTokenError()
        try:
            payload = jwt.decode(
                token,
                self._config.signing_key,
                algorithms=[ALGORITHM],
                audience=self._config.audience,
                issuer=self._config.issuer,
                options={"require": _REQUIRED_CLAIMS},
            )
        except jwt.PyJWTError as exc:
            logger.debug("Token rejected: %s", exc)
            raise InvalidTokenError() from exc

        user_id = payload.get("sub")
        email = payload.get("email")
        if not isinstance(user_id, str) or not isinstance(email, str):
            logger.debug("Token rejected: malformed identity claims")
            raise InvalidTokenError()
        return TokenIdentity(user_id=user_id, email=email)
