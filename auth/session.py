"""
Session cookie handling.

The signed token travels in an HTTP-only, ``SameSite=Lax`` cookie whose
expiry mirrors the token's.  The ``Secure`` flag is a deployment setting.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from fastapi import Request, Response

from auth.jwt import IssuedToken

COOKIE_NAME = "auth-token"
COOKIE_PATH = "/"
SAMESITE = "lax"


class CookieSession:
    def __init__(
        self,
        cookie_name: str = COOKIE_NAME,
        *,
        secure: bool = False,
        domain: Optional[str] = None,
    ) -> None:
        self.cookie_name = cookie_name
        self.secure = secure
        self.domain = domain

    @classmethod
    def from_settings(cls, settings) -> "CookieSession":
        return cls(
            settings.auth_cookie_name,
            secure=settings.auth_cookie_secure,
            domain=settings.auth_cookie_domain,
        )

    def attach(self, response: Response, issued: IssuedToken) -> None:
        """Store ``issued.token`` in the session cookie."""
        remaining = issued.expires_at - datetime.now(timezone.utc)
        response.set_cookie(
            key=self.cookie_name,
            value=issued.token,
            max_age=max(int(remaining.total_seconds()), 0),
            expires=issued.expires_at,
            path=COOKIE_PATH,
            domain=self.domain,
            secure=self.secure,
            httponly=True,
            samesite=SAMESITE,
        )

    def extract(self, request: Request) -> Optional[str]:
        """Return the raw token, or ``None`` for an anonymous caller."""
        token = request.cookies.get(self.cookie_name)
        return token or None

    def clear(self, response: Response) -> None:
        response.delete_cookie(
            key=self.cookie_name,
            path=COOKIE_PATH,
            domain=self.domain,
            secure=self.secure,
            httponly=True,
            samesite=SAMESITE,
        )
