"""
FastAPI dependencies for authentication.

Provides ``db_session``, ``get_auth_service`` and ``get_current_identity``.
The token issuer, password hasher and cookie settings are built once by
``create_app`` and read from ``app.state``.
"""

from __future__ import annotations

from typing import AsyncGenerator, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from auth.jwt import TokenIdentity
from auth.service import AuthService
from auth.store import UserStore
from database.session import get_db_session

_bearer_scheme = HTTPBearer(auto_error=False)


async def db_session(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a DB session for route handlers."""
    yield session


def get_auth_service(
    request: Request,
    session: AsyncSession = Depends(db_session),
) -> AuthService:
    state = request.app.state
    return AuthService(
        store=UserStore(session),
        hasher=state.password_hasher,
        issuer=state.token_issuer,
        cookies=state.cookie_session,
    )


def get_current_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    service: AuthService = Depends(get_auth_service),
) -> Optional[TokenIdentity]:
    """
    Resolve the caller from the session cookie, falling back to an
    ``Authorization: Bearer`` header when the cookie is missing or does not
    validate.  ``None`` means anonymous or invalid.
    """
    identity = service.identify(service.cookies.extract(request))
    if identity is None and credentials is not None:
        identity = service.identify(credentials.credentials)
    return identity
