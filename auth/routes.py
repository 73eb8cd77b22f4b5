"""
Auth API routes — register, login, logout, me, check.

Route prefix: /api/auth
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status

from auth.dependencies import get_auth_service, get_current_identity
from auth.errors import FailureKind
from auth.jwt import TokenIdentity
from auth.schemas import AuthResponse, LoginRequest, RegisterRequest
from auth.service import AuthOutcome, AuthService

router = APIRouter(tags=["auth"])

_STATUS_BY_FAILURE = {
    FailureKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    FailureKind.ALREADY_EXISTS: status.HTTP_400_BAD_REQUEST,
    FailureKind.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    FailureKind.NOT_AUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    FailureKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
}


def _respond(outcome: AuthOutcome, response: Response) -> AuthResponse:
    if outcome.failure is not None:
        response.status_code = _STATUS_BY_FAILURE[outcome.failure]
    return outcome.response


# ── Endpoints ──────────────────────────────────────────────────────────


@router.post("/register", response_model=AuthResponse, response_model_exclude_none=True)
async def register(
    req: RegisterRequest,
    response: Response,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Register a new user."""
    return _respond(await service.register(req), response)


@router.post("/login", response_model=AuthResponse, response_model_exclude_none=True)
async def login(
    req: LoginRequest,
    response: Response,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Login with email + password; sets the session cookie."""
    return _respond(await service.login(req, response), response)


@router.post("/logout", response_model=AuthResponse, response_model_exclude_none=True)
async def logout(
    response: Response,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    return _respond(service.logout(response), response)


@router.get("/me", response_model=AuthResponse, response_model_exclude_none=True)
async def me(
    response: Response,
    identity: Optional[TokenIdentity] = Depends(get_current_identity),
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Profile of the authenticated caller."""
    user_id = identity.user_id if identity else None
    return _respond(await service.who_am_i(user_id), response)


@router.get("/check", response_model=AuthResponse, response_model_exclude_none=True)
async def check(
    request: Request,
    response: Response,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Cookie-presence check; does not validate the token."""
    return _respond(service.check(request), response)
