"""
Authentication service — register, login, who-am-i, session check, logout.

Composes ``UserStore``, ``PasswordHasher``, ``TokenIssuer`` and
``CookieSession``.  Expected failures come back as an ``AuthOutcome`` with a
``FailureKind``; only storage errors propagate.

``check_session`` and ``who_am_i`` give different guarantees on purpose:
``check_session`` only reports whether a session cookie is present (cheap
liveness check), while ``who_am_i`` validates the token and loads the user.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Request, Response
from starlette.concurrency import run_in_threadpool

from auth.errors import DuplicateEmailError, FailureKind, InvalidTokenError
from auth.jwt import TokenIdentity, TokenIssuer
from auth.password import PasswordHasher
from auth.schemas import AuthResponse, LoginRequest, RegisterRequest, UserInfo
from auth.session import CookieSession
from auth.store import UserStore

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"
INVALID_CREDENTIALS_ERRORS = ["Invalid credentials"]


@dataclass
class AuthOutcome:
    response: AuthResponse
    failure: Optional[FailureKind] = None


def _ok(message: str, user: Optional[UserInfo] = None) -> AuthOutcome:
    return AuthOutcome(AuthResponse(success=True, message=message, user=user))


def _fail(kind: FailureKind, message: str, errors: Optional[list] = None) -> AuthOutcome:
    return AuthOutcome(
        AuthResponse(success=False, message=message, errors=errors),
        failure=kind,
    )


class AuthService:
    def __init__(
        self,
        store: UserStore,
        hasher: PasswordHasher,
        issuer: TokenIssuer,
        cookies: CookieSession,
    ) -> None:
        self.store = store
        self.hasher = hasher
        self.issuer = issuer
        self.cookies = cookies

    async def register(self, req: RegisterRequest) -> AuthOutcome:
        """Create a user account.  Fails with ``ALREADY_EXISTS`` for a taken e-mail."""
        if await self.store.find_by_email(req.email) is not None:
            return self._already_exists()

        password_hash = await run_in_threadpool(self.hasher.hash, req.password)
        try:
            user = await self.store.create(
                req.email,
                password_hash,
                first_name=req.first_name,
                last_name=req.last_name,
                date_of_birth=req.date_of_birth,
            )
        except DuplicateEmailError:
            # lost a race against a concurrent registration
            return self._already_exists()

        logger.info("Registered user %s", user.id)
        return _ok("User registered successfully", UserInfo.from_user(user))

    async def login(self, req: LoginRequest, response: Response) -> AuthOutcome:
        """
        Verify credentials and set the session cookie on ``response``.

        Unknown e-mail and wrong password produce the same outcome.
        """
        user = await self.store.find_by_email(req.email)
        if user is None:
            await run_in_threadpool(self.hasher.dummy_verify, req.password)
            verified = False
        else:
            verified = await run_in_threadpool(
                self.hasher.verify, req.password, user.password_hash
            )

        if not verified:
            logger.warning("Failed login attempt")
            return _fail(
                FailureKind.INVALID_CREDENTIALS,
                INVALID_CREDENTIALS_MESSAGE,
                list(INVALID_CREDENTIALS_ERRORS),
            )

        issued = self.issuer.issue(str(user.id), user.email)
        self.cookies.attach(response, issued)
        logger.info("Login: %s (token %s)", user.id, issued.token_id)
        return _ok("Login successful", UserInfo.from_user(user))

    async def who_am_i(self, user_id: Optional[str]) -> AuthOutcome:
        """Load the profile of an already-authenticated caller."""
        if not user_id:
            return _fail(FailureKind.NOT_AUTHENTICATED, "User not authenticated")

        user = await self.store.find_by_id(user_id)
        if user is None:
            return _fail(FailureKind.NOT_FOUND, "User not found")
        return _ok("User info retrieved successfully", UserInfo.from_user(user))

    def identify(self, token: Optional[str]) -> Optional[TokenIdentity]:
        """Validate ``token``; ``None`` when it is missing or invalid."""
        if not token:
            return None
        try:
            return self.issuer.validate(token)
        except InvalidTokenError:
            return None

    def check_session(self, request: Request) -> bool:
        """``True`` iff a session cookie is present.  Does not validate it."""
        return self.cookies.extract(request) is not None

    def check(self, request: Request) -> AuthOutcome:
        if self.check_session(request):
            return _ok("Authenticated")
        return AuthOutcome(AuthResponse(success=False, message="Not authenticated"))

    def logout(self, response: Response) -> AuthOutcome:
        """Clear the session cookie.  Idempotent."""
        self.cookies.clear(response)
        return _ok("Logged out successfully")

    @staticmethod
    def _already_exists() -> AuthOutcome:
        return _fail(
            FailureKind.ALREADY_EXISTS,
            "User already exists",
            ["A user with this email already exists"],
        )
