"""
Cookie-session authentication service — application entry point.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.errors import register_exception_handlers
from api.middleware import register_middleware
from auth.jwt import TokenConfig, TokenIssuer
from auth.password import PasswordHasher
from auth.routes import router as auth_router
from auth.session import CookieSession
from config.settings import Settings, config
from database.session import configure_engine, create_tables, dispose_engine

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("sqlalchemy.engine", "aiosqlite", "asyncio"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    Raises ``ConfigurationError`` when the token signing key, issuer or
    audience is missing, so a misconfigured server never starts.
    """
    settings = settings or config
    logging.getLogger().setLevel(logging.DEBUG if settings.debug else logging.INFO)

    token_issuer = TokenIssuer(TokenConfig.from_settings(settings))
    configure_engine(settings.database_url)

    app = FastAPI(
        title="Authentication Service",
        version="1.0.0",
        description="Registration, login and cookie-based sessions.",
    )
    app.state.settings = settings
    app.state.token_issuer = token_issuer
    app.state.password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    app.state.cookie_session = CookieSession.from_settings(settings)

    # CORS (credentials are required for the session cookie)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)
    register_exception_handlers(app)

    # Routes
    app.include_router(auth_router, prefix="/api/auth")

    @app.get("/health", tags=["meta"])
    async def health():
        return {"status": "ok"}

    @app.on_event("startup")
    async def on_startup():
        if settings.database_create_tables:
            logger.info("Ensuring database tables exist…")
            await create_tables()
        logger.info("Application ready to accept requests.")

    @app.on_event("shutdown")
    async def on_shutdown():
        await dispose_engine()

    return app


if __name__ == "__main__":
    uvicorn.run(
        "main:create_app",
        factory=True,
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
