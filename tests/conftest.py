"""Shared fixtures: isolated SQLite database, fast bcrypt, test signing key."""

from datetime import date

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from auth.jwt import TokenConfig, TokenIssuer
from auth.password import PasswordHasher
from auth.schemas import RegisterRequest
from auth.service import AuthService
from auth.session import CookieSession
from auth.store import UserStore
from config.settings import Settings
from database.models import Base
from database.session import build_engine

SIGNING_KEY = "test-signing-key-with-at-least-32-bytes!"
ISSUER = "auth-service-tests"
AUDIENCE = "auth-service-tests-client"


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        jwt_secret=SIGNING_KEY,
        jwt_issuer=ISSUER,
        jwt_audience=AUDIENCE,
        bcrypt_rounds=4,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'auth.db'}",
        cors_origins=["http://localhost:3000"],
    )


@pytest.fixture()
def token_issuer() -> TokenIssuer:
    return TokenIssuer(TokenConfig(signing_key=SIGNING_KEY, issuer=ISSUER, audience=AUDIENCE))


@pytest.fixture()
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest_asyncio.fixture()
async def db_session(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
    await engine.dispose()


@pytest.fixture()
def store(db_session) -> UserStore:
    return UserStore(db_session)


@pytest.fixture()
def service(store, hasher, token_issuer) -> AuthService:
    return AuthService(store, hasher, token_issuer, CookieSession())


def make_register_request(**overrides) -> RegisterRequest:
    """The sample registration used throughout the suite."""
    data = dict(
        email="a@b.com",
        password="secret1",
        first_name="A",
        last_name="B",
        date_of_birth=date(2000, 1, 1),
    )
    data.update(overrides)
    return RegisterRequest(**data)
