"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator, Callable
from pathlib import Path

# Disable rate limiting and provide cipher secrets before settings load
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.setdefault("AES_KEY", "0123456789abcdef")
os.environ.setdefault("AES_IV", "fedcba9876543210")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.services.cooldown_tracker import CooldownTracker
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.crypto.aes_codec import AESMessageCodec
from infrastructure.database.models import Base
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

# Test database URL (SQLite in memory, one shared connection per engine)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_KEY = b"0123456789abcdef"
TEST_IV = b"fedcba9876543210"


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database with all tables."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
def uow_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], SQLAlchemyUnitOfWork]:
    """Create a UoW factory bound to the test database."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    return factory


@pytest.fixture
def codec() -> AESMessageCodec:
    """Create the message codec with fixed test secrets."""
    return AESMessageCodec(key=TEST_KEY, iv=TEST_IV)


@pytest.fixture
def owner() -> TokenUser:
    """The user who creates groups in API tests."""
    return TokenUser(id="user-alice", email="alice@example.com", display_name="Alice")


@pytest.fixture
def other_user() -> TokenUser:
    """A second user who joins groups in API tests."""
    return TokenUser(id="user-bob", email="bob@example.com", display_name="Bob")


@pytest.fixture
def third_user() -> TokenUser:
    """A third user, used for capacity tests."""
    return TokenUser(id="user-carol", email="carol@example.com")


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key="test-secret-key",
        algorithm="HS256",
        expire_minutes=30,
    )


@pytest.fixture
def headers_for(auth_provider: JWTAuthProvider) -> Callable[[TokenUser], dict[str, str]]:
    """Build Authorization headers for any test user."""

    def build(user: TokenUser) -> dict[str, str]:
        return {"Authorization": f"Bearer {auth_provider.create_token(user)}"}

    return build


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no auth, no database overrides)."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def api_client(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork],
    auth_provider: JWTAuthProvider,
    codec: AESMessageCodec,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create test client wired to the in-memory database.

    This client:
    - Verifies real bearer tokens signed with the test secret
    - Uses fresh group/message services and a fresh cooldown tracker
    - Sends no Authorization header by default (use ``headers_for``)
    """
    from api.dependencies.auth import get_auth_provider
    from api.v1.dependencies import get_group_service, get_message_service
    from domain.services.group_service import GroupService
    from domain.services.message_service import MessageService
    from main import create_app

    app = create_app()

    group_service = GroupService(uow_factory, cooldowns=CooldownTracker())
    message_service = MessageService(uow_factory, codec=codec)

    app.dependency_overrides[get_auth_provider] = lambda: auth_provider
    app.dependency_overrides[get_group_service] = lambda: group_service
    app.dependency_overrides[get_message_service] = lambda: message_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
