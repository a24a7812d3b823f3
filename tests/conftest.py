"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from uuid import UUID, uuid4

os.environ.setdefault("APP_ENV", "test")

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.entities.profile import InteractionKind
from domain.services.session import SessionRegistry, ViewOptions
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.cache.memory_backend import InMemoryCacheBackend
from infrastructure.database.models import Base
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

# Fixed test user ID for consistency
TEST_USER_ID = uuid4()

SITE_URL = "https://feelability.test"

# Keep animations short in tests
FAST_DURATIONS = {kind: 0.01 for kind in InteractionKind}


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """File-backed SQLite so concurrent units of work get their own connections."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'feelability.db'}")
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
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def uow_factory_for(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[UUID | None], Callable[[], SQLAlchemyUnitOfWork]]:
    """Build viewer-bound Unit of Work factories on the test database."""

    def provider(viewer_id: UUID | None) -> Callable[[], SQLAlchemyUnitOfWork]:
        return lambda: SQLAlchemyUnitOfWork(session_factory, viewer_id)

    return provider


@pytest.fixture
def cache_backend() -> InMemoryCacheBackend:
    return InMemoryCacheBackend()


@pytest.fixture
def registry(
    uow_factory_for: Callable[[UUID | None], Callable[[], SQLAlchemyUnitOfWork]],
    cache_backend: InMemoryCacheBackend,
) -> SessionRegistry:
    """Session registry wired to the test database and an in-memory cache."""
    return SessionRegistry(
        uow_factory_for,
        cache_backend=cache_backend,
        options=ViewOptions(site_url=SITE_URL, durations=dict(FAST_DURATIONS)),
    )


@pytest.fixture
def test_user() -> TokenUser:
    """Create a test user with fixed ID."""
    return TokenUser(
        id=TEST_USER_ID,
        email="test@example.com",
        display_name="Test User",
    )


@pytest.fixture
def other_user() -> TokenUser:
    """A second user who visits shared links."""
    return TokenUser(
        id=uuid4(),
        email="visitor@example.com",
        display_name="Visitor",
        avatar_url="https://example.com/visitor.png",
    )


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
    """Build authorization headers for any user."""

    def build(user: TokenUser) -> dict[str, str]:
        return {"Authorization": f"Bearer {auth_provider.create_token(user)}"}

    return build


@pytest.fixture
def auth_headers(
    headers_for: Callable[[TokenUser], dict[str, str]], test_user: TokenUser
) -> dict[str, str]:
    """Create authorization headers for the test user."""
    return headers_for(test_user)


@pytest.fixture
def app(
    registry: SessionRegistry,
    auth_provider: JWTAuthProvider,
    session_factory: async_sessionmaker[AsyncSession],
) -> FastAPI:
    """
    Create the application with test overrides.

    - Session registry on the per-test SQLite database
    - Auth provider signing HS256 tokens with the test secret
    - Health check session on the test database
    """
    from api.dependencies.auth import get_auth_provider
    from api.v1.dependencies import get_session_registry
    from infrastructure.database.session import get_async_session
    from main import create_app

    app = create_app()

    async def override_get_async_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session_registry] = lambda: registry
    app.dependency_overrides[get_auth_provider] = lambda: auth_provider
    app.dependency_overrides[get_async_session] = override_get_async_session
    return app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no auth headers)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def authenticated_client(
    app: FastAPI,
    auth_headers: dict[str, str],
) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client sending the test user's token."""
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://test", headers=auth_headers
    ) as c:
        yield c
