"""Database engine and session management."""

from typing import Any, AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.config import settings


def _connect_args(url: str) -> dict[str, Any]:
    # Supavisor in transaction mode cannot keep asyncpg's prepared statements
    if "pooler.supabase.com" in url or "supabase.com" in url:
        return {"statement_cache_size": 0}
    return {}


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine for the profile store."""
    options: dict[str, Any] = {"echo": echo, "connect_args": _connect_args(url)}
    if not url.startswith("sqlite"):
        options["pool_pre_ping"] = True
    return create_async_engine(url, **options)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine = build_engine(settings.async_database_url, echo=settings.debug)
async_session_factory = build_session_factory(engine)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database sessions."""
    async with async_session_factory() as session:
        yield session
