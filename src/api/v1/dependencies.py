"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Annotated, Callable
from uuid import UUID

from fastapi import Depends

from api.dependencies.auth import CurrentIdentity
from core.config import settings
from domain.services.session import SessionRegistry, ViewOptions, ViewSession
from infrastructure.cache.file_backend import FileCacheBackend
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory(viewer_id: UUID | None) -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for Unit of Work instances acting on behalf of a viewer."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory, viewer_id)

    return factory


@lru_cache
def get_session_registry() -> SessionRegistry:
    """Get the process-wide view session registry."""
    return SessionRegistry(
        get_uow_factory,
        cache_backend=FileCacheBackend(settings.cache_dir),
        options=ViewOptions.from_settings(settings),
    )


def get_view_session(
    identity: CurrentIdentity,
    registry: SessionRegistry = Depends(get_session_registry),
) -> ViewSession:
    """Get the view session of the requesting identity.

    Raises:
        GuestSessionNotFoundError: If a guest session header names no live session
    """
    return registry.resolve(identity)


CurrentSession = Annotated[ViewSession, Depends(get_view_session)]
