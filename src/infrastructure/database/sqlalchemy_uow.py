"""SQLAlchemy Unit of Work implementation."""

import logging
from typing import Any, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.exceptions import RemoteStoreError
from infrastructure.database.repositories.sqlalchemy_collaborator_repo import (
    SQLAlchemyCollaboratorRepository,
)
from infrastructure.database.repositories.sqlalchemy_note_repo import SQLAlchemyNoteRepository
from infrastructure.database.repositories.sqlalchemy_profile_repo import (
    SQLAlchemyProfileRepository,
)

logger = logging.getLogger(__name__)


class SQLAlchemyUnitOfWork:
    """Unit of Work whose repositories act on behalf of one viewer.

    Driver and ORM errors leave the block as RemoteStoreError.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        viewer_id: UUID | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._viewer_id = viewer_id
        self._session: Optional[AsyncSession] = None

    def _require_session(self) -> AsyncSession:
        if not self._session:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")
        return self._session

    @property
    def viewer_id(self) -> UUID | None:
        return self._viewer_id

    @property
    def profiles(self) -> SQLAlchemyProfileRepository:
        """Get profile repository."""
        return SQLAlchemyProfileRepository(self._require_session(), self._viewer_id)

    @property
    def notes(self) -> SQLAlchemyNoteRepository:
        """Get note repository."""
        return SQLAlchemyNoteRepository(self._require_session(), self._viewer_id)

    @property
    def collaborators(self) -> SQLAlchemyCollaboratorRepository:
        """Get collaborator repository."""
        return SQLAlchemyCollaboratorRepository(self._require_session(), self._viewer_id)

    async def commit(self) -> None:
        """Commit the current transaction."""
        if self._session:
            await self._session.commit()

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        if self._session:
            await self._session.rollback()

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        """Enter the context manager and create session."""
        self._session = self._session_factory()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Any,
    ) -> None:
        """Roll back on error, close the session, translate store errors."""
        if self._session:
            try:
                if exc_type:
                    await self.rollback()
            finally:
                await self._session.close()
                self._session = None

        if isinstance(exc_val, SQLAlchemyError):
            logger.error("Remote store error: %s", exc_val)
            raise RemoteStoreError(details={"reason": type(exc_val).__name__}) from exc_val
