"""Shared fixtures for unit tests."""

from datetime import datetime, timedelta
from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from domain.entities.identity import AuthenticatedIdentity, GuestIdentity
from domain.entities.note import EmotionType, Note
from domain.entities.profile import Profile, Visibility
from domain.services.cache_store import LocalCacheStore
from domain.state.gate import ActionGate
from domain.state.view_state import ViewState
from infrastructure.cache.memory_backend import InMemoryCacheBackend

BASE_TIME = datetime(2026, 3, 1, 12, 0, 0)


class FakeUnitOfWork:
    """Fake Unit of Work with the three repository mocks for unit testing."""

    def __init__(self) -> None:
        self.profiles = AsyncMock()
        self.notes = AsyncMock()
        self.collaborators = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


def make_profile(owner_id: UUID, name: str = "Alex", minutes: int = 0, **kwargs: Any) -> Profile:
    """Profile created ``minutes`` after BASE_TIME."""
    return Profile(
        owner_id=owner_id,
        name=name,
        created_at=BASE_TIME + timedelta(minutes=minutes),
        **kwargs,
    )


def make_note(
    profile_id: UUID,
    author_id: UUID,
    text: str = "hello",
    minutes: int | None = 0,
    emotion_type: EmotionType = EmotionType.FEELINGS,
) -> Note:
    return Note(
        profile_id=profile_id,
        author_id=author_id,
        text=text,
        emotion_type=emotion_type,
        created_at=None if minutes is None else BASE_TIME + timedelta(minutes=minutes),
    )


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def user_id() -> UUID:
    """A random user ID."""
    return uuid4()


@pytest.fixture
def other_user_id() -> UUID:
    """A random user ID distinct from user_id."""
    return uuid4()


@pytest.fixture
def identity(user_id: UUID) -> AuthenticatedIdentity:
    return AuthenticatedIdentity(user_id=user_id, email="me@example.com", display_name="Me")


@pytest.fixture
def guest() -> GuestIdentity:
    return GuestIdentity()


@pytest.fixture
def state() -> ViewState:
    return ViewState()


@pytest.fixture
def gate() -> ActionGate:
    return ActionGate()


@pytest.fixture
def backend() -> InMemoryCacheBackend:
    return InMemoryCacheBackend()


@pytest.fixture
def cache(backend: InMemoryCacheBackend, user_id: UUID) -> LocalCacheStore:
    return LocalCacheStore(backend, user_id)


@pytest.fixture
def owned_profile(user_id: UUID) -> Profile:
    return make_profile(user_id, name="Alex", minutes=10, visibility=Visibility.PUBLIC)
