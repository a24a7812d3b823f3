"""Per-identity view sessions and the registry that owns them."""

import logging
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass, field
from uuid import UUID

from core.exceptions import ActionInProgressError, GuestSessionNotFoundError, ProfileNotFoundError
from domain.entities.identity import AuthenticatedIdentity, GuestIdentity, Identity
from domain.entities.profile import InteractionKind
from domain.repositories.cache_backend import ICacheBackend
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.cache_store import LocalCacheStore
from domain.services.interactions import DEFAULT_DURATIONS, InteractionService
from domain.services.notes_sync import NotesSynchronizer
from domain.services.profile_service import ProfileService
from domain.services.profile_sync import ProfileSynchronizer
from domain.services.sharing import SharingService
from domain.state.gate import ActionGate, Activity
from domain.state.view_state import ViewState

logger = logging.getLogger(__name__)

UowFactoryProvider = Callable[[UUID | None], Callable[[], IUnitOfWork]]


@dataclass(frozen=True)
class EntryParams:
    """How a view was entered: optional share link, guest flag, create prompt."""

    shared_profile_id: UUID | None = None
    guest: bool = False
    create: bool = False


@dataclass(frozen=True)
class ViewOptions:
    site_url: str = "http://localhost:3000"
    guest_image_template: str = "https://i.pravatar.cc/900?img={index}"
    durations: dict[InteractionKind, float] = field(default_factory=lambda: dict(DEFAULT_DURATIONS))
    max_user_sessions: int = 1000

    @classmethod
    def from_settings(cls, settings) -> "ViewOptions":  # type: ignore[no-untyped-def]
        return cls(
            site_url=settings.site_url,
            guest_image_template=settings.guest_image_template,
            durations={
                InteractionKind.KISS: settings.kiss_duration_ms / 1000,
                InteractionKind.HUG: settings.hug_duration_ms / 1000,
                InteractionKind.PUNCH: settings.punch_duration_ms / 1000,
            },
            max_user_sessions=settings.max_user_sessions,
        )


class ViewSession:
    """Everything one identity sees: state, gate, cache and the services on top."""

    def __init__(
        self,
        identity: Identity,
        uow_factory: Callable[[], IUnitOfWork],
        cache_backend: ICacheBackend | None = None,
        options: ViewOptions | None = None,
    ) -> None:
        options = options or ViewOptions()
        self.identity = identity
        self.state = ViewState()
        self.gate = ActionGate()

        self.cache: LocalCacheStore | None = None
        if isinstance(identity, AuthenticatedIdentity) and cache_backend is not None:
            self.cache = LocalCacheStore(cache_backend, identity.user_id)

        self.sharing = SharingService(uow_factory, self.state, identity, options.site_url)
        self.profiles = ProfileSynchronizer(
            uow_factory,
            self.state,
            identity,
            self.cache,
            self.sharing,
            options.guest_image_template,
        )
        self.notes = NotesSynchronizer(uow_factory, self.state, identity, self.cache, self.gate)
        self.interactions = InteractionService(
            uow_factory,
            self.state,
            identity,
            self.cache,
            self.gate,
            options.durations,
        )
        self.profile_service = ProfileService(uow_factory, self.state, identity, self.cache)
        self._create_prompted = False

    @property
    def is_guest(self) -> bool:
        return isinstance(self.identity, GuestIdentity)

    async def open(self, params: EntryParams | None = None) -> ViewState:
        """Enter the view: guest profile, or profile load then notes load."""
        params = params or EntryParams()
        if self.is_guest:
            if not self.state.profiles:
                self.profiles.enter_guest_mode()
            return self.state
        if params.guest:
            logger.debug("Ignoring guest flag for signed-in user")

        await self.profiles.load(params.shared_profile_id)
        if self.state.access_denied:
            return self.state

        await self._load_active_notes()

        if params.create and not self._create_prompted and not self.state.profiles:
            self._create_prompted = True
            self.state.prompt_create = True
        return self.state

    async def switch_profile(self, profile_id: UUID) -> ViewState:
        """Make another listed profile active and load its notes.

        Raises:
            ProfileNotFoundError: If the profile is not in the list.
            ActionInProgressError: If an interaction or save is running.
        """
        if self.state.find_profile(profile_id) is None:
            raise ProfileNotFoundError(str(profile_id))
        if not self.gate.acquire(Activity.PROFILE_SWITCH):
            raise ActionInProgressError(str(self.gate.current))

        try:
            self.state.select_profile(profile_id)
            self.state.set_collaborators([])
            if self.cache is not None:
                self.cache.write_active_profile_id(profile_id)
            if not self.notes.is_deleting(profile_id):
                await self.notes.load(profile_id)
        finally:
            self.gate.release(Activity.PROFILE_SWITCH)
        return self.state

    async def delete_profile(self, profile_id: UUID) -> ViewState:
        """Delete an owned profile and load the notes of its replacement."""
        next_id = await self.profile_service.delete(profile_id)
        if next_id is not None:
            await self._load_active_notes()
        return self.state

    async def _load_active_notes(self) -> None:
        profile_id = self.state.active_profile_id
        if profile_id is None or self.notes.is_deleting(profile_id):
            return
        acquired = self.gate.acquire(Activity.PROFILE_SWITCH)
        try:
            await self.notes.load(profile_id)
        finally:
            if acquired:
                self.gate.release(Activity.PROFILE_SWITCH)


class SessionRegistry:
    """Keeps one view session per signed-in user and any live guest sessions.

    Guest sessions exist only here; ending one discards everything it held.
    """

    def __init__(
        self,
        uow_factory_for: UowFactoryProvider,
        cache_backend: ICacheBackend | None = None,
        options: ViewOptions | None = None,
    ) -> None:
        self._uow_factory_for = uow_factory_for
        self._cache_backend = cache_backend
        self._options = options or ViewOptions()
        self._users: OrderedDict[UUID, ViewSession] = OrderedDict()
        self._guests: dict[UUID, ViewSession] = {}

    def for_user(self, identity: AuthenticatedIdentity) -> ViewSession:
        """Get or create the session of a signed-in user.

        At most ``max_user_sessions`` are held; the least recently used one
        is dropped first and rebuilt from the local cache on its next visit.
        """
        session = self._users.get(identity.user_id)
        if session is None or session.identity != identity:
            session = ViewSession(
                identity,
                self._uow_factory_for(identity.user_id),
                self._cache_backend,
                self._options,
            )
            self._users[identity.user_id] = session
        self._users.move_to_end(identity.user_id)
        while len(self._users) > self._options.max_user_sessions:
            evicted, _ = self._users.popitem(last=False)
            logger.debug("Evicted idle view session of user %s", evicted)
        return session

    @property
    def user_count(self) -> int:
        return len(self._users)

    def start_guest(self) -> ViewSession:
        identity = GuestIdentity()
        session = ViewSession(identity, self._uow_factory_for(None), None, self._options)
        session.profiles.enter_guest_mode()
        self._guests[identity.session_id] = session
        logger.info("Started guest session %s", identity.session_id)
        return session

    def get_guest(self, session_id: UUID) -> ViewSession:
        session = self._guests.get(session_id)
        if session is None:
            raise GuestSessionNotFoundError(str(session_id))
        return session

    def end_guest(self, session_id: UUID) -> None:
        if self._guests.pop(session_id, None) is None:
            raise GuestSessionNotFoundError(str(session_id))
        logger.info("Ended guest session %s", session_id)

    @property
    def guest_count(self) -> int:
        return len(self._guests)

    def resolve(self, identity: Identity) -> ViewSession:
        if isinstance(identity, GuestIdentity):
            return self.get_guest(identity.session_id)
        return self.for_user(identity)

    def clear(self) -> None:
        self._users.clear()
        self._guests.clear()
