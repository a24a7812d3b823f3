"""Pydantic schemas for the profile view."""

from uuid import UUID

from pydantic import BaseModel

from api.v1.schemas.profile import ProfileResponse
from domain.entities.profile import InteractionKind
from domain.services.session import ViewSession


class ActiveProfileUpdate(BaseModel):
    """Schema for switching the active profile."""

    profile_id: UUID


class ViewResponse(BaseModel):
    """Everything the page renders apart from notes and images."""

    guest: bool
    access_denied: bool
    profiles: list[ProfileResponse]
    active_profile_id: UUID | None = None
    is_owner: bool = False
    profiles_loading: bool = False
    notes_loading: bool = False
    prompt_create: bool = False
    animating: InteractionKind | None = None

    @classmethod
    def from_session(cls, session: ViewSession) -> "ViewResponse":
        state = session.state
        active = state.active_profile
        owner_id = getattr(session.identity, "user_id", None)
        return cls(
            guest=session.is_guest,
            access_denied=state.access_denied,
            profiles=[
                ProfileResponse.from_entity(p, has_image=p.id in state.images)
                for p in state.profiles
            ],
            active_profile_id=state.active_profile_id,
            is_owner=bool(active and active.is_owned_by(owner_id)),
            profiles_loading=state.profiles_loading,
            notes_loading=state.notes_loading,
            prompt_create=state.prompt_create,
            animating=session.interactions.animating,
        )


class ViewDetailResponse(BaseModel):
    """Schema for the current view."""

    data: ViewResponse
