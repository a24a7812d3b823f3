"""Profile view API routes."""

from uuid import UUID

from fastapi import APIRouter

from api.v1.dependencies import CurrentSession
from api.v1.schemas.view import ActiveProfileUpdate, ViewDetailResponse, ViewResponse
from domain.services.session import EntryParams

router = APIRouter(prefix="/view", tags=["view"])


@router.get(
    "",
    response_model=ViewDetailResponse,
    summary="Get the current view",
)
async def get_view(session: CurrentSession) -> ViewDetailResponse:
    """Return the view as it stands, without touching the store."""
    return ViewDetailResponse(data=ViewResponse.from_session(session))


@router.post(
    "/load",
    response_model=ViewDetailResponse,
    summary="Enter the view",
    responses={
        200: {"description": "View loaded (check access_denied for shared links)"},
        502: {"description": "Owned profiles could not be read"},
    },
)
async def load_view(
    session: CurrentSession,
    profile: UUID | None = None,
    guest: bool = False,
    create: bool = False,
) -> ViewDetailResponse:
    """
    Load profiles and the active profile's notes.

    - **profile**: shared profile link target; visiting a readable public
      profile enrolls the caller as a collaborator
    - **create**: ask the client to open the create dialog when the caller
      has no profiles yet
    """
    await session.open(EntryParams(shared_profile_id=profile, guest=guest, create=create))
    return ViewDetailResponse(data=ViewResponse.from_session(session))


@router.put(
    "/active",
    response_model=ViewDetailResponse,
    summary="Switch the active profile",
    responses={
        404: {"description": "Profile not in the list"},
        409: {"description": "Another action is in progress"},
    },
)
async def switch_active_profile(
    body: ActiveProfileUpdate,
    session: CurrentSession,
) -> ViewDetailResponse:
    """Make another listed profile active and load its notes."""
    await session.switch_profile(body.profile_id)
    return ViewDetailResponse(data=ViewResponse.from_session(session))
