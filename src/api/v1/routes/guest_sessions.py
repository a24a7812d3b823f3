"""Guest session API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from api.v1.dependencies import get_session_registry
from api.v1.schemas.guest import GuestSession, GuestSessionResponse
from api.v1.schemas.view import ViewResponse
from domain.services.session import SessionRegistry

router = APIRouter(prefix="/guest-sessions", tags=["guest"])


@router.post(
    "",
    response_model=GuestSessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start a guest session",
)
async def start_guest_session(
    registry: SessionRegistry = Depends(get_session_registry),
) -> GuestSessionResponse:
    """
    Start a trial session with a single placeholder profile.

    Nothing done in a guest session is stored; it lives until it is ended
    or the server restarts.
    """
    session = registry.start_guest()
    return GuestSessionResponse(
        data=GuestSession(
            session_id=session.identity.session_id,  # type: ignore[union-attr]
            view=ViewResponse.from_session(session),
        )
    )


@router.delete(
    "/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="End a guest session",
    responses={404: {"description": "Guest session not found"}},
)
async def end_guest_session(
    session_id: UUID,
    registry: SessionRegistry = Depends(get_session_registry),
) -> None:
    """End a guest session and discard everything it held."""
    registry.end_guest(session_id)
    return None
