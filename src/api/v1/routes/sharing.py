"""Sharing and collaborator API routes."""

from uuid import UUID

from fastapi import APIRouter, status

from api.v1.dependencies import CurrentSession
from api.v1.schemas.sharing import (
    CollaboratorListResponse,
    CollaboratorResponse,
    ShareLinkResponse,
    ShareLinkResponseData,
)

router = APIRouter(tags=["sharing"])


@router.get(
    "/share-link",
    response_model=ShareLinkResponse,
    summary="Get the share link of a profile",
    responses={403: {"description": "Not the profile owner"}},
)
async def get_share_link(
    session: CurrentSession,
    profile_id: UUID | None = None,
) -> ShareLinkResponse:
    """Build the share link of an owned profile (the active one by default)."""
    link = session.sharing.share_link(profile_id)
    return ShareLinkResponse(
        data=ShareLinkResponseData(url=link.url, title=link.title, text=link.text)
    )


@router.get(
    "/collaborators",
    response_model=CollaboratorListResponse,
    summary="List collaborators of the active profile",
    responses={403: {"description": "Not the profile owner"}},
)
async def list_collaborators(session: CurrentSession) -> CollaboratorListResponse:
    """Get the collaborators of the active profile in enrollment order."""
    collaborators = await session.sharing.list_collaborators()
    return CollaboratorListResponse(
        data=[CollaboratorResponse.model_validate(c) for c in collaborators]
    )


@router.delete(
    "/collaborators/{collaborator_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a collaborator",
    responses={
        204: {"description": "Collaborator removed"},
        403: {"description": "Not the profile owner"},
        404: {"description": "Collaborator not found"},
    },
)
async def remove_collaborator(
    collaborator_id: UUID,
    session: CurrentSession,
) -> None:
    """Remove a collaborator from the active profile."""
    await session.sharing.remove_collaborator(collaborator_id)
    return None
