"""Profile API routes."""

from uuid import UUID

from fastapi import APIRouter, status

from api.v1.dependencies import CurrentSession
from api.v1.schemas.profile import (
    ProfileCreate,
    ProfileDetailResponse,
    ProfileImage,
    ProfileImageResponse,
    ProfileResponse,
    ProfileUpdate,
)
from api.v1.schemas.view import ViewDetailResponse, ViewResponse
from core.exceptions import ProfileNotFoundError

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.post(
    "",
    response_model=ProfileDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a profile",
    responses={
        201: {"description": "Profile created and selected"},
        403: {"description": "Guest sessions cannot create profiles"},
    },
)
async def create_profile(
    body: ProfileCreate,
    session: CurrentSession,
) -> ProfileDetailResponse:
    """Create a profile owned by the caller and make it active."""
    profile = await session.profile_service.create(
        name=body.name,
        description=body.description,
        visibility=body.visibility,
        image_data=body.image_data,
    )
    return ProfileDetailResponse(data=ProfileResponse.from_entity(profile))


@router.patch(
    "/{profile_id}",
    response_model=ProfileDetailResponse,
    summary="Update a profile",
    responses={
        200: {"description": "Profile updated"},
        403: {"description": "Not the profile owner"},
        404: {"description": "Profile not found"},
    },
)
async def update_profile(
    profile_id: UUID,
    body: ProfileUpdate,
    session: CurrentSession,
) -> ProfileDetailResponse:
    """Edit an owned profile. Making it private removes its collaborators."""
    profile = await session.profile_service.update(
        profile_id,
        name=body.name,
        description=body.description,
        visibility=body.visibility,
        image_data=body.image_data,
    )
    return ProfileDetailResponse(data=ProfileResponse.from_entity(profile))


@router.delete(
    "/{profile_id}",
    response_model=ViewDetailResponse,
    summary="Delete a profile",
    responses={
        200: {"description": "Profile deleted, view returned"},
        403: {"description": "Not the profile owner"},
        404: {"description": "Profile not found"},
    },
)
async def delete_profile(
    profile_id: UUID,
    session: CurrentSession,
) -> ViewDetailResponse:
    """Delete an owned profile with its notes and collaborators."""
    await session.delete_profile(profile_id)
    return ViewDetailResponse(data=ViewResponse.from_session(session))


@router.get(
    "/{profile_id}/image",
    response_model=ProfileImageResponse,
    summary="Get a profile image",
)
async def get_profile_image(
    profile_id: UUID,
    session: CurrentSession,
) -> ProfileImageResponse:
    """Load a profile's image on demand."""
    if session.state.find_profile(profile_id) is None:
        raise ProfileNotFoundError(str(profile_id))
    image_data = await session.profiles.load_image(profile_id)
    return ProfileImageResponse(data=ProfileImage(profile_id=profile_id, image_data=image_data))
