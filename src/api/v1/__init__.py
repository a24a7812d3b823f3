"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.guest_sessions import router as guest_sessions_router
from api.v1.routes.interactions import router as interactions_router
from api.v1.routes.notes import router as notes_router
from api.v1.routes.profiles import router as profiles_router
from api.v1.routes.sharing import router as sharing_router
from api.v1.routes.view import router as view_router
from api.v1.schemas.common import ErrorResponse

# Every v1 error shares the {error_code, message, details} body
router = APIRouter(
    responses={
        401: {"model": ErrorResponse, "description": "Missing or invalid credentials"},
        502: {"model": ErrorResponse, "description": "Profile store request failed"},
    }
)
router.include_router(guest_sessions_router)
router.include_router(view_router)
router.include_router(profiles_router)
router.include_router(notes_router)
router.include_router(interactions_router)
router.include_router(sharing_router)
