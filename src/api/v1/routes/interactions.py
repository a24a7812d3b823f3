"""Interaction API routes."""

from fastapi import APIRouter, BackgroundTasks, status

from api.v1.dependencies import CurrentSession
from api.v1.schemas.interaction import InteractionAccepted, InteractionResponse
from domain.entities.profile import InteractionKind

router = APIRouter(prefix="/interactions", tags=["interactions"])


@router.post(
    "/{kind}",
    response_model=InteractionResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Punch, hug or kiss the active profile",
)
async def trigger_interaction(
    kind: InteractionKind,
    session: CurrentSession,
    background_tasks: BackgroundTasks,
) -> InteractionResponse:
    """
    Start an interaction animation.

    The counter is incremented once the animation finishes. While any
    interaction or note save is running the request is ignored and
    ``accepted`` is false.
    """
    service = session.interactions
    profile_id = session.state.active_profile_id
    accepted = service.start(kind)
    if accepted:
        background_tasks.add_task(service.run)
    return InteractionResponse(
        data=InteractionAccepted(
            kind=kind,
            accepted=accepted,
            profile_id=profile_id,
            duration_ms=int(service.duration(kind) * 1000) if accepted else 0,
        )
    )
