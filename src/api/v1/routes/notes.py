"""Note API routes."""

from uuid import UUID

from fastapi import APIRouter, status

from api.v1.dependencies import CurrentSession
from api.v1.schemas.note import NoteCreate, NoteDetailResponse, NoteListResponse, NoteResponse
from core.exceptions import ActionInProgressError

router = APIRouter(prefix="/notes", tags=["notes"])


@router.get(
    "",
    response_model=NoteListResponse,
    summary="List notes of the active profile",
)
async def list_notes(
    session: CurrentSession,
    refresh: bool = True,
) -> NoteListResponse:
    """Get the active profile's notes, newest first.

    With ``refresh`` the notes are fetched again; a failed fetch keeps the
    last known notes.
    """
    notes = await session.notes.load() if refresh else session.state.notes
    return NoteListResponse(
        data=[NoteResponse.from_entity(note) for note in notes],
        loading=session.state.notes_loading,
    )


@router.post(
    "",
    response_model=NoteDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Write a note",
    responses={
        201: {"description": "Note created"},
        400: {"description": "Empty text or no active profile"},
        409: {"description": "Another action is in progress"},
    },
)
async def create_note(
    body: NoteCreate,
    session: CurrentSession,
) -> NoteDetailResponse:
    """Write a note on the active profile."""
    note = await session.notes.create(body.text, body.emotion_type)
    return NoteDetailResponse(data=NoteResponse.from_entity(note))


@router.delete(
    "/{note_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a note",
    responses={
        204: {"description": "Note deleted"},
        403: {"description": "Only the writer can delete a note"},
        404: {"description": "Note not found"},
        409: {"description": "Another delete on this profile is still settling"},
    },
)
async def delete_note(
    note_id: UUID,
    session: CurrentSession,
) -> None:
    """Delete a note of the active profile."""
    if not await session.notes.delete(note_id):
        raise ActionInProgressError("note_delete")
    return None
