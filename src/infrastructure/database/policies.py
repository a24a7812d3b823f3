"""Row-level access rules of the profile store, bound to one viewer.

Mirrors the Postgres RLS policies created by the migrations so that the
same rules hold on databases without RLS (SQLite in tests). Reads are
filtered, so unreadable rows look missing. Writes are checked up front.
"""

from uuid import UUID

from sqlalchemy import ColumnElement, false, or_, select

from infrastructure.database.models import CollaboratorModel, ProfileModel

PUBLIC = "public"


def collaborating_profile_ids(viewer_id: UUID):  # type: ignore[no-untyped-def]
    """Subquery of the profile IDs the viewer collaborates on."""
    return select(CollaboratorModel.profile_id).where(CollaboratorModel.user_id == viewer_id)


def owned_profile_ids(viewer_id: UUID):  # type: ignore[no-untyped-def]
    return select(ProfileModel.id).where(ProfileModel.owner_id == viewer_id)


def profile_readable(viewer_id: UUID | None) -> ColumnElement[bool]:
    """Profiles are readable by their owner, their collaborators, or anyone when public."""
    if viewer_id is None:
        return ProfileModel.visibility == PUBLIC
    return or_(
        ProfileModel.visibility == PUBLIC,
        ProfileModel.owner_id == viewer_id,
        ProfileModel.id.in_(collaborating_profile_ids(viewer_id)),
    )


def collaborator_readable(viewer_id: UUID | None) -> ColumnElement[bool]:
    """Collaborator rows are readable by the profile owner and by the collaborator."""
    if viewer_id is None:
        return false()
    return or_(
        CollaboratorModel.user_id == viewer_id,
        CollaboratorModel.profile_id.in_(owned_profile_ids(viewer_id)),
    )
