"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"
    ACCESS_DENIED = "ACCESS_DENIED"
    NOT_PROFILE_OWNER = "NOT_PROFILE_OWNER"
    NOT_NOTE_AUTHOR = "NOT_NOTE_AUTHOR"
    GUEST_MODE = "GUEST_MODE"

    # Not found errors (404)
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    NOTE_NOT_FOUND = "NOTE_NOT_FOUND"
    COLLABORATOR_NOT_FOUND = "COLLABORATOR_NOT_FOUND"
    GUEST_SESSION_NOT_FOUND = "GUEST_SESSION_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NO_ACTIVE_PROFILE = "NO_ACTIVE_PROFILE"

    # Conflict errors (409)
    ACTION_IN_PROGRESS = "ACTION_IN_PROGRESS"

    # Remote store errors (502)
    REMOTE_STORE_ERROR = "REMOTE_STORE_ERROR"
    POLICY_VIOLATION = "POLICY_VIOLATION"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class AuthorizationError(AppException):
    """Authorization failed."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(
            error_code=ErrorCode.FORBIDDEN,
            message=message,
            status_code=403,
        )


class AccessDeniedError(AppException):
    """A shared profile link points to a missing or unreadable profile."""

    def __init__(self, profile_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.ACCESS_DENIED,
            message="You do not have access to this profile",
            status_code=403,
            details={"profile_id": profile_id},
        )


class NotProfileOwnerError(AppException):
    """Operation is reserved to the owner of the profile."""

    def __init__(self, profile_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.NOT_PROFILE_OWNER,
            message="Only the profile owner can do this",
            status_code=403,
            details={"profile_id": profile_id},
        )


class NotNoteAuthorError(AppException):
    """Notes can only be deleted by the writer."""

    def __init__(self, note_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.NOT_NOTE_AUTHOR,
            message="Can only be deleted by the writer",
            status_code=403,
            details={"note_id": note_id},
        )


class GuestModeError(AppException):
    """Operation is not available to guest sessions."""

    def __init__(self, message: str = "Sign in to do this") -> None:
        super().__init__(
            error_code=ErrorCode.GUEST_MODE,
            message=message,
            status_code=403,
        )


class ProfileNotFoundError(AppException):
    """Profile not found."""

    def __init__(self, profile_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_NOT_FOUND,
            message=f"Profile not found: {profile_id}",
            status_code=404,
            details={"profile_id": profile_id},
        )


class NoteNotFoundError(AppException):
    """Note not found in the active profile."""

    def __init__(self, note_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.NOTE_NOT_FOUND,
            message=f"Note not found: {note_id}",
            status_code=404,
            details={"note_id": note_id},
        )


class CollaboratorNotFoundError(AppException):
    """Collaborator record not found."""

    def __init__(self, collaborator_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.COLLABORATOR_NOT_FOUND,
            message=f"Collaborator not found: {collaborator_id}",
            status_code=404,
            details={"collaborator_id": collaborator_id},
        )


class GuestSessionNotFoundError(AppException):
    """Guest session unknown or already ended."""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.GUEST_SESSION_NOT_FOUND,
            message="Guest session not found",
            status_code=404,
            details={"session_id": session_id},
        )


class ProfileValidationError(AppException):
    """Profile fields failed validation."""

    def __init__(self, message: str, field: str) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            status_code=400,
            details={"field": field},
        )


class NoteValidationError(AppException):
    """Note text failed validation."""

    def __init__(self, message: str = "Note text must not be empty") -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            status_code=400,
            details={"field": "text"},
        )


class NoActiveProfileError(AppException):
    """The view has no active profile to act on."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.NO_ACTIVE_PROFILE,
            message="No active profile selected",
            status_code=400,
        )


class ActionInProgressError(AppException):
    """Another interaction, note save or profile switch is still running."""

    def __init__(self, action: str) -> None:
        super().__init__(
            error_code=ErrorCode.ACTION_IN_PROGRESS,
            message="Another action is in progress",
            status_code=409,
            details={"action": action},
        )


class RemoteStoreError(AppException):
    """A call to the remote profile/notes/collaborator store failed."""

    def __init__(
        self,
        message: str = "Remote store request failed",
        error_code: ErrorCode = ErrorCode.REMOTE_STORE_ERROR,
        details: Any | None = None,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=502,
            details=details,
        )


class PolicyViolationError(RemoteStoreError):
    """The store's row-level access policy rejected a write."""

    def __init__(self, table: str, action: str) -> None:
        super().__init__(
            message=f"Access policy rejected {action} on {table}",
            error_code=ErrorCode.POLICY_VIOLATION,
            details={"table": table, "action": action},
        )
