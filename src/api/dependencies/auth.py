"""Authentication dependencies for FastAPI."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.exceptions import AuthenticationError, ErrorCode
from domain.entities.identity import GuestIdentity, Identity
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser

GUEST_SESSION_HEADER = "X-Guest-Session"

# Security scheme for OpenAPI docs
security = HTTPBearer(auto_error=False)

# Singleton auth provider
_auth_provider: JWTAuthProvider | None = None


def get_auth_provider() -> JWTAuthProvider:
    """Get or create the auth provider singleton."""
    global _auth_provider
    if _auth_provider is None:
        _auth_provider = JWTAuthProvider()
    return _auth_provider


async def get_current_user(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None,
        Depends(security),
    ],
    auth_provider: JWTAuthProvider = Depends(get_auth_provider),
) -> TokenUser:
    """
    Dependency to get the current authenticated user.

    Raises:
        AuthenticationError: If no token provided or token is invalid
    """
    if not credentials:
        raise AuthenticationError(
            message="Authorization header required",
            error_code=ErrorCode.UNAUTHORIZED,
        )

    user = await auth_provider.validate_token(credentials.credentials)
    if not user:
        raise AuthenticationError(
            message="Invalid or expired token",
            error_code=ErrorCode.INVALID_TOKEN,
        )

    return user


async def get_guest_session_id(
    x_guest_session: Annotated[str | None, Header(alias=GUEST_SESSION_HEADER)] = None,
) -> UUID | None:
    """Extract the guest session ID from the X-Guest-Session header if present."""
    if x_guest_session:
        try:
            return UUID(x_guest_session)
        except ValueError:
            return None
    return None


async def get_identity(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None,
        Depends(security),
    ],
    guest_session_id: Annotated[UUID | None, Depends(get_guest_session_id)],
    auth_provider: JWTAuthProvider = Depends(get_auth_provider),
) -> Identity:
    """
    Resolve who is driving the request.

    A bearer token wins over a guest session header. A token that fails
    validation is rejected rather than falling back to guest mode.

    Raises:
        AuthenticationError: If neither a valid token nor a guest session is given
    """
    if credentials:
        user = await get_current_user(credentials, auth_provider)
        return user.to_identity()

    if guest_session_id is not None:
        return GuestIdentity(session_id=guest_session_id)

    raise AuthenticationError(
        message="Authorization header or guest session required",
        error_code=ErrorCode.UNAUTHORIZED,
    )


# Type alias for route handlers
CurrentIdentity = Annotated[Identity, Depends(get_identity)]
