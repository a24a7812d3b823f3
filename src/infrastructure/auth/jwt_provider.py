"""JWT authentication provider.

Accepts Supabase access tokens (ES256, verified against the project's
JWKS) and locally signed HS256 tokens (tests, local development).

Relevant Supabase claims:
    {
        "sub": "user-uuid",
        "email": "user@example.com",
        "role": "authenticated",
        "user_metadata": {"full_name": "Jane", "avatar_url": "https://..."},
        "exp": 1234567890
    }
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Optional
from uuid import UUID

import httpx
from jose import JWTError, jwt
from jose.backends import ECKey

from core.config import settings
from infrastructure.auth.provider import TokenUser

logger = logging.getLogger(__name__)

# kid -> JWK, filled on first ES256 token and refreshed on unknown kid
_jwks_cache: dict[str, Any] | None = None


async def _get_jwks_keys(refresh: bool = False) -> dict[str, Any]:
    """Fetch the project's signing keys, keyed by kid."""
    global _jwks_cache
    if _jwks_cache is not None and not refresh:
        return _jwks_cache

    jwks_url = settings.supabase_jwks_url
    if not jwks_url:
        return {}

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(jwks_url, timeout=10.0)
            response.raise_for_status()
    except httpx.HTTPError:
        logger.exception("Failed to fetch JWKS from %s", jwks_url)
        return {}

    _jwks_cache = {
        key["kid"]: key for key in response.json().get("keys", []) if key.get("kid")
    }
    logger.info("Fetched %d JWKS keys", len(_jwks_cache))
    return _jwks_cache


def _user_from_claims(payload: dict[str, Any]) -> Optional[TokenUser]:
    user_id = payload.get("sub")
    if not user_id:
        return None
    try:
        uid = UUID(user_id)
    except ValueError:
        return None

    metadata = payload.get("user_metadata") or {}
    display_name = (
        metadata.get("full_name")
        or metadata.get("name")
        or metadata.get("display_name")
        or payload.get("name")
    )
    avatar_url = metadata.get("avatar_url") or metadata.get("picture")

    return TokenUser(
        id=uid,
        email=payload.get("email") or "",
        display_name=display_name,
        avatar_url=avatar_url,
        role=payload.get("role"),
    )


class JWTAuthProvider:
    """IAuthProvider backed by python-jose."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """Verify a bearer token and read the user from its claims.

        The signing algorithm is taken from the token header: ES256 goes
        through JWKS, anything else through the shared secret.

        Returns:
            TokenUser if valid, None if invalid or expired
        """
        try:
            header = jwt.get_unverified_header(token)
            if header.get("alg") == "ES256":
                payload = await self._decode_es256(token, header.get("kid"))
            else:
                payload = jwt.decode(
                    token,
                    self._secret_key,
                    algorithms=[self._algorithm],
                    options={"verify_aud": False},
                )
        except JWTError:
            return None

        if payload is None:
            return None
        return _user_from_claims(payload)

    async def _decode_es256(self, token: str, kid: str | None) -> Optional[dict[str, Any]]:
        if not kid:
            return None

        key_data = (await _get_jwks_keys()).get(kid)
        if not key_data:
            # Unknown kid: keys may have rotated
            key_data = (await _get_jwks_keys(refresh=True)).get(kid)
        if not key_data:
            logger.warning("JWKS key not found for kid=%s", kid)
            return None

        return jwt.decode(  # type: ignore[no-any-return]
            token,
            ECKey(key_data, algorithm="ES256"),
            algorithms=["ES256"],
            options={"verify_aud": False},
        )

    def create_token(self, user: TokenUser) -> str:
        """Sign an HS256 token shaped like a Supabase access token."""
        expire = datetime.utcnow() + timedelta(minutes=self._expire_minutes)
        payload: dict[str, Any] = {
            "sub": str(user.id),
            "email": user.email,
            "aud": "authenticated",
            "role": user.role or "authenticated",
            "exp": expire,
            "user_metadata": {
                "full_name": user.display_name,
                "avatar_url": user.avatar_url,
            },
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)  # type: ignore[no-any-return]
