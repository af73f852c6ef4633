"""Supabase Auth bearer-token verification and admin checks."""
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException

from core.db import get_supabase
from core.errors import ERROR_FORBIDDEN_NOT_ADMIN, ERROR_INVALID_TOKEN, ERROR_UNAUTHORIZED
from core.logging import get_logger
from core.services.models import UserRecord
from core.services.repositories import UserRepository

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuthPrincipal:
    """Signed-in user as reported by Supabase Auth."""
    id: str
    email: Optional[str] = None


def _extract_bearer(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split(" ")
    if len(parts) == 2 and parts[0].lower() == "bearer" and parts[1]:
        return parts[1]
    return None


async def _resolve_token(token: str) -> AuthPrincipal:
    client = await get_supabase()
    try:
        response = await client.auth.get_user(token)
    except Exception as e:
        logger.warning(f"Token verification failed: {type(e).__name__}")
        raise HTTPException(status_code=401, detail=ERROR_INVALID_TOKEN) from e

    user = getattr(response, "user", None)
    if not user:
        raise HTTPException(status_code=401, detail=ERROR_INVALID_TOKEN)
    return AuthPrincipal(id=user.id, email=getattr(user, "email", None))


async def verify_bearer_token(
    authorization: str = Header(None, alias="Authorization"),
) -> AuthPrincipal:
    """Require `Authorization: Bearer <access token>`."""
    token = _extract_bearer(authorization)
    if not token:
        raise HTTPException(status_code=401, detail=ERROR_UNAUTHORIZED)
    return await _resolve_token(token)


async def optional_principal(
    authorization: str = Header(None, alias="Authorization"),
) -> Optional[AuthPrincipal]:
    """Principal when a bearer token is sent, None for guests.

    A token that is present but invalid is still rejected with 401.
    """
    token = _extract_bearer(authorization)
    if not token:
        return None
    return await _resolve_token(token)


async def verify_admin(principal: AuthPrincipal = Depends(verify_bearer_token)) -> UserRecord:
    """
    Verify that the caller's user record has is_admin set.
    Returns the admin's record.
    """
    users = UserRepository(await get_supabase())
    record = await users.get_by_id(principal.id)

    if not record or not record.is_admin:
        raise HTTPException(status_code=403, detail=ERROR_FORBIDDEN_NOT_ADMIN)

    return record
