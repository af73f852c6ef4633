"""
User API Router

Profile record written right after sign-up. Supabase Auth owns the
account itself; this creates the matching `users` row the cart and
order history live on.
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from core.auth import AuthPrincipal, verify_bearer_token
from core.errors import ERROR_MISSING_NAME
from core.logging import get_logger, sanitize_id_for_logging
from core.routers.deps import get_user_repository
from core.services.repositories import UserRepository

logger = get_logger(__name__)

router = APIRouter(prefix="/api/user", tags=["user"])


class CreateProfileRequest(BaseModel):
    name: str = ""


@router.post("/profile")
async def create_profile(
    request: CreateProfileRequest,
    principal: AuthPrincipal = Depends(verify_bearer_token),
    users: UserRepository = Depends(get_user_repository),
):
    """Create the caller's profile; an existing record is returned untouched"""
    name = request.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail=ERROR_MISSING_NAME)

    record = await users.get_by_id(principal.id)
    if record:
        return {"user": record.to_admin_dict(), "created": False}

    record = await users.create_profile(principal.id, name, principal.email or "")
    logger.info(f"Profile created for {sanitize_id_for_logging(principal.id)}")
    return {"user": record.to_admin_dict(), "created": True}
