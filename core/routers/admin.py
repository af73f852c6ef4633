"""
Admin API Router

Admin-only endpoints for managing users and their orders.
Requires a Supabase access token whose user record has is_admin set.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from supabase._async.client import AsyncClient

from core.auth import verify_admin
from core.errors import (
    ERROR_INVALID_ACTION,
    ERROR_MISSING_ORDER_FIELDS,
    ERROR_MISSING_USER_ACTION,
    ERROR_USER_NOT_FOUND,
)
from core.logging import get_logger, sanitize_id_for_logging
from core.routers.deps import get_supabase_client, get_user_repository
from core.services.repositories import UserRepository

logger = get_logger(__name__)

router = APIRouter(tags=["admin"])

# Supabase has no permanent ban; ~100 years
BAN_DURATION = "876000h"


# ==================== PYDANTIC MODELS ====================

class UserActionRequest(BaseModel):
    userId: Optional[str] = None
    action: Optional[str] = None  # ban | unban | delete


class UpdateOrderRequest(BaseModel):
    userId: Optional[str] = None
    orderId: Optional[str] = None
    status: Optional[str] = None


# ==================== USERS ====================

@router.get("/users")
async def admin_get_users(
    admin=Depends(verify_admin),
    users: UserRepository = Depends(get_user_repository),
):
    """List all user records"""
    records = await users.list_all()
    return {"users": [r.to_admin_dict() for r in records]}


@router.post("/delete-user")
async def admin_user_action(
    request: UserActionRequest,
    admin=Depends(verify_admin),
    users: UserRepository = Depends(get_user_repository),
    client: AsyncClient = Depends(get_supabase_client),
):
    """Ban, unban or delete a user (auth account and record)"""
    if not request.userId or not request.action:
        raise HTTPException(status_code=400, detail=ERROR_MISSING_USER_ACTION)

    user_id = request.userId
    safe_id = sanitize_id_for_logging(user_id)

    if request.action == "ban":
        await client.auth.admin.update_user_by_id(user_id, {"ban_duration": BAN_DURATION})
        await users.set_banned(user_id, True)
        logger.info(f"User {safe_id} banned")
        return {"success": True, "message": "User banned"}

    if request.action == "unban":
        await client.auth.admin.update_user_by_id(user_id, {"ban_duration": "none"})
        await users.set_banned(user_id, False)
        logger.info(f"User {safe_id} unbanned")
        return {"success": True, "message": "User unbanned"}

    if request.action == "delete":
        await client.auth.admin.delete_user(user_id)
        await users.delete(user_id)
        logger.info(f"User {safe_id} deleted")
        return {"success": True, "message": "User deleted"}

    raise HTTPException(status_code=400, detail=ERROR_INVALID_ACTION)


# ==================== ORDERS ====================

@router.post("/update-order")
async def admin_update_order(
    request: UpdateOrderRequest,
    admin=Depends(verify_admin),
    users: UserRepository = Depends(get_user_repository),
):
    """Set the status of one order in a user's record"""
    if not request.userId or not request.orderId or not request.status:
        raise HTTPException(status_code=400, detail=ERROR_MISSING_ORDER_FIELDS)

    updated = await users.update_order_status(request.userId, request.orderId, request.status)
    if not updated:
        raise HTTPException(status_code=404, detail=ERROR_USER_NOT_FOUND)

    return {"success": True}
