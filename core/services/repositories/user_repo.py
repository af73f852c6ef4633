"""User Repository - user records, orders and persisted carts.

All methods use async/await with supabase-py v2.
"""

from datetime import UTC, datetime
from typing import Any

from core.logging import get_logger
from core.services.models import UserRecord

from .base import BaseRepository

logger = get_logger(__name__)

USERS_TABLE = "users"


class UserRepository(BaseRepository):
    """Operations on the `users` table."""

    async def get_by_id(self, user_id: str) -> UserRecord | None:
        """Get user record by auth UID."""
        result = await self.client.table(USERS_TABLE).select("*").eq("id", user_id).execute()
        return UserRecord(**result.data[0]) if result.data else None

    async def list_all(self) -> list[UserRecord]:
        """All user records, newest first."""
        result = (
            await self.client.table(USERS_TABLE)
            .select("*")
            .order("created_at", desc=True)
            .execute()
        )
        return [UserRecord(**row) for row in result.data or []]

    async def create_profile(self, user_id: str, name: str, email: str) -> UserRecord:
        """Create the record written right after sign-up."""
        data = {
            "id": user_id,
            "name": name,
            "email": email,
            "created_at": datetime.now(UTC).isoformat(),
            "orders": [],
        }
        result = await self.client.table(USERS_TABLE).insert(data).execute()
        return UserRecord(**result.data[0])

    async def get_cart(self, user_id: str) -> list[dict[str, Any]] | None:
        """Serialized cart of a user, None when the record or field is absent."""
        result = await self.client.table(USERS_TABLE).select("cart").eq("id", user_id).execute()
        if not result.data:
            return None
        return result.data[0].get("cart")

    async def set_cart(self, user_id: str, cart: list[dict[str, Any]]) -> None:
        """Replace the whole `cart` field."""
        await self.client.table(USERS_TABLE).update({"cart": cart}).eq("id", user_id).execute()

    async def set_banned(self, user_id: str, banned: bool) -> None:
        await self.client.table(USERS_TABLE).update({"banned": banned}).eq("id", user_id).execute()

    async def delete(self, user_id: str) -> None:
        await self.client.table(USERS_TABLE).delete().eq("id", user_id).execute()

    async def update_order_status(self, user_id: str, order_id: str, status: str) -> bool:
        """Set status of one order in the user's `orders` list.

        Returns False when the user does not exist. Orders with another ID
        are written back unchanged.
        """
        user = await self.get_by_id(user_id)
        if not user:
            return False

        orders = [
            {**order, "status": status} if order.get("id") == order_id else order
            for order in user.orders
        ]
        await self.client.table(USERS_TABLE).update({"orders": orders}).eq("id", user_id).execute()
        logger.info("Order status updated")
        return True
