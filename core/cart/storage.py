"""Cart persistence backends.

- DocumentCartBackend: `cart` field of the principal's `users` row (Supabase)
- LocalCartBackend: one JSON string per device (Upstash Redis)

Both raise PersistenceFault when the underlying store fails.
"""
import json
from typing import Any, List, Optional

from core.db import RedisKeys, TTL
from core.errors import PersistenceFault
from core.logging import get_logger, sanitize_id_for_logging
from core.services.repositories import UserRepository

logger = get_logger(__name__)


class DocumentCartBackend:
    """Per-principal cart stored in the user record."""

    target = "document"

    def __init__(self, users: UserRepository):
        self.users = users

    async def load(self, principal_id: str) -> List[dict]:
        """Stored cart of the principal, [] when the record or field is absent."""
        try:
            cart = await self.users.get_cart(principal_id)
        except Exception as e:
            logger.error(
                f"Failed to read cart for user {sanitize_id_for_logging(principal_id)}: {e}"
            )
            raise PersistenceFault(f"Cart read failed: {e}", target=self.target) from e
        return list(cart or [])

    async def save(self, principal_id: str, cart: List[dict]) -> None:
        """Replace the whole cart field."""
        try:
            await self.users.set_cart(principal_id, cart)
        except Exception as e:
            logger.error(
                f"Failed to write cart for user {sanitize_id_for_logging(principal_id)}: {e}"
            )
            raise PersistenceFault(f"Cart write failed: {e}", target=self.target) from e


class LocalCartBackend:
    """Guest cart for one device, kept under a fixed key."""

    target = "local"

    def __init__(self, redis: Any, device_id: str, ttl: Optional[int] = TTL.GUEST_CART):
        self.redis = redis
        self.device_id = device_id
        self.ttl = ttl

    @property
    def key(self) -> str:
        return RedisKeys.guest_cart_key(self.device_id)

    async def load(self) -> List[dict]:
        """Stored guest cart, [] when the key is absent or corrupted."""
        try:
            data = await self.redis.get(self.key)
        except Exception as e:
            logger.error(f"Failed to read guest cart from Redis: {e}")
            raise PersistenceFault(f"Guest cart read failed: {e}", target=self.target) from e

        if not data:
            return []

        try:
            cart = json.loads(data)
            if not isinstance(cart, list):
                raise TypeError(f"expected a list, got {type(cart).__name__}")
            return cart
        except (json.JSONDecodeError, TypeError) as e:
            # Corrupted value - drop it and start over
            logger.warning(
                f"Corrupted guest cart for device {sanitize_id_for_logging(self.device_id)}: {e}"
            )
            try:
                await self.redis.delete(self.key)
            except Exception as delete_error:
                logger.warning(f"Failed to delete corrupted guest cart: {delete_error}")
            return []

    async def save(self, cart: List[dict]) -> None:
        try:
            if self.ttl:
                await self.redis.set(self.key, json.dumps(cart), ex=self.ttl)
            else:
                await self.redis.set(self.key, json.dumps(cart))
        except Exception as e:
            logger.error(f"Failed to write guest cart to Redis: {e}")
            raise PersistenceFault(f"Guest cart write failed: {e}", target=self.target) from e
