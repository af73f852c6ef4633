"""Cart package: models, storage backends and the session cart store."""
from typing import Any, Optional

from core.services.repositories import UserRepository

from .models import CartEvent, LineItem, SessionMode
from .service import CartStore
from .storage import DocumentCartBackend, LocalCartBackend


def build_cart_store(
    supabase_client: Any,
    redis: Any,
    device_id: str,
    identity: Optional[Any] = None,
) -> CartStore:
    """Wire a CartStore for one session from the shared clients."""
    return CartStore(
        document_store=DocumentCartBackend(UserRepository(supabase_client)),
        local_store=LocalCartBackend(redis, device_id),
        identity=identity,
    )


__all__ = [
    "CartEvent",
    "CartStore",
    "DocumentCartBackend",
    "LineItem",
    "LocalCartBackend",
    "SessionMode",
    "build_cart_store",
]
