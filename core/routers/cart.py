"""
Cart API Router

HTTP surface over CartStore. Each request resolves its session once:
a bearer token selects the user's cart, otherwise the X-Device-Id
header selects the guest cart.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from pydantic import BaseModel
from supabase._async.client import AsyncClient

from core.auth import AuthPrincipal, optional_principal
from core.cart import CartStore, build_cart_store
from core.errors import (
    ERROR_CART_UNAVAILABLE,
    ERROR_MISSING_DEVICE_ID,
    InvalidArgument,
    PersistenceFault,
)
from core.logging import get_logger
from core.routers.deps import get_redis_client, get_supabase_client

logger = get_logger(__name__)

router = APIRouter(prefix="/api/cart", tags=["cart"])


# ==================== PYDANTIC MODELS ====================

class AddItemRequest(BaseModel):
    product: dict[str, Any]
    variantId: Any
    variantLabel: str = ""
    quantity: int = 1


class SetQuantityRequest(BaseModel):
    productId: Any
    variantId: Any
    quantity: int


class RemoveItemRequest(BaseModel):
    productId: Any
    variantId: Any


# ==================== DEPENDENCIES ====================

async def get_cart_store(
    principal: Optional[AuthPrincipal] = Depends(optional_principal),
    x_device_id: Optional[str] = Header(None, alias="X-Device-Id"),
    client: AsyncClient = Depends(get_supabase_client),
    redis: Any = Depends(get_redis_client),
) -> CartStore:
    """Build the request's cart store and load the session's cart."""
    if principal is None and not x_device_id:
        raise HTTPException(status_code=400, detail=ERROR_MISSING_DEVICE_ID)

    store = build_cart_store(client, redis, device_id=x_device_id or "")
    try:
        await store.handle_session_change(principal.id if principal else None)
    except PersistenceFault as e:
        logger.warning(f"Cart load failed ({e.target}): {e}")
        raise HTTPException(status_code=503, detail=ERROR_CART_UNAVAILABLE) from e
    return store


def _cart_response(store: CartStore) -> dict:
    return {
        "items": [item.to_dict() for item in store.get_items()],
        "count": store.get_count(),
        "total": store.get_total(),
    }


async def _run(operation) -> None:
    """Await a cart mutation, mapping cart errors to HTTP errors."""
    try:
        await operation
    except InvalidArgument as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except PersistenceFault as e:
        logger.warning(f"Cart write failed ({e.target}): {e}")
        raise HTTPException(status_code=503, detail=ERROR_CART_UNAVAILABLE) from e


# ==================== ENDPOINTS ====================

@router.get("")
async def get_cart(store: CartStore = Depends(get_cart_store)):
    """Current cart with count and total"""
    return _cart_response(store)


@router.post("/items")
async def add_cart_item(request: AddItemRequest, store: CartStore = Depends(get_cart_store)):
    """Add a product variant to the cart"""
    await _run(
        store.add_item(request.product, request.variantId, request.variantLabel, request.quantity)
    )
    return _cart_response(store)


@router.patch("/items")
async def set_cart_item_quantity(
    request: SetQuantityRequest, store: CartStore = Depends(get_cart_store)
):
    """Set a line's quantity (0 removes it)"""
    await _run(store.set_quantity(request.productId, request.variantId, request.quantity))
    return _cart_response(store)


@router.delete("/items")
async def remove_cart_item(request: RemoveItemRequest, store: CartStore = Depends(get_cart_store)):
    """Remove a line"""
    await _run(store.remove_item(request.productId, request.variantId))
    return _cart_response(store)


@router.delete("")
async def clear_cart(store: CartStore = Depends(get_cart_store)):
    """Empty the cart"""
    await _run(store.clear())
    return _cart_response(store)
