"""
Cart Store - session cart with guest/authenticated persistence.

One store per session. The in-memory cart is written to exactly one
backend after every mutation:
- Authenticated: `cart` field of the principal's user record
- Guest: the device's key in Redis

Mutations and session changes run one at a time, in call order, so an
earlier write can never land after a later one.

Usage:
    store = CartStore(document_backend, local_backend, identity=notifier)
    await notifier.notify(None)          # resolve guest mode, loads cart
    await store.wait_ready()
    await store.add_item(product, variant_id=101, variant_label="Small")
    store.get_total()                    # "10.00"
"""
import asyncio
import inspect
from dataclasses import replace
from typing import Any, Callable, List, Optional, Tuple

from core.errors import InvalidArgument
from core.logging import get_logger, sanitize_id_for_logging
from core.services.money import format_amount, sum_amounts

from .models import (
    CART_EVENT_CHANGED,
    CART_EVENT_ITEM_ADDED,
    CART_EVENT_LOADED,
    CartEvent,
    LineItem,
    SessionMode,
    deserialize_cart,
    serialize_cart,
)
from .storage import DocumentCartBackend, LocalCartBackend

logger = get_logger(__name__)

CartListener = Callable[[CartEvent], Any]


def _product_field(product: Any, name: str, default: Any = None) -> Any:
    """Read a field from a CatalogProduct or a plain mapping."""
    if isinstance(product, dict):
        value = product.get(name, default)
    else:
        value = getattr(product, name, default)
    return default if value is None else value


class CartStore:
    """
    In-memory cart kept in sync with one backend chosen by session mode.

    Until the first session change has been handled the store is not
    ready and reads return an empty cart. While a later session change
    is loading, reads return the previous session's cart. Use
    wait_ready() for a settled snapshot.

    Listeners are called after the lock is released, so they may call
    back into the store.
    """

    def __init__(
        self,
        document_store: DocumentCartBackend,
        local_store: LocalCartBackend,
        identity: Optional[Any] = None,
    ):
        self.document_store = document_store
        self.local_store = local_store
        self._items: List[LineItem] = []
        self._mode = SessionMode.guest()
        # asyncio.Lock wakes waiters in FIFO order
        self._lock = asyncio.Lock()
        self._ready = asyncio.Event()
        self._listeners: List[CartListener] = []

        if identity is not None:
            identity.on_session_mode_change(self.handle_session_change)

    # ---- Session ----

    @property
    def mode(self) -> SessionMode:
        return self._mode

    @property
    def ready(self) -> bool:
        return self._ready.is_set()

    async def wait_ready(self) -> None:
        """Wait until the current session's cart has been loaded. No timeout."""
        await self._ready.wait()

    async def handle_session_change(self, principal_id: Optional[str]) -> None:
        """
        Switch session mode and reload the cart from the new mode's store.

        The in-memory cart is replaced, not merged: a guest cart is
        discarded on sign-in and the device cart comes back on sign-out.

        Raises:
            PersistenceFault: If the new store cannot be read. Mode and
                cart stay as they were and readiness stays unset.
        """
        async with self._lock:
            self._ready.clear()
            mode = (
                SessionMode.authenticated(principal_id)
                if principal_id is not None
                else SessionMode.guest()
            )

            if mode.is_authenticated:
                raw = await self.document_store.load(principal_id)
            else:
                raw = await self.local_store.load()

            self._mode = mode
            self._items = deserialize_cart(raw)
            self._ready.set()
            owner = f"user {sanitize_id_for_logging(principal_id)}" if principal_id else "guest"
            logger.info(f"Cart loaded for {owner}: {len(self._items)} line(s)")
            event = self._event(CART_EVENT_LOADED)

        await self._publish(event)

    # ---- Mutations ----

    async def add_item(
        self,
        product: Any,
        variant_id: Any,
        variant_label: str,
        quantity: int = 1,
    ) -> Tuple[LineItem, ...]:
        """
        Add a product variant, or increase the quantity of its existing line.

        `product` may be a CatalogProduct or a mapping with the same keys.
        Missing product fields are tolerated; the line is stored with
        empty values for them.

        Returns:
            Cart snapshot after the write

        Raises:
            InvalidArgument: If quantity is not a positive integer
            PersistenceFault: If the write fails (the line stays in memory)
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise InvalidArgument("quantity must be a positive integer")

        product_id = _product_field(product, "id")
        title = _product_field(product, "title", "")

        async with self._lock:
            existing = self._find(product_id, variant_id)
            if existing:
                existing.quantity += quantity
            else:
                images = _product_field(product, "images", [])
                self._items.append(
                    LineItem(
                        product_id=product_id,
                        variant_id=variant_id,
                        variant_label=variant_label or "",
                        title=title,
                        price=_product_field(product, "price", ""),
                        image=images[0] if images else "",
                        quantity=quantity,
                    )
                )
            await self._persist()
            snapshot = self._snapshot()
            event = self._event(CART_EVENT_ITEM_ADDED, title=title)

        await self._publish(event)
        return snapshot

    async def remove_item(self, product_id: Any, variant_id: Any) -> Tuple[LineItem, ...]:
        """Remove a line. Removing a missing line still persists and succeeds."""
        async with self._lock:
            self._remove(product_id, variant_id)
            await self._persist()
            snapshot = self._snapshot()
            event = self._event(CART_EVENT_CHANGED)

        await self._publish(event)
        return snapshot

    async def set_quantity(
        self, product_id: Any, variant_id: Any, quantity: int
    ) -> Tuple[LineItem, ...]:
        """
        Set a line's quantity; 0 or less removes it.

        A missing line is not created.

        Raises:
            InvalidArgument: If quantity is not an integer
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise InvalidArgument("quantity must be an integer")

        async with self._lock:
            if quantity <= 0:
                self._remove(product_id, variant_id)
            else:
                item = self._find(product_id, variant_id)
                if item:
                    item.quantity = quantity
            await self._persist()
            snapshot = self._snapshot()
            event = self._event(CART_EVENT_CHANGED)

        await self._publish(event)
        return snapshot

    async def clear(self) -> Tuple[LineItem, ...]:
        async with self._lock:
            self._items = []
            await self._persist()
            snapshot = self._snapshot()
            event = self._event(CART_EVENT_CHANGED)

        await self._publish(event)
        return snapshot

    # ---- Queries ----

    def get_items(self) -> Tuple[LineItem, ...]:
        """Copies of the current lines in display order."""
        return self._snapshot()

    def get_total(self) -> str:
        """Sum of price x quantity with two decimals; bad prices count as 0."""
        return format_amount(sum_amounts(item.line_total for item in self._items))

    def get_count(self) -> int:
        return sum(item.quantity for item in self._items)

    # ---- Events ----

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Register a listener for CartEvent; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _event(self, kind: str, title: Optional[str] = None) -> CartEvent:
        return CartEvent(kind=kind, count=self.get_count(), title=title, mode=self._mode)

    async def _publish(self, event: CartEvent) -> None:
        for listener in list(self._listeners):
            try:
                result = listener(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.warning(f"Cart listener failed on {event.kind}: {e}")

    # ---- Internals ----

    def _find(self, product_id: Any, variant_id: Any) -> Optional[LineItem]:
        key = (product_id, variant_id)
        return next((item for item in self._items if item.key == key), None)

    def _remove(self, product_id: Any, variant_id: Any) -> None:
        key = (product_id, variant_id)
        self._items = [item for item in self._items if item.key != key]

    def _snapshot(self) -> Tuple[LineItem, ...]:
        return tuple(replace(item) for item in self._items)

    async def _persist(self) -> None:
        """Write the whole cart to the current mode's backend.

        In-memory state is not rolled back when this raises.
        """
        cart = serialize_cart(self._items)
        if self._mode.is_authenticated:
            await self.document_store.save(self._mode.principal_id, cart)
        else:
            await self.local_store.save(cart)
