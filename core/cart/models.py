"""Cart models: line items, session mode and cart events."""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Hashable, Iterable, List, Optional, Tuple

from core.logging import get_logger
from core.services.money import multiply, parse_price_text

logger = get_logger(__name__)

LineKey = Tuple[Hashable, Hashable]


@dataclass
class LineItem:
    """One product variant in the cart."""
    product_id: Any
    variant_id: Any
    variant_label: str = ""
    title: str = ""
    price: str = ""  # display text, e.g. "$10.00"
    image: str = ""
    quantity: int = 1

    @property
    def key(self) -> LineKey:
        """Identity of the line: (product_id, variant_id)."""
        return (self.product_id, self.variant_id)

    @property
    def unit_price(self) -> Decimal:
        """Parsed unit price, 0 when the text is not a number."""
        return parse_price_text(self.price)

    @property
    def line_total(self) -> Decimal:
        return multiply(self.unit_price, self.quantity)

    def to_dict(self) -> dict:
        """Stored shape, same keys the web client wrote."""
        return {
            "productId": self.product_id,
            "title": self.title,
            "variantId": self.variant_id,
            "variantLabel": self.variant_label,
            "price": self.price,
            "image": self.image,
            "quantity": self.quantity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LineItem":
        """Create from the stored shape.

        Raises:
            KeyError: productId or variantId missing
            ValueError: quantity is not a positive integer
        """
        quantity = data.get("quantity", 1)
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValueError(f"invalid quantity: {quantity!r}")
        return cls(
            product_id=data["productId"],
            variant_id=data["variantId"],
            variant_label=data.get("variantLabel") or "",
            title=data.get("title") or "",
            price=data.get("price") or "",
            image=data.get("image") or "",
            quantity=quantity,
        )


def deserialize_cart(raw: Optional[Iterable[Any]]) -> List[LineItem]:
    """Build an ordered cart from stored entries.

    Malformed entries are skipped. Entries repeating an earlier key are
    folded into the first occurrence so keys stay unique.
    """
    items: List[LineItem] = []
    by_key: dict = {}
    for entry in raw or []:
        try:
            item = LineItem.from_dict(entry)
            existing = by_key.get(item.key)
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Skipping malformed cart entry: {e}")
            continue
        if existing is not None:
            existing.quantity += item.quantity
            continue
        by_key[item.key] = item
        items.append(item)
    return items


def serialize_cart(items: Iterable[LineItem]) -> List[dict]:
    return [item.to_dict() for item in items]


@dataclass(frozen=True)
class SessionMode:
    """Guest when principal_id is None, Authenticated otherwise."""
    principal_id: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.principal_id is not None

    @classmethod
    def guest(cls) -> "SessionMode":
        return cls(principal_id=None)

    @classmethod
    def authenticated(cls, principal_id: str) -> "SessionMode":
        return cls(principal_id=principal_id)


@dataclass(frozen=True)
class CartEvent:
    """Published to cart subscribers after a persisted change or reload."""
    kind: str  # item_added | changed | loaded
    count: int
    title: Optional[str] = None
    mode: SessionMode = field(default_factory=SessionMode)


CART_EVENT_ITEM_ADDED = "item_added"
CART_EVENT_CHANGED = "changed"
CART_EVENT_LOADED = "loaded"
