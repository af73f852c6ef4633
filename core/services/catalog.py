"""
Catalog Service - Printify product proxy.

Fetches the shop's products from the Printify REST API and reshapes them
into the storefront product shape, so the API key never reaches the
browser.
"""
import os
from typing import Any, Optional

import httpx

from core.errors import CatalogError, ERROR_CATALOG_NOT_CONFIGURED
from core.logging import get_logger
from core.services.models import CatalogProduct, CatalogVariant
from core.services.money import format_price_text, from_cents

logger = get_logger(__name__)

PRINTIFY_API_URL = "https://api.printify.com/v1"
DEFAULT_PRODUCT_LIMIT = 50
MAX_IMAGES = 6
COLLECTION_TAG_PREFIX = "collection:"
NO_PRICE_TEXT = "See options"


def _price_text(cents: Any) -> Optional[str]:
    """Printify prices are integer cents; 0/None means no price."""
    if not cents:
        return None
    return format_price_text(from_cents(cents))


def reshape_product(raw: dict) -> CatalogProduct:
    """Convert one Printify product into a CatalogProduct."""
    variants_raw = raw.get("variants") or []
    first_price = _price_text(variants_raw[0].get("price")) if variants_raw else None
    price = first_price or NO_PRICE_TEXT

    images = [img["src"] for img in raw.get("images") or [] if img.get("src")][:MAX_IMAGES]

    tags = raw.get("tags") or []
    collections = [
        tag[len(COLLECTION_TAG_PREFIX):].strip()
        for tag in tags
        if tag.lower().startswith(COLLECTION_TAG_PREFIX)
    ]

    variants = [
        CatalogVariant(
            id=v["id"],
            label=v.get("title") or f"Variant {v['id']}",
            price=_price_text(v.get("price")) or price,
        )
        for v in variants_raw
        if v.get("is_enabled")
    ]

    return CatalogProduct(
        id=str(raw["id"]),
        title=raw.get("title") or "",
        description=raw.get("description") or "",
        price=price,
        images=images,
        variants=variants,
        tags=tags,
        collections=collections,
        url=f"/shop.html?product={raw['id']}",
    )


class CatalogService:
    """Printify catalog client."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        shop_id: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key if api_key is not None else os.environ.get("PRINTIFY_API_KEY", "")
        self.shop_id = shop_id if shop_id is not None else os.environ.get("PRINTIFY_SHOP_ID", "")
        self._http_client = http_client

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Lazy creation of shared httpx client with timeouts."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                base_url=PRINTIFY_API_URL,
                timeout=httpx.Timeout(10.0, connect=5.0),
            )
        return self._http_client

    async def close(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def list_products(self, limit: int = DEFAULT_PRODUCT_LIMIT) -> list[CatalogProduct]:
        """
        Fetch and reshape the shop's products.

        Raises:
            CatalogError: credentials missing (500) or Printify returned
                a non-2xx status (that status, response body as detail)
        """
        if not self.api_key or not self.shop_id:
            raise CatalogError(500, ERROR_CATALOG_NOT_CONFIGURED)

        client = await self._get_http_client()
        response = await client.get(
            f"/shops/{self.shop_id}/products.json",
            params={"limit": limit},
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
        )

        if response.is_error:
            logger.error(f"Printify API error: {response.status_code}")
            raise CatalogError(response.status_code, response.text)

        data = response.json()
        return [reshape_product(p) for p in data.get("data") or []]


_catalog_service: Optional[CatalogService] = None


def get_catalog_service() -> CatalogService:
    """Get CatalogService singleton."""
    global _catalog_service
    if _catalog_service is None:
        _catalog_service = CatalogService()
    return _catalog_service
