"""Database and catalog models - Pydantic models for all entities."""
from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class CatalogVariant(BaseModel):
    """One purchasable option of a catalog product (size, colour)."""
    id: Union[int, str]
    label: str
    price: str


class CatalogProduct(BaseModel):
    """Product as served to the storefront by /api/products."""
    model_config = ConfigDict(extra="ignore")

    id: str
    title: str = ""
    description: str = ""
    price: str = "See options"  # "$12.50" or "See options"
    images: list[str] = Field(default_factory=list)
    variants: list[CatalogVariant] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    collections: list[str] = Field(default_factory=list)
    url: str = ""


class UserRecord(BaseModel):
    """Row of the `users` table."""
    model_config = ConfigDict(extra="ignore")

    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    is_admin: bool = False
    banned: bool = False
    orders: list[dict[str, Any]] = Field(default_factory=list)
    cart: Optional[list[dict[str, Any]]] = None  # serialized line items
    created_at: Optional[datetime] = None

    def to_admin_dict(self) -> dict:
        """Shape returned by the admin users listing."""
        data = self.model_dump(exclude={"created_at"})
        data["uid"] = data.pop("id")
        data["createdAt"] = self.created_at.isoformat() if self.created_at else None
        return data
