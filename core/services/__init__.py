# Services Module
from .models import CatalogProduct, CatalogVariant, UserRecord

__all__ = ["CatalogProduct", "CatalogVariant", "UserRecord"]
