"""
FastAPI Routers Package

All routers are included in api/index.py.
"""

from core.routers.admin import router as admin_router
from core.routers.cart import router as cart_router
from core.routers.products import router as products_router
from core.routers.user import router as user_router

__all__ = [
    "admin_router",
    "cart_router",
    "products_router",
    "user_router",
]
