"""
Common Error Constants and Exceptions

Message constants are shared by routers so the same text is returned
from every endpoint (SonarQube S1192).
"""

# Auth errors
ERROR_UNAUTHORIZED = "Unauthorized"
ERROR_INVALID_TOKEN = "Invalid or expired token"
ERROR_FORBIDDEN_NOT_ADMIN = "Forbidden - not an admin"

# User errors
ERROR_USER_NOT_FOUND = "User not found"
ERROR_MISSING_USER_ACTION = "Missing userId or action"
ERROR_INVALID_ACTION = "Invalid action"
ERROR_MISSING_ORDER_FIELDS = "Missing userId, orderId or status"
ERROR_MISSING_NAME = "Please enter your name."

# Cart errors
ERROR_CART_UNAVAILABLE = "Cart storage unavailable"
ERROR_MISSING_DEVICE_ID = "Missing X-Device-Id header"

# Catalog errors
ERROR_CATALOG_NOT_CONFIGURED = "Printify credentials not configured."

# Generic errors
ERROR_INTERNAL = "Internal server error"


class StorefrontError(Exception):
    """Base class for all storefront errors."""


class CartError(StorefrontError):
    """Base class for cart store errors."""


class PersistenceFault(CartError):
    """A cart backend read or write failed.

    The in-memory cart keeps the change that triggered the write; only
    the persisted copy is stale.
    """

    def __init__(self, message: str, *, target: str = "") -> None:
        super().__init__(message)
        self.target = target


class InvalidArgument(CartError, ValueError):
    """A cart operation was called with an unusable argument."""


class CatalogError(StorefrontError):
    """Printify request failed or is not configured."""

    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail
