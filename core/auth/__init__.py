"""Authentication package."""
from .state import AuthStateNotifier
from .supabase import AuthPrincipal, optional_principal, verify_admin, verify_bearer_token

__all__ = [
    "AuthPrincipal",
    "AuthStateNotifier",
    "optional_principal",
    "verify_admin",
    "verify_bearer_token",
]
