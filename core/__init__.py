"""
SNAKE Storefront Core Module

This package contains the core components:
- db: Supabase and Upstash Redis clients
- cart: session cart store and its persistence backends
- auth: Supabase Auth verification and auth state notifications
- services: catalog proxy, repositories, money helpers, models
- routers: FastAPI routers

Note: Imports are lazy to keep serverless cold starts cheap.
"""

__all__ = [
    "get_supabase",
    "get_redis",
]


def __getattr__(name):
    """Lazy attribute access for clean serverless loading."""
    if name == "get_supabase":
        from core.db import get_supabase
        return get_supabase
    elif name == "get_redis":
        from core.db import get_redis
        return get_redis
    raise AttributeError(f"module 'core' has no attribute '{name}'")
