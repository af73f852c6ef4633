"""
Shared Dependencies for Routers

Client singletons wrapped as FastAPI dependencies so tests can swap
them with app.dependency_overrides.
"""

from typing import Any

from fastapi import Depends
from supabase._async.client import AsyncClient

from core.db import get_redis, get_supabase
from core.services.catalog import CatalogService, get_catalog_service
from core.services.repositories import UserRepository


async def get_supabase_client() -> AsyncClient:
    return await get_supabase()


async def get_user_repository(
    client: AsyncClient = Depends(get_supabase_client),
) -> UserRepository:
    return UserRepository(client)


def get_redis_client() -> Any:
    return get_redis()


def get_catalog() -> CatalogService:
    return get_catalog_service()
