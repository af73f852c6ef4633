"""Pytest configuration and fixtures"""
import asyncio
import json
import os
from typing import Optional
from unittest.mock import AsyncMock, Mock

import pytest

# Set test environment variables
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test_key")
os.environ.setdefault("UPSTASH_REDIS_REST_URL", "https://test.upstash.io")
os.environ.setdefault("UPSTASH_REDIS_REST_TOKEN", "test_token")
os.environ.setdefault("PRINTIFY_API_KEY", "test_printify_key")
os.environ.setdefault("PRINTIFY_SHOP_ID", "shop-1")

from core.cart import CartStore, DocumentCartBackend, LocalCartBackend  # noqa: E402


class FakeRedis:
    """In-memory stand-in for the async Upstash client."""

    def __init__(self, delay: float = 0):
        self.data: dict[str, str] = {}
        self.delay = delay
        self.fail_writes = False
        self.writes: list[str] = []

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str, ex: Optional[int] = None):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_writes:
            raise ConnectionError("redis unreachable")
        self.data[key] = value
        self.writes.append(value)
        return True

    async def delete(self, key: str) -> int:
        return 1 if self.data.pop(key, None) is not None else 0

    def cart(self, device_id: str):
        raw = self.data.get(f"snake-cart:{device_id}")
        return json.loads(raw) if raw else None


class FakeUserRepository:
    """In-memory `users` table keyed by user ID, cart methods only."""

    def __init__(self):
        self.carts: dict[str, list] = {}
        self.fail_writes = False
        self.fail_reads = False

    async def get_cart(self, user_id: str):
        if self.fail_reads:
            raise ConnectionError("postgres unreachable")
        return self.carts.get(user_id)

    async def set_cart(self, user_id: str, cart: list) -> None:
        if self.fail_writes:
            raise ConnectionError("postgres unreachable")
        self.carts[user_id] = cart


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def slow_redis():
    """Redis whose writes yield to the event loop first"""
    return FakeRedis(delay=0.01)


@pytest.fixture
def fake_users():
    return FakeUserRepository()


@pytest.fixture
def cart_store(fake_redis, fake_users):
    """Cart store for device-1, not yet resolved"""
    return CartStore(
        document_store=DocumentCartBackend(fake_users),
        local_store=LocalCartBackend(fake_redis, "device-1"),
    )


@pytest.fixture
def mock_supabase_client():
    """Mock async Supabase client; set table_mock.execute.return_value.data per test"""
    client = Mock()

    table_mock = Mock()
    for method in ("select", "insert", "update", "delete", "upsert", "eq", "order", "limit"):
        getattr(table_mock, method).return_value = table_mock
    table_mock.execute = AsyncMock(return_value=Mock(data=[]))

    client.table.return_value = table_mock
    client.auth = Mock()
    client.auth.get_user = AsyncMock()
    client.auth.admin = Mock()
    client.auth.admin.update_user_by_id = AsyncMock()
    client.auth.admin.delete_user = AsyncMock()

    return client


@pytest.fixture
def sample_user():
    """Sample user record"""
    return {
        "id": "user-123",
        "name": "Test User",
        "email": "test@example.com",
        "is_admin": False,
        "banned": False,
        "orders": [
            {"id": "order-1", "status": "pending", "total": "$25.00"},
            {"id": "order-2", "status": "shipped", "total": "$10.00"},
        ],
        "cart": [],
        "created_at": "2025-01-01T00:00:00+00:00",
    }


@pytest.fixture
def sample_product():
    """Catalog product as served by /api/products"""
    return {
        "id": "P1",
        "title": "Snake Hoodie",
        "price": "$10.00",
        "images": ["i.png", "j.png"],
        "variants": [
            {"id": "V1", "label": "Small", "price": "$10.00"},
            {"id": "V2", "label": "Large", "price": "$12.00"},
        ],
    }
