"""Tests for auth state notifications and token verification"""
import pytest
from fastapi import HTTPException
from unittest.mock import AsyncMock, Mock, patch

from core.auth import AuthStateNotifier, optional_principal, verify_admin, verify_bearer_token
from core.auth.supabase import AuthPrincipal


@pytest.mark.asyncio
async def test_notifier_calls_handlers_in_order():
    notifier = AuthStateNotifier()
    calls = []

    async def first(principal_id):
        calls.append(("first", principal_id))

    notifier.on_session_mode_change(first)
    notifier.on_session_mode_change(lambda principal_id: calls.append(("second", principal_id)))

    await notifier.sign_in("user-1")
    await notifier.sign_out()

    assert calls == [("first", "user-1"), ("second", "user-1"), ("first", None), ("second", None)]
    assert notifier.principal_id is None


@pytest.mark.asyncio
async def test_notifier_unsubscribe():
    notifier = AuthStateNotifier()
    calls = []
    unsubscribe = notifier.on_session_mode_change(calls.append)

    unsubscribe()
    await notifier.notify("user-1")

    assert calls == []


@pytest.mark.asyncio
async def test_verify_bearer_token_missing_header():
    with pytest.raises(HTTPException) as exc_info:
        await verify_bearer_token(authorization=None)

    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_verify_bearer_token_valid(mock_supabase_client):
    mock_supabase_client.auth.get_user.return_value = Mock(user=Mock(id="user-123", email="t@e.st"))

    with patch("core.auth.supabase.get_supabase", AsyncMock(return_value=mock_supabase_client)):
        principal = await verify_bearer_token(authorization="Bearer good-token")

    assert principal == AuthPrincipal(id="user-123", email="t@e.st")
    mock_supabase_client.auth.get_user.assert_awaited_once_with("good-token")


@pytest.mark.asyncio
async def test_verify_bearer_token_rejected(mock_supabase_client):
    mock_supabase_client.auth.get_user.side_effect = RuntimeError("invalid JWT")

    with patch("core.auth.supabase.get_supabase", AsyncMock(return_value=mock_supabase_client)):
        with pytest.raises(HTTPException) as exc_info:
            await verify_bearer_token(authorization="Bearer expired")

    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_optional_principal_guest():
    assert await optional_principal(authorization=None) is None


@pytest.mark.asyncio
async def test_verify_admin_forbidden(mock_supabase_client, sample_user):
    mock_supabase_client.table.return_value.execute.return_value = Mock(data=[sample_user])

    with patch("core.auth.supabase.get_supabase", AsyncMock(return_value=mock_supabase_client)):
        with pytest.raises(HTTPException) as exc_info:
            await verify_admin(principal=AuthPrincipal(id="user-123"))

    assert exc_info.value.status_code == 403


@pytest.mark.asyncio
async def test_verify_admin_allowed(mock_supabase_client, sample_user):
    admin_row = {**sample_user, "is_admin": True}
    mock_supabase_client.table.return_value.execute.return_value = Mock(data=[admin_row])

    with patch("core.auth.supabase.get_supabase", AsyncMock(return_value=mock_supabase_client)):
        record = await verify_admin(principal=AuthPrincipal(id="user-123"))

    assert record.is_admin is True
