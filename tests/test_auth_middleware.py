"""Tests for Supabase bearer-token authentication."""

from unittest.mock import MagicMock, patch

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from app.core.auth_middleware import AuthContext, get_current_user, require_auth


def _credentials(token="jwt-token"):
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


@pytest.mark.asyncio
async def test_valid_token_resolves_user():
    supabase = MagicMock()
    supabase.auth.get_user.return_value = MagicMock(
        user=MagicMock(id="user-123", email="runner@example.com")
    )
    with patch("app.core.auth_middleware.get_supabase", return_value=supabase):
        auth = await get_current_user(_credentials())

    assert auth.user_id == "user-123"
    assert auth.email == "runner@example.com"
    assert auth.token == "jwt-token"
    supabase.auth.get_user.assert_called_once_with("jwt-token")


@pytest.mark.asyncio
async def test_no_credentials():
    assert await get_current_user(None) is None


@pytest.mark.asyncio
async def test_rejected_token():
    supabase = MagicMock()
    supabase.auth.get_user.side_effect = Exception("invalid JWT")
    with patch("app.core.auth_middleware.get_supabase", return_value=supabase):
        assert await get_current_user(_credentials()) is None


@pytest.mark.asyncio
async def test_require_auth():
    user = AuthContext(user_id="user-123", token="t")
    assert await require_auth(user) is user

    with pytest.raises(HTTPException) as exc_info:
        await require_auth(None)
    assert exc_info.value.status_code == 401
