"""Unit tests for JWT verification and the get_current_user dependency."""

from datetime import UTC, datetime, timedelta

import pytest
from fastapi import HTTPException
from jose import jwt

from config.settings import settings
from src.mandi_common.enums import UserRole
from src.mandi_common.errors import InvalidCredentialsError
from src.mandi_gateway.auth.dependencies import get_current_user
from src.mandi_gateway.auth.jwt_handler import create_access_token, decode_token


def _raw_token(**claims) -> str:
    payload = {"sub": "user-1", "role": "vendor", "type": "access"}
    payload.update(claims)
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def test_access_token_claims() -> None:
    payload = jwt.get_unverified_claims(create_access_token("vendor-1", "vendor"))
    assert payload["sub"] == "vendor-1"
    assert payload["role"] == "vendor"
    assert payload["type"] == "access"


def test_decode_valid_token() -> None:
    assert decode_token(create_access_token("buyer-1", "b2b_buyer"))["sub"] == "buyer-1"


def test_expired_token_is_rejected() -> None:
    token = _raw_token(exp=datetime.now(UTC) - timedelta(minutes=1))
    with pytest.raises(InvalidCredentialsError):
        decode_token(token)


def test_wrong_secret_is_rejected() -> None:
    token = jwt.encode({"sub": "x", "type": "access"}, "other-secret", algorithm="HS256")
    with pytest.raises(InvalidCredentialsError):
        decode_token(token)


def test_non_access_token_is_rejected() -> None:
    with pytest.raises(InvalidCredentialsError):
        decode_token(_raw_token(type="refresh"))


async def test_current_user_from_token() -> None:
    user = await get_current_user(create_access_token("vendor-1", "vendor"))
    assert user.user_id == "vendor-1"
    assert user.role == UserRole.VENDOR
    assert user.is_vendor


async def test_unknown_role_is_401() -> None:
    with pytest.raises(HTTPException) as exc_info:
        await get_current_user(_raw_token(role="admin"))
    assert exc_info.value.status_code == 401


async def test_missing_subject_is_401() -> None:
    with pytest.raises(HTTPException):
        await get_current_user(_raw_token(sub=""))
