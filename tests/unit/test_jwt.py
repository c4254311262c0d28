"""Bearer token verification: owner id comes from sub."""

from datetime import timedelta

import pytest
from jose import jwt

from app.core.config import get_settings
from app.infrastructure.security.jwt import create_access_token, verify_token


def test_round_trip_returns_sub() -> None:
    token = create_access_token({"sub": "u1"})

    assert verify_token(token)["sub"] == "u1"


def test_expired_token_rejected() -> None:
    token = create_access_token({"sub": "u1"}, expires_delta=timedelta(seconds=-5))

    with pytest.raises(ValueError, match="expired"):
        verify_token(token)


def test_wrong_secret_rejected() -> None:
    token = jwt.encode({"sub": "u1", "exp": 9999999999}, "other-secret", algorithm="HS256")

    with pytest.raises(ValueError, match="Invalid token"):
        verify_token(token)


def test_missing_sub_rejected() -> None:
    settings = get_settings()
    token = jwt.encode(
        {"exp": 9999999999},
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )

    with pytest.raises(ValueError):
        verify_token(token)
