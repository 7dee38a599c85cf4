from __future__ import annotations

from datetime import timedelta

import pytest
from jose import JWTError
from jose.exceptions import ExpiredSignatureError

from carbook.core.config import settings
from carbook.core.exceptions import ConfigError
from carbook.core.security import (
    ACCESS,
    REFRESH,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)


def test_password_hash_is_one_way_and_verifies() -> None:
    hashed = hash_password("secret1")

    assert hashed != "secret1"
    assert verify_password("secret1", hashed)
    assert not verify_password("secret2", hashed)


def test_access_token_carries_identity_claims() -> None:
    token = create_access_token(7, "a@example.com", "admin")

    claims = decode_token(token, ACCESS)

    assert claims["id"] == 7
    assert claims["email"] == "a@example.com"
    assert claims["role"] == "admin"
    assert claims["exp"] - claims["iat"] == settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60


def test_refresh_token_has_no_role_and_one_day_lifetime() -> None:
    token = create_refresh_token(7, "a@example.com")

    claims = decode_token(token, REFRESH)

    assert "role" not in claims
    assert claims["exp"] - claims["iat"] == 24 * 60 * 60


def test_token_kinds_are_not_interchangeable() -> None:
    access = create_access_token(1, "a@example.com", "user")
    refresh = create_refresh_token(1, "a@example.com")

    with pytest.raises(JWTError):
        decode_token(access, REFRESH)
    with pytest.raises(JWTError):
        decode_token(refresh, ACCESS)


def test_expired_token_is_rejected_even_with_valid_signature() -> None:
    token = create_access_token(1, "a@example.com", "user", expires_delta=timedelta(seconds=-5))

    with pytest.raises(ExpiredSignatureError):
        decode_token(token, ACCESS)


def test_missing_secret_is_a_config_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "ACCESS_TOKEN_SECRET", None)

    with pytest.raises(ConfigError):
        create_access_token(1, "a@example.com", "user")
    with pytest.raises(ConfigError):
        decode_token("whatever", ACCESS)
