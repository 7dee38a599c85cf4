from __future__ import annotations

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from carbook.core.config import settings
from carbook.core.security import create_access_token, decode_token, ACCESS
from tests.helpers import PASSWORD, login


def test_login_returns_access_token_and_sets_refresh_cookie(client: TestClient, make_user) -> None:
    user = make_user(email="owner@example.com")

    response = client.post("/api/auth", json={"email": "owner@example.com", "password": PASSWORD})

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"accessToken"}
    assert decode_token(body["accessToken"], ACCESS)["id"] == user.id
    assert "jwt" in client.cookies

    set_cookie = response.headers["set-cookie"].lower()
    assert "httponly" in set_cookie
    assert "samesite=lax" in set_cookie
    assert "max-age=86400" in set_cookie
    assert "secure" not in set_cookie


def test_production_cookie_is_secure_and_cross_site(
    client: TestClient, make_user, monkeypatch: pytest.MonkeyPatch
) -> None:
    make_user(email="owner@example.com")
    monkeypatch.setattr(settings, "ENVIRONMENT", "production")

    response = client.post("/api/auth", json={"email": "owner@example.com", "password": PASSWORD})

    set_cookie = response.headers["set-cookie"].lower()
    assert "secure" in set_cookie
    assert "samesite=none" in set_cookie


def test_login_with_unknown_user_is_unauthorized(client: TestClient) -> None:
    response = client.post("/api/auth", json={"email": "a@example.com", "password": "secret1"})

    assert response.status_code == 401
    assert response.json() == {"message": "Unauthorized"}
    assert "jwt" not in client.cookies


def test_login_with_wrong_password_looks_like_unknown_user(client: TestClient, make_user) -> None:
    make_user(email="owner@example.com")

    response = client.post("/api/auth", json={"email": "owner@example.com", "password": "nope12"})

    assert response.status_code == 401
    assert response.json() == {"message": "Unauthorized"}


@pytest.mark.parametrize(
    "payload",
    [{}, {"email": "owner@example.com"}, {"password": "secret1"}, {"email": "", "password": ""}],
)
def test_login_with_missing_fields_is_bad_request(client: TestClient, payload: dict) -> None:
    response = client.post("/api/auth", json=payload)

    assert response.status_code == 400
    assert "message" in response.json()


def test_me_with_bearer_token_returns_profile(client: TestClient, make_user) -> None:
    user = make_user(email="owner@example.com")
    headers = login(client, "owner@example.com")

    response = client.get("/api/users/me", headers=headers)

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == user.id
    assert body["email"] == "owner@example.com"
    assert body["role"] == "user"
    assert "hashed_password" not in body


def test_me_without_token_is_unauthorized(client: TestClient) -> None:
    response = client.get("/api/users/me")

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


def test_me_with_malformed_header_is_unauthorized(client: TestClient) -> None:
    response = client.get("/api/users/me", headers={"Authorization": "Token abc"})

    assert response.status_code == 401


def test_me_with_forged_token_is_forbidden(client: TestClient, make_user) -> None:
    user = make_user(email="owner@example.com")
    forged = jwt.encode(
        {"id": user.id, "email": user.email, "role": "admin", "exp": 4102444800},
        "attacker-secret",
        algorithm="HS256",
    )

    response = client.get("/api/users/me", headers={"Authorization": f"Bearer {forged}"})

    assert response.status_code == 403
    assert response.json() == {"message": "Forbidden: Invalid token"}


def test_expired_access_token_recovers_through_refresh(client: TestClient, make_user) -> None:
    user = make_user(email="owner@example.com")
    login(client, "owner@example.com")
    expired = create_access_token(
        user.id, user.email, user.role.value, expires_delta=timedelta(minutes=-1)
    )

    first = client.get("/api/users/me", headers={"Authorization": f"Bearer {expired}"})
    refreshed = client.get("/api/auth/refresh")
    retried = client.get(
        "/api/users/me",
        headers={"Authorization": f"Bearer {refreshed.json()['accessToken']}"},
    )

    assert first.status_code in (401, 403)
    assert refreshed.status_code == 200
    assert retried.status_code == 200
    assert retried.json()["id"] == user.id


def test_refresh_does_not_rotate_the_cookie(client: TestClient, make_user) -> None:
    make_user(email="owner@example.com")
    login(client, "owner@example.com")

    response = client.get("/api/auth/refresh")

    assert response.status_code == 200
    assert "set-cookie" not in response.headers


def test_refresh_without_cookie_is_unauthorized(client: TestClient) -> None:
    response = client.get("/api/auth/refresh")

    assert response.status_code == 401


def test_refresh_with_invalid_cookie_is_forbidden(client: TestClient) -> None:
    client.cookies.set("jwt", "not-a-token")

    response = client.get("/api/auth/refresh")

    assert response.status_code == 403


def test_deleted_user_cannot_use_tokens(client: TestClient, make_user) -> None:
    user = make_user(email="owner@example.com")
    headers = login(client, "owner@example.com")

    assert client.delete(f"/api/users/{user.id}", headers=headers).status_code == 200

    assert client.get("/api/users/me", headers=headers).status_code == 401
    assert client.get("/api/auth/refresh").status_code == 401


def test_logout_clears_cookie_and_is_idempotent(client: TestClient, make_user) -> None:
    make_user(email="owner@example.com")
    login(client, "owner@example.com")

    first = client.post("/api/auth/logout")
    second = client.post("/api/auth/logout")

    assert first.status_code == 200
    assert first.json() == {"message": "Cookie cleared"}
    assert "jwt" not in client.cookies
    assert second.status_code == 204
    assert client.get("/api/auth/refresh").status_code == 401


def test_sixth_login_attempt_is_throttled_regardless_of_credentials(
    client: TestClient, make_user
) -> None:
    make_user(email="owner@example.com")
    for _ in range(5):
        response = client.post(
            "/api/auth", json={"email": "owner@example.com", "password": "wrong1"}
        )
        assert response.status_code == 401

    throttled = client.post("/api/auth", json={"email": "owner@example.com", "password": PASSWORD})

    assert throttled.status_code == 429
    assert "Too many login attempts" in throttled.json()["message"]
    assert "retry-after" in throttled.headers


def test_missing_signing_secret_is_internal_error(
    client: TestClient, make_user, monkeypatch: pytest.MonkeyPatch
) -> None:
    make_user(email="owner@example.com")
    monkeypatch.setattr(settings, "ACCESS_TOKEN_SECRET", None)

    me = client.get("/api/users/me", headers={"Authorization": "Bearer abc.def.ghi"})
    login_response = client.post(
        "/api/auth", json={"email": "owner@example.com", "password": PASSWORD}
    )

    for response in (me, login_response):
        assert response.status_code == 500
        assert response.json() == {"message": "Internal Server Error"}


def test_health_check(client: TestClient) -> None:
    response = client.get("/api/health-check")

    assert response.status_code == 200
    assert response.text == "OK"
