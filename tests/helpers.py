from __future__ import annotations

from fastapi.testclient import TestClient

PASSWORD = "secret1"


def login(client: TestClient, email: str, password: str = PASSWORD) -> dict[str, str]:
    """Log in through the API and return a bearer header for the access token."""
    response = client.post("/api/auth", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['accessToken']}"}
