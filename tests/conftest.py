from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Callable, Iterator

# Settings are read at import time; set test values before carbook loads.
os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-access-secret")
os.environ.setdefault("REFRESH_TOKEN_SECRET", "test-refresh-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault(
    "LOG_FILE_PATH", str(Path(tempfile.gettempdir()) / "carbook-tests" / "app.log")
)

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from carbook.core.config import settings
from carbook.core.rate_limiter import login_rate_limiter
from carbook.core.security import hash_password
from carbook.db.database import get_db, init_db
from carbook.models.user import User, UserRole
from carbook.repositories.user_repository import UserRepository

from tests.helpers import PASSWORD


@pytest.fixture
def database(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    db_file = tmp_path / "carbook.db"
    monkeypatch.setattr(settings, "DATABASE_URL", f"sqlite:///{db_file}")
    monkeypatch.setattr(settings, "ENVIRONMENT", "development")
    init_db()
    login_rate_limiter.reset()
    yield db_file
    login_rate_limiter.reset()


@pytest.fixture
def conn(database: Path):
    with get_db() as connection:
        yield connection


@pytest.fixture
def make_user(database: Path) -> Callable[..., User]:
    def _make(
        email: str = "driver@example.com",
        password: str = PASSWORD,
        role: UserRole = UserRole.USER,
    ) -> User:
        with get_db() as connection:
            return UserRepository(connection).create(
                email=email, hashed_password=hash_password(password), role=role
            )

    return _make


@pytest.fixture
def app(database: Path) -> FastAPI:
    from carbook.main import create_app

    return create_app()


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client
