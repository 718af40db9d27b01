import os
from dataclasses import dataclass

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient

from resume_builder.core.rate_limiter import rate_limiter
from resume_builder.database import get_db
from resume_builder.dependencies import get_current_user
from resume_builder.main import app


@dataclass
class StubUser:
    id: str = "user-1"
    email: str = "user@example.com"
    name: str | None = "Jane Doe"
    is_active: bool = True
    password_hash: str = "hashed-password"


class StubDB:
    def __init__(self):
        self.committed = 0
        self.rolled_back = 0

    def commit(self):
        self.committed += 1

    def rollback(self):
        self.rolled_back += 1


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    rate_limiter.reset()
    yield
    rate_limiter.reset()


@pytest.fixture
def stub_user() -> StubUser:
    return StubUser()


@pytest.fixture
def stub_db() -> StubDB:
    return StubDB()


@pytest.fixture
def client(stub_user: StubUser, stub_db: StubDB):
    def _db_override():
        yield stub_db

    app.dependency_overrides[get_db] = _db_override
    app.dependency_overrides[get_current_user] = lambda: stub_user
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def anon_client(stub_db: StubDB):
    def _db_override():
        yield stub_db

    app.dependency_overrides[get_db] = _db_override
    yield TestClient(app)
    app.dependency_overrides.clear()
