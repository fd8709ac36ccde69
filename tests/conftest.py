"""
Test configuration and fixtures.
"""
import os

# Settings are read once at import time, so configure them before importing the app.
os.environ["LOG_FILE_PATH"] = ""
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SECRET_KEY"] = "test-secret-key"

from typing import Generator

import pytest
from fastapi.testclient import TestClient

from store_ratings.core.config import settings
from store_ratings.db.database import Database
from store_ratings.main import create_app

PASSWORD = "Password1"


@pytest.fixture
def database(tmp_path) -> Database:
    """A database handle pointing at a fresh file for each test."""
    return Database(str(tmp_path / "store_ratings_test.db"))


@pytest.fixture
def conn(database: Database):
    """A raw connection on an initialised schema, for repository/service tests."""
    database.open()
    with database.session() as connection:
        yield connection


@pytest.fixture
def client(database: Database) -> Generator[TestClient, None, None]:
    """Test client; entering it runs startup (schema + admin seed)."""
    app = create_app(database)
    with TestClient(app) as c:
        yield c


def login(client: TestClient, email: str, password: str = PASSWORD) -> dict:
    """Log in and return ready-to-use auth headers."""
    response = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def admin_headers(client: TestClient) -> dict:
    return login(client, settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD)


@pytest.fixture
def create_account(client: TestClient, admin_headers: dict):
    """Factory: admin creates an account and the new account's auth headers are returned."""
    def _create(name: str, email: str, role: str = "user") -> tuple[int, dict]:
        response = client.post(
            "/api/v1/admin/users",
            json={"name": name, "email": email, "password": PASSWORD, "role": role},
            headers=admin_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["id"], login(client, email)

    return _create


@pytest.fixture
def create_store(client: TestClient, admin_headers: dict):
    """Factory: admin creates a store for an existing owner and returns its id."""
    def _create(name: str, email: str, owner_id: int, address: str = "1 Market Street") -> int:
        response = client.post(
            "/api/v1/admin/stores",
            json={"name": name, "email": email, "address": address, "owner_id": owner_id},
            headers=admin_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["id"]

    return _create
