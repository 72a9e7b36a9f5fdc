"""Pytest configuration and fixtures."""

import asyncio

import pytest
from fastapi.testclient import TestClient

from support_network_api.app.core.config import settings
from support_network_api.app.core.db import init_db
from support_network_api.app.main import app
from support_network_api.app.services.user_service import UserService



@pytest.fixture(autouse=True)
def database(tmp_path, monkeypatch):
    """Point every test at a fresh, migrated SQLite file."""
    db_file = tmp_path / "test.db"
    monkeypatch.setattr(settings, "database_url", str(db_file))
    init_db()
    return db_file


@pytest.fixture
def client():
    """Anonymous test client."""
    return TestClient(app)


@pytest.fixture
def users():
    """Register alice and bob; returns their ids by username."""
    alice = asyncio.run(UserService.create_user("alice", "alice123"))
    bob = asyncio.run(UserService.create_user("bob", "bob123"))
    return {"alice": alice.id, "bob": bob.id}


@pytest.fixture
def login():
    """Factory returning a test client logged in as the given user.

    Each client has its own cookie jar, like a separate browser.
    """

    def _login(username, password):
        logged_in = TestClient(app)
        response = logged_in.post("/api/v1/login", json={"username": username, "password": password})
        assert response.status_code == 200, response.text
        logged_in.headers["Authorization"] = f"Bearer {response.json()['access_token']}"
        return logged_in

    return _login
