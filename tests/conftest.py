"""
Pytest fixtures for the watch ledger tests.

Provides a throwaway SQLite database per test, the application client and
logged-in users for every role.
"""
import os

# Cheap hashing for tests; must be set before the settings are imported
os.environ.setdefault("HASH_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from core.config import settings
from main import create_app

PASSWORD = "correct-horse-battery"


@pytest.fixture(scope='function')
def app(tmp_path, monkeypatch):
    """Application bound to a fresh database file."""
    monkeypatch.setattr(settings, "DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}")
    monkeypatch.setattr(settings, "AUTO_CREATE_TABLES", True)
    return create_app()


@pytest.fixture(scope='function')
def client(app):
    """Test client with the lifespan (tables, seeds, ledger store) running."""
    with TestClient(app) as test_client:
        yield test_client


def register(client, email, name=None, password=PASSWORD):
    resp = client.post(
        "/api/v1/auth/register",
        json={"name": name or email.split("@")[0], "email": email, "password": password},
    )
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]


def login(client, email, password=PASSWORD):
    resp = client.post("/api/v1/auth/login", data={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]


def auth_headers(client, email, password=PASSWORD):
    return {"Authorization": f"Bearer {login(client, email, password)['access_token']}"}


@pytest.fixture(scope='function')
def director(client):
    """Headers of the first account, which becomes the director."""
    register(client, "director@ledger.test", name="Director")
    return auth_headers(client, "director@ledger.test")


@pytest.fixture(scope='function')
def make_user(client, director):
    """Register an account, let the director assign its role, return its headers."""
    def _make(role, email, partner_id=None, active=True):
        user = register(client, email)
        update = {"role": role, "active": active}
        if partner_id:
            update["partner_id"] = partner_id
        resp = client.put(f"/api/v1/users/{user['id']}", json=update, headers=director)
        assert resp.status_code == 200, resp.text
        if not active:
            return None
        return auth_headers(client, email)
    return _make


@pytest.fixture(scope='function')
def operator(make_user):
    return make_user("operator", "operator@ledger.test")


@pytest.fixture(scope='function')
def partners(client, director):
    """Partner table of two partners splitting 40/60, keyed by name."""
    resp = client.put(
        "/api/v1/partners/",
        json={"partners": [
            {"name": "Ana", "participation": "40"},
            {"name": "Beto", "participation": "60"},
        ]},
        headers=director,
    )
    assert resp.status_code == 200, resp.text
    return {p["name"]: p["id"] for p in resp.json()["data"]["partners"]}
