"""Health and startup tests."""

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, inspect
from sqlalchemy.pool import StaticPool

from mindcalm.db import session
from mindcalm.main import app


def test_health_returns_ok(client):
    """GET /health returns { status: ok }."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_storage_table_created_on_startup(monkeypatch):
    """Tables are created when the app starts, not when it is imported."""
    fresh = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    monkeypatch.setattr(session, "engine", fresh)
    assert not inspect(fresh).has_table("storage_entries")

    with TestClient(app):
        assert inspect(fresh).has_table("storage_entries")
