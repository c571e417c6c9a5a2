"""Pytest fixtures."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from mindcalm.core.config import settings
from mindcalm.db import session
from mindcalm.db.base import Base
from mindcalm.db.session import get_db
from mindcalm.main import app
from mindcalm.models import StorageEntry  # noqa: F401 - register for create_all
from mindcalm.services.state_store import StateStore

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def offline_ai(monkeypatch):
    """No API key, so every model call fails fast and the fallbacks kick in."""
    monkeypatch.setattr(settings, "ai_provider", "gemini")
    monkeypatch.setattr(settings, "gemini_api_key", "")


@pytest.fixture
def setup_db():
    """Fresh tables for every test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(setup_db):
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db):
    return StateStore(db)


@pytest.fixture
def client(setup_db, monkeypatch):
    """Test client with overridden DB; startup runs against the in-memory engine."""
    monkeypatch.setattr(session, "engine", engine)
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
