"""
Shared fixtures: a fresh in-memory SQLite database per test, the fake
payment provider wired into the app, and a TestClient.
"""
import os

# Must be set before barber_api reads its settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["PAYMENT_PROVIDER"] = "fake"
os.environ["JWT_SECRET"] = "test-secret"

import pytest
from fastapi.testclient import TestClient

from barber_api.api.app import app
from barber_api.api.dependencies import get_provider
from barber_api.lib.db import SessionLocal, drop_db, init_db
from barber_api.services.payment_provider import FakePaymentProvider


@pytest.fixture(autouse=True)
def database():
    """Create all tables before each test and drop them afterwards."""
    init_db()
    yield
    drop_db()


@pytest.fixture
def db(database):
    """Session for driving services directly."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fake_provider():
    """In-memory payment provider injected into the app."""
    provider = FakePaymentProvider()
    app.dependency_overrides[get_provider] = lambda: provider
    yield provider
    app.dependency_overrides.pop(get_provider, None)


@pytest.fixture
def client(fake_provider):
    return TestClient(app)
