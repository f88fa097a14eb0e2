"""
Shared fixtures: in-memory database, API client and auth headers.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.security import create_access_token
from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app import models  # noqa: F401

OWNER_ID = "user-owner"
MEMBER_ID = "user-member"
OUTSIDER_ID = "user-outsider"


@pytest.fixture
def db_engine():
    """Fresh in-memory SQLite engine with all tables."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(db_engine):
    """Database session bound to the test engine."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_engine):
    """API client whose requests use the test database."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def auth_headers(user_id: str) -> dict:
    """Bearer header for a token the auth backend would issue."""
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


@pytest.fixture
def owner_headers():
    return auth_headers(OWNER_ID)


@pytest.fixture
def member_headers():
    return auth_headers(MEMBER_ID)


@pytest.fixture
def outsider_headers():
    return auth_headers(OUTSIDER_ID)


@pytest.fixture
def trip(client, owner_headers):
    """A USD trip owned by OWNER_ID with three participants: Alice (owner), Bob (member), Carol."""
    response = client.post(
        "/api/trips",
        json={"name": "Lisbon", "destination": "Lisbon, Portugal", "base_currency": "usd", "owner_name": "Alice"},
        headers=owner_headers
    )
    assert response.status_code == 201
    trip_id = response.json()["id"]

    bob = client.post(
        f"/api/trips/{trip_id}/participants",
        json={"name": "Bob", "email": "bob@example.com", "user_id": MEMBER_ID},
        headers=owner_headers
    ).json()
    carol = client.post(
        f"/api/trips/{trip_id}/participants",
        json={"name": "Carol", "email": "carol@example.com"},
        headers=owner_headers
    ).json()
    participants = client.get(f"/api/trips/{trip_id}/participants", headers=owner_headers).json()
    alice = participants[0]

    return {
        "id": trip_id,
        "alice": alice["id"],
        "bob": bob["id"],
        "carol": carol["id"],
    }
