"""
Shared fixtures: an in-memory SQLite database per test and API helpers.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.base import Base
from app.db.session import get_db, enable_sqlite_foreign_keys
from app.db.seed import seed_catalog
from app import models  # noqa: F401


@pytest.fixture
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    """A session for arranging and inspecting data directly."""
    db = session_factory()
    seed_catalog(db)
    yield db
    db.close()


@pytest.fixture
def client(session_factory, db_session):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(client):
    """Register a user and return (headers, user data)."""
    counter = {"n": 0}

    def _make_user(name=None, email=None, password="secret123"):
        counter["n"] += 1
        name = name or f"Traveler {counter['n']}"
        email = email or f"traveler{counter['n']}@example.com"
        response = client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password}
        )
        assert response.status_code == 201, response.text
        data = response.json()["data"]
        return {"Authorization": f"Bearer {data['token']}"}, data["user"]

    return _make_user


@pytest.fixture
def make_trip(client):
    """Create a trip for the given auth headers and return its data."""
    def _make_trip(headers, **overrides):
        payload = {
            "title": "Spring in Europe",
            "start_date": "2024-03-01",
            "end_date": "2024-03-10",
        }
        payload.update(overrides)
        response = client.post("/api/trips", json=payload, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _make_trip


@pytest.fixture
def make_stop(client):
    """Add a stop to a trip and return its data."""
    def _make_stop(headers, trip_id, city_name="Paris", start_date="2024-03-01", end_date="2024-03-03", **extra):
        payload = {"city_name": city_name, "start_date": start_date, "end_date": end_date}
        payload.update(extra)
        response = client.post(f"/api/trips/{trip_id}/stops", json=payload, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _make_stop
