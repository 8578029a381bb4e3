import os

# must be in place before the app modules read their settings
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient

from database import Base, SessionLocal, engine
from main import app


@pytest.fixture(autouse=True)
def fresh_db():
    """Start every test from empty tables."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def register(client, name="A", email="a@x.com", password="secret123"):
    return client.post("/api/register", json={"name": name, "email": email, "password": password})


def login(client, email="a@x.com", password="secret123"):
    return client.post("/api/login", json={"email": email, "password": password})


def auth_headers(client, name="A", email="a@x.com", password="secret123"):
    """Register a user, log in and return the Authorization header for it."""
    assert register(client, name, email, password).status_code == 201
    token = login(client, email, password).json()["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice(client):
    return auth_headers(client, "Alice", "alice@example.com", "alice-pass")


@pytest.fixture
def bob(client):
    return auth_headers(client, "Bob", "bob@example.com", "bob-pass")
