"""Shared pytest fixtures.

Every test gets a fresh in-memory MongoDB (mongomock) behind a freshly
built app, so tests never share stored state.
"""
import pytest
import mongomock
from datetime import timedelta

from fastapi.testclient import TestClient

from config.configrations import Settings
from main import create_app


@pytest.fixture
def secret():
    return "testing_secret"


@pytest.fixture
def settings(secret):
    return Settings(
        mongo_uri="mongodb://localhost:27017",
        database_name="terait_test",
        jwt_secret=secret,
        token_ttl=timedelta(hours=24),
        bcrypt_rounds=4,
    )


@pytest.fixture
def database():
    return mongomock.MongoClient()["terait_test"]


@pytest.fixture
def app(settings, database):
    return create_app(settings, database)


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def store(app):
    return app.state.store


@pytest.fixture
def token(app):
    return app.state.tokens.issue("user-1", "admin@x.com", "admin")


@pytest.fixture
def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}
