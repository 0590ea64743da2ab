"""Shared fixtures: the app runs against an in-memory mongomock client."""

import os

os.environ.setdefault("MOVIE_CATALOG_SESSION_SECRET", "test-session-secret")

from unittest.mock import patch
from uuid import uuid4

import mongomock
import pytest
from fastapi.testclient import TestClient

from moviecatalog.config import settings
from moviecatalog.main import app
from moviecatalog.models import Role
from moviecatalog.services.auth import AuthService

ADMIN_CREDENTIALS = {"username": "admin", "password": "admin123"}
USER_CREDENTIALS = {"username": "alice", "password": "wonderland"}


@pytest.fixture()
def client():
    with (
        patch("moviecatalog.main.MongoClient", mongomock.MongoClient),
        patch.object(settings, "mongo_db_name", f"test_{uuid4().hex}"),
    ):
        with TestClient(app) as c:
            yield c


@pytest.fixture()
def db(client):
    return app.state.db


@pytest.fixture()
def admin_client(client, db):
    AuthService(db).ensure_user(
        ADMIN_CREDENTIALS["username"], ADMIN_CREDENTIALS["password"], Role.ADMIN
    )
    resp = client.post("/auth/login", json=ADMIN_CREDENTIALS)
    assert resp.status_code == 200
    return client


@pytest.fixture()
def user_client(client):
    resp = client.post("/auth/register", json=USER_CREDENTIALS)
    assert resp.status_code == 201
    return client


def make_movie(client, **overrides) -> dict:
    payload = {"title": "Dune", "year": 2021, "genres": ["Sci-Fi", "Adventure"]}
    payload.update(overrides)
    resp = client.post("/movies", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()
