from __future__ import annotations

import os
import sys

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.append(ROOT)

from app.api import app, get_session  # noqa: E402
from app.models import User  # noqa: E402

from payloads import STRONG_PASSWORD  # noqa: E402


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def make_user(session):
    def _make(username: str = "founder") -> User:
        user = User(username=username, hashed_password="not-a-real-hash")
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make


@pytest.fixture
def client(engine):
    def session_override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides.clear()
    app.dependency_overrides[get_session] = session_override
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def signup(client):
    def _signup(username: str = "founder", password: str = STRONG_PASSWORD) -> dict:
        resp = client.post("/users/signup", json={"username": username, "password": password})
        assert resp.status_code == 200, resp.text
        data = resp.json()["data"]
        return {
            "user": data["user"],
            "token": data["jwt"],
            "headers": {"Authorization": f"Bearer {data['jwt']}"},
        }

    return _signup


@pytest.fixture
def auth_header(signup):
    return signup()["headers"]
