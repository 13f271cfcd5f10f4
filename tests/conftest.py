"""Shared pytest fixtures.

The app is pointed at an in-memory SQLite database and a fixed session
secret before anything under ``app`` is imported.
"""

from __future__ import annotations

import os

os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SESSION_SECRET"] = "test-secret"
os.environ.pop("SESSION_SECRET_PREVIOUS", None)
os.environ["SESSION_SECRET_ROTATION_SECONDS"] = "0"

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from app.core.session import Principal, UserRole, set_principal
from app.db.base import Base
from app.db.session import SessionLocal, engine
from app.main import create_app
from app.models import users  # noqa: F401


@pytest.fixture()
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


def _add_test_routes(app: FastAPI) -> None:
    """Routes that write the session directly; login flows live elsewhere."""

    @app.post("/test/sign-in")
    def sign_in(request: Request, role: UserRole, id: str):
        set_principal(request.session, Principal(role=role, id=id))
        return {"ok": True}

    @app.post("/test/raw-session")
    async def raw_session(request: Request):
        request.session.update(await request.json())
        return {"ok": True}


@pytest.fixture()
def app(db) -> FastAPI:
    application = create_app()
    _add_test_routes(application)
    return application


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client
