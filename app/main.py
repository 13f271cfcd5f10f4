import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request

from app.core.config import Settings, settings as default_settings
from app.core.session_secrets import (
    EnvironmentSessionSecretsManager,
    RotatingSessionMiddleware,
    SessionSecretRotator,
)
from app.db.init_db import init_db
from app.routers import auth


def new_session_id() -> str:
    return f"sess_{uuid.uuid4().hex}"


async def ensure_session_id(request: Request, call_next):
    # anonymous carts are keyed by this id, before any login
    if not request.session.get("session_id"):
        request.session["session_id"] = new_session_id()
    return await call_next(request)


def create_app(settings: Optional[Settings] = None, secrets_manager=None) -> FastAPI:
    """
    Build the API.

    ``settings`` only drives the session cookie and its secrets. The
    database engine is bound at import time from the environment
    (app.db.session).
    """
    settings = settings or default_settings

    rotator = SessionSecretRotator(
        secrets_manager or EnvironmentSessionSecretsManager(),
        rotation_interval_seconds=settings.SESSION_SECRET_ROTATION_SECONDS,
        require_secret=settings.REQUIRE_SESSION_SECRET,
    )
    rotator.initialize()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_db()
        yield
        rotator.stop()

    app = FastAPI(
        title="Storefront Backend",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.session_secrets = rotator

    # added first so it runs inside the session middleware
    app.middleware("http")(ensure_session_id)
    app.add_middleware(
        RotatingSessionMiddleware,
        rotator=rotator,
        session_cookie=settings.SESSION_COOKIE_NAME,
        max_age=settings.SESSION_MAX_AGE,
        same_site="lax",
        https_only=settings.ENV == "production",
    )

    app.include_router(auth.router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
