import threading
from typing import List, Optional

import itsdangerous
from starlette.middleware.sessions import SessionMiddleware
from starlette.types import ASGIApp

from app.core.config import Settings
from app.core.logger import logger

DEVELOPMENT_FALLBACK_SECRET = "dev-insecure-session-secret"


class EnvironmentSessionSecretsManager:
    """
    Reads the active and previous cookie secrets.

    Settings are rebuilt on every call so that changes to the environment
    or the .env file reach the rotator.
    """

    def load_secrets(self) -> List[str]:
        current_settings = Settings()
        secrets = []

        current = (current_settings.SESSION_SECRET or "").strip()
        if current:
            secrets.append(current)

        previous = (current_settings.SESSION_SECRET_PREVIOUS or "").strip()
        if previous:
            secrets.append(previous)

        return secrets


class SessionSecretRotator:
    """
    Keeps the list of cookie secrets current.

    ``secrets[0]`` signs new cookies; every entry is accepted when a
    cookie is read. The list object is updated in place so holders of
    the reference see rotations.
    """

    def __init__(
        self,
        manager,
        rotation_interval_seconds: float = 60 * 15,
        require_secret: bool = False,
        development_fallback_secret: Optional[str] = None,
    ):
        self.manager = manager
        self.rotation_interval_seconds = rotation_interval_seconds
        self.require_secret = require_secret
        self.development_fallback_secret = development_fallback_secret or DEVELOPMENT_FALLBACK_SECRET
        self.secrets: List[str] = []
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def initialize(self) -> List[str]:
        self.refresh_secrets(throw_on_empty=self.require_secret)

        if self.rotation_interval_seconds > 0 and self._thread is None:
            self._stop_event.clear()
            self._thread = threading.Thread(
                target=self._run,
                name="session-secret-rotator",
                daemon=True,
            )
            self._thread.start()

        return self.secrets

    def refresh_secrets(self, throw_on_empty: bool) -> None:
        resolved = self.manager.load_secrets()
        cleaned = [secret.strip() for secret in resolved if secret and secret.strip()]

        if not cleaned:
            if throw_on_empty:
                raise RuntimeError(
                    "SESSION_SECRET is required in production. "
                    "Configure the secrets manager to return at least one active secret."
                )

            logger.warning(
                "SESSION SECRET FALLBACK | secrets manager returned no secrets, "
                "using a development-only secret"
            )
            self._update_secrets([self.development_fallback_secret])
            return

        if not self.secrets or self.secrets[0] != cleaned[0]:
            logger.info(
                f"SESSION SECRET ROTATED | active=1 | previous={len(cleaned) - 1}"
            )

        self._update_secrets(cleaned)

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=1)
            self._thread = None

    def _run(self) -> None:
        while not self._stop_event.wait(self.rotation_interval_seconds):
            try:
                self.refresh_secrets(throw_on_empty=False)
            except Exception:
                logger.exception("SESSION SECRET REFRESH FAILED")

    def _update_secrets(self, next_secrets: List[str]) -> None:
        self.secrets[:] = next_secrets


class RotatingSigner:
    """TimestampSigner over the rotator's live secrets list."""

    def __init__(self, secrets: List[str]):
        self._secrets = secrets

    def _signer(self) -> itsdangerous.TimestampSigner:
        # itsdangerous signs with the last key and verifies against all of them
        return itsdangerous.TimestampSigner(list(reversed(self._secrets)))

    def sign(self, value):
        return self._signer().sign(value)

    def unsign(self, value, max_age=None):
        return self._signer().unsign(value, max_age=max_age)


class RotatingSessionMiddleware(SessionMiddleware):
    def __init__(self, app: ASGIApp, rotator: SessionSecretRotator, **kwargs):
        super().__init__(app, secret_key=rotator.secrets[0] if rotator.secrets else "", **kwargs)
        self.signer = RotatingSigner(rotator.secrets)
