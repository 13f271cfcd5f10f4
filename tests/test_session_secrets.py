"""Tests for cookie secret loading and rotation (core/session_secrets.py)."""

from __future__ import annotations

import logging
import time
from typing import Callable, List

import itsdangerous
import pytest

from app.core.session_secrets import (
    DEVELOPMENT_FALLBACK_SECRET,
    EnvironmentSessionSecretsManager,
    RotatingSigner,
    SessionSecretRotator,
)


class StaticSecretsManager:
    def __init__(self, secrets: List[str]) -> None:
        self.secrets = secrets

    def load_secrets(self) -> List[str]:
        return list(self.secrets)


def _wait_for(condition: Callable[[], bool], timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(0.01)
    return condition()


class FailingAfterFirstCallManager:
    def __init__(self, secrets: List[str]) -> None:
        self.secrets = secrets
        self.calls = 0

    def load_secrets(self) -> List[str]:
        self.calls += 1
        if self.calls > 1:
            raise ValueError("secrets backend unavailable")
        return list(self.secrets)


def _rotator(secrets: List[str], **overrides: object) -> SessionSecretRotator:
    options: dict = {"rotation_interval_seconds": 0}
    options.update(overrides)
    return SessionSecretRotator(StaticSecretsManager(secrets), **options)


class TestEnvironmentSessionSecretsManager:
    def test_current_then_previous(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SESSION_SECRET", " new ")
        monkeypatch.setenv("SESSION_SECRET_PREVIOUS", "old")
        assert EnvironmentSessionSecretsManager().load_secrets() == ["new", "old"]

    def test_blank_values_skipped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SESSION_SECRET", "   ")
        monkeypatch.delenv("SESSION_SECRET_PREVIOUS", raising=False)
        assert EnvironmentSessionSecretsManager().load_secrets() == []


class TestSessionSecretRotator:
    def test_initialize_returns_trimmed_secrets(self) -> None:
        rotator = _rotator([" primary ", "", "previous"])
        assert rotator.initialize() == ["primary", "previous"]

    def test_required_secret_missing_raises(self) -> None:
        rotator = _rotator([], require_secret=True)
        with pytest.raises(RuntimeError, match="SESSION_SECRET is required"):
            rotator.initialize()

    def test_fallback_when_not_required(self, caplog: pytest.LogCaptureFixture) -> None:
        rotator = _rotator([])
        with caplog.at_level(logging.WARNING, logger="storefront"):
            assert rotator.initialize() == [DEVELOPMENT_FALLBACK_SECRET]
        assert "SESSION SECRET FALLBACK" in caplog.text

    def test_custom_fallback(self) -> None:
        rotator = _rotator([], development_fallback_secret="local-only")
        assert rotator.initialize() == ["local-only"]

    def test_refresh_updates_list_in_place(self) -> None:
        manager = StaticSecretsManager(["one"])
        rotator = SessionSecretRotator(manager, rotation_interval_seconds=0)
        live = rotator.initialize()

        manager.secrets = ["two", "one"]
        rotator.refresh_secrets(throw_on_empty=False)

        assert live is rotator.secrets
        assert live == ["two", "one"]

    def test_rotation_logged_only_on_primary_change(self, caplog: pytest.LogCaptureFixture) -> None:
        manager = StaticSecretsManager(["one"])
        rotator = SessionSecretRotator(manager, rotation_interval_seconds=0)

        with caplog.at_level(logging.INFO, logger="storefront"):
            rotator.initialize()
            rotator.refresh_secrets(throw_on_empty=False)
        assert caplog.text.count("SESSION SECRET ROTATED") == 1

    def test_background_refresh_stops(self) -> None:
        rotator = _rotator(["one"], rotation_interval_seconds=3600)
        rotator.initialize()
        assert rotator._thread is not None and rotator._thread.is_alive()

        rotator.stop()
        assert rotator._thread is None

    def test_background_refresh_failure_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        manager = FailingAfterFirstCallManager(["one"])
        rotator = SessionSecretRotator(manager, rotation_interval_seconds=0.02)

        with caplog.at_level(logging.ERROR, logger="storefront"):
            rotator.initialize()
            try:
                assert _wait_for(lambda: "SESSION SECRET REFRESH FAILED" in caplog.text)
            finally:
                rotator.stop()

        assert manager.calls > 1
        assert rotator.secrets == ["one"]

    def test_background_refresh_picks_up_new_primary(self) -> None:
        manager = StaticSecretsManager(["one"])
        rotator = SessionSecretRotator(manager, rotation_interval_seconds=0.02)
        live = rotator.initialize()

        manager.secrets = ["two", "one"]
        try:
            assert _wait_for(lambda: live == ["two", "one"])
        finally:
            rotator.stop()


class TestRotatingSigner:
    def test_signs_with_primary(self) -> None:
        secrets = ["new", "old"]
        signed = RotatingSigner(secrets).sign(b"payload")
        assert itsdangerous.TimestampSigner("new").unsign(signed) == b"payload"

    def test_accepts_previous_secret(self) -> None:
        signed = itsdangerous.TimestampSigner("old").sign(b"payload")
        assert RotatingSigner(["new", "old"]).unsign(signed) == b"payload"

    def test_rejects_unknown_secret(self) -> None:
        signed = itsdangerous.TimestampSigner("stranger").sign(b"payload")
        with pytest.raises(itsdangerous.BadSignature):
            RotatingSigner(["new", "old"]).unsign(signed)

    def test_follows_rotation(self) -> None:
        secrets = ["one"]
        signer = RotatingSigner(secrets)
        signed = signer.sign(b"payload")

        secrets[:] = ["two"]
        with pytest.raises(itsdangerous.BadSignature):
            signer.unsign(signed)
