"""Shared test fixtures for the Juno test suite."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from juno.config.settings import JunoSettings
from juno.main import create_app


# ---------------------------------------------------------------------------
# Settings / app fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def settings() -> JunoSettings:
    """Test settings with safe defaults."""
    return JunoSettings(environment="test", log_level="DEBUG")


@pytest.fixture
def app(settings: JunoSettings) -> FastAPI:
    return create_app(settings)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    # Not used as a context manager: the lifespan would reconfigure root
    # logging and detach pytest's caplog handler.
    return TestClient(app, raise_server_exceptions=False)


# ---------------------------------------------------------------------------
# Recording helpers for Express-style handlers
# ---------------------------------------------------------------------------

class RecordingNext:
    """``next_`` continuation that records every forwarded failure."""

    def __init__(self) -> None:
        self.calls: list[BaseException] = []

    def __call__(self, exc: BaseException) -> None:
        self.calls.append(exc)


@pytest.fixture
def recording_next() -> RecordingNext:
    return RecordingNext()
