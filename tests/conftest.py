"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import pytest

_WARDEN_ENV_VARS = (
    "WARDEN_GITHUB_TOKEN",
    "WARDEN_WEBHOOK_SECRET",
    "WARDEN_GITHUB_API_URL",
    "WARDEN_GITHUB_TIMEOUT_S",
    "WARDEN_HOST",
    "WARDEN_PORT",
    "WARDEN_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_warden_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove Warden variables inherited from the host environment."""
    for name in _WARDEN_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
