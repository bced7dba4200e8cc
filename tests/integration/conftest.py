"""Shared fixtures for integration tests."""

from __future__ import annotations

import pytest

_ENV_VARS = (
    "API_BASE_URL",
    "ZANNIME_API_BASE_URL",
    "ZANNIME_APP_NAME",
    "ZANNIME_ENVIRONMENT",
    "ZANNIME_HTTP_TIMEOUT_SECONDS",
    "ZANNIME_HTTP_FOLLOW_REDIRECTS",
    "ZANNIME_HTTP_USER_AGENT",
    "ZANNIME_LOG_LEVEL",
    "ZANNIME_LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every integration test without Zannime env vars."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
