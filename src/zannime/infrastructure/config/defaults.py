"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "zannime",
    "environment": "dev",
    "http": {
        "timeout_seconds": 30.0,
        "follow_redirects": True,
        "user_agent": "Zannime/1.0.0",
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "stremio": {
        "addon_id": "org.zannime.stremio",
        "addon_name": "Zannime",
        "addon_version": "1.0.0",
        "addon_description": "Stremio addon for WAJIK ANIME API",
        "max_concurrent_servers": 8,
    },
}
