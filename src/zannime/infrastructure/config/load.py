from __future__ import annotations

from collections.abc import Iterator
from copy import deepcopy
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv

from .defaults import DEFAULT_CONFIG
from .schema import AppConfig, EnvOverrides

_SECTIONS = ("upstream", "http", "logging", "stremio")
_TOP_LEVEL_KEYS = ("app_name", "environment")

# Flat keys (env vars, CLI flags) and where they live in the YAML layout.
_FLAT_KEYS: dict[str, tuple[str, str]] = {
    "api_base_url": ("upstream", "base_url"),
    "http_timeout_seconds": ("http", "timeout_seconds"),
    "http_follow_redirects": ("http", "follow_redirects"),
    "http_user_agent": ("http", "user_agent"),
    "log_level": ("logging", "level"),
    "log_format": ("logging", "format"),
}


def _merge_into(target: dict[str, Any], layer: Mapping[str, Any]) -> None:
    """Merge ``layer`` over ``target`` in place; nested mappings merge key by key."""
    for key, value in layer.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            _merge_into(current, value)
        else:
            target[key] = value


def _sectioned(layer: Mapping[str, Any]) -> dict[str, Any]:
    """
    Bring one layer into the sectioned shape of config.yaml.

    Section blocks pass through, flat keys are moved into their section,
    unknown keys are dropped.
    """
    out: dict[str, Any] = {
        name: dict(layer[name])
        for name in _SECTIONS
        if isinstance(layer.get(name), Mapping)
    }
    out.update({key: layer[key] for key in _TOP_LEVEL_KEYS if key in layer})

    for flat_key, (section, section_key) in _FLAT_KEYS.items():
        if flat_key in layer:
            out.setdefault(section, {})[section_key] = layer[flat_key]
    return out


def _yaml_layer(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        raise FileNotFoundError(config_path)
    parsed = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ValueError(f"Config YAML must be a mapping, got: {type(parsed)!r}")
    return parsed


def _layers(
    config_path: Path | None, cli_overrides: Mapping[str, Any]
) -> Iterator[Mapping[str, Any]]:
    """Yield config layers from lowest to highest precedence."""
    yield deepcopy(DEFAULT_CONFIG)
    if config_path is not None:
        yield _yaml_layer(config_path)
    # Read lazily so a preceding .env load is visible.
    yield EnvOverrides().to_update_dict()
    yield cli_overrides


def load_config(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """
    Load configuration with strict precedence:
    defaults < YAML file < env vars < cli overrides

    A .env file, when given, is loaded into the process environment first
    without replacing variables that are already set.

    Raises:
        FileNotFoundError: config_path or dotenv_path does not exist.
        pydantic.ValidationError: merged config is invalid (e.g. no base URL).
    """
    if dotenv_path is not None:
        if not dotenv_path.exists():
            raise FileNotFoundError(dotenv_path)
        load_dotenv(dotenv_path, override=False)

    merged: dict[str, Any] = {}
    for layer in _layers(config_path, cli_overrides or {}):
        _merge_into(merged, _sectioned(layer))

    return AppConfig.model_validate(merged)
