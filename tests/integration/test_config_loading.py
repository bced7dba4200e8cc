"""Integration tests for configuration loading with layered precedence.

Tests the real load_config() function with actual YAML files, environment
variables, and CLI overrides to verify precedence: defaults < YAML < ENV < CLI.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from zannime.infrastructure.config.defaults import DEFAULT_CONFIG
from zannime.infrastructure.config.load import load_config
from zannime.infrastructure.config.schema import StremioConfig

pytestmark = pytest.mark.integration

_BASE = "https://wajik.test/anime"


@pytest.fixture()
def yaml_config(tmp_path: Path) -> Path:
    """Write a minimal YAML config and return its path."""
    config = {
        "app_name": "zannime-test",
        "environment": "test",
        "upstream": {"base_url": f"{_BASE}/"},
        "http": {"timeout_seconds": 15.0, "user_agent": "TestAgent/1.0"},
        "logging": {"level": "DEBUG", "format": "console"},
        "stremio": {"addon_name": "Zannime Test", "max_concurrent_servers": 4},
    }
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump(config), encoding="utf-8")
    return path


class TestDefaults:
    def test_base_url_is_required(self) -> None:
        with pytest.raises(ValidationError):
            load_config()

    def test_defaults_with_base_url(self) -> None:
        config = load_config(cli_overrides={"api_base_url": _BASE})
        assert config.app_name == "zannime"
        assert config.environment == "dev"
        assert config.http_timeout_seconds == 30.0
        assert config.log_level == "INFO"
        assert config.log_format == "console"
        assert config.stremio.addon_id == "org.zannime.stremio"
        assert config.stremio.max_concurrent_servers == 8

    def test_stremio_defaults_cover_every_schema_field(self) -> None:
        assert set(DEFAULT_CONFIG["stremio"]) == set(StremioConfig.model_fields)
        assert DEFAULT_CONFIG["stremio"]["addon_description"] == (
            StremioConfig().addon_description
        )

    def test_prod_derives_json_logs(self) -> None:
        config = load_config(cli_overrides={"api_base_url": _BASE, "environment": "prod"})
        assert config.log_format == "json"


class TestYamlOverrides:
    def test_yaml_overrides_defaults(self, yaml_config: Path) -> None:
        config = load_config(config_path=yaml_config)
        assert config.app_name == "zannime-test"
        assert config.api_base_url == _BASE
        assert config.http_timeout_seconds == 15.0
        assert config.http_user_agent == "TestAgent/1.0"
        assert config.log_level == "DEBUG"
        assert config.stremio.addon_name == "Zannime Test"
        assert config.stremio.max_concurrent_servers == 4

    def test_partial_stremio_section_keeps_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "partial.yaml"
        path.write_text(
            yaml.dump({"upstream": {"base_url": _BASE}, "stremio": {"addon_name": "X"}}),
            encoding="utf-8",
        )
        config = load_config(config_path=path)
        assert config.stremio.addon_name == "X"
        assert config.stremio.addon_id == "org.zannime.stremio"

    def test_file_not_found(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(config_path=tmp_path / "missing.yaml")

    def test_empty_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        config = load_config(config_path=path, cli_overrides={"api_base_url": _BASE})
        assert config.app_name == "zannime"

    def test_non_mapping_yaml_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_config(config_path=path)


class TestEnvOverrides:
    def test_plain_api_base_url(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("API_BASE_URL", "https://env.test/")
        assert load_config().api_base_url == "https://env.test"

    def test_env_beats_yaml(
        self, yaml_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("ZANNIME_API_BASE_URL", "https://env.test")
        monkeypatch.setenv("ZANNIME_LOG_LEVEL", "WARNING")
        config = load_config(config_path=yaml_config)
        assert config.api_base_url == "https://env.test"
        assert config.log_level == "WARNING"

    def test_cli_beats_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("API_BASE_URL", "https://env.test")
        config = load_config(cli_overrides={"api_base_url": "https://cli.test"})
        assert config.api_base_url == "https://cli.test"

    def test_dotenv_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        # load_dotenv writes into os.environ; isolate it
        monkeypatch.setattr(os, "environ", os.environ.copy())
        dotenv = tmp_path / ".env"
        dotenv.write_text("API_BASE_URL=https://dotenv.test\n", encoding="utf-8")

        assert load_config(dotenv_path=dotenv).api_base_url == "https://dotenv.test"

    def test_dotenv_not_found(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(dotenv_path=tmp_path / ".env")


class TestValidation:
    @pytest.mark.parametrize("url", ["ftp://wajik.test", "wajik.test", ""])
    def test_rejects_non_http_base_url(self, url: str) -> None:
        with pytest.raises(ValidationError):
            load_config(cli_overrides={"api_base_url": url})

    def test_rejects_zero_concurrency(self) -> None:
        with pytest.raises(ValidationError):
            load_config(
                cli_overrides={
                    "api_base_url": _BASE,
                    "stremio": {"max_concurrent_servers": 0},
                }
            )

    def test_sectioned_dump(self) -> None:
        config = load_config(cli_overrides={"api_base_url": _BASE})
        dumped = config.to_sectioned_dict()
        assert dumped["upstream"]["base_url"] == _BASE
