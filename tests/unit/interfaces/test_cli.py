"""Tests for the process entrypoint."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from zannime.interfaces.cli import cli


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("API_BASE_URL", "ZANNIME_API_BASE_URL", "HOST", "PORT"):
        monkeypatch.delenv(name, raising=False)


class TestStart:
    def test_missing_base_url_exits_with_2(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch.object(cli.uvicorn, "run") as run:
            assert cli.start([]) == 2
        run.assert_not_called()
        assert "invalid configuration" in capsys.readouterr().err

    def test_missing_config_file_exits_with_2(self, tmp_path: Path) -> None:
        with patch.object(cli.uvicorn, "run") as run:
            code = cli.start(
                ["--api-base-url", "https://wajik.test", "--config", str(tmp_path / "x.yaml")]
            )
        assert code == 2
        run.assert_not_called()

    def test_runs_uvicorn_on_default_port(self) -> None:
        with (
            patch.object(cli, "configure_logging", return_value={"version": 1}),
            patch.object(cli.uvicorn, "run") as run,
        ):
            assert cli.start(["--api-base-url", "https://wajik.test"]) == 0

        _, kwargs = run.call_args
        assert kwargs["port"] == 7000
        assert kwargs["host"] == "0.0.0.0"
        assert kwargs["log_config"] == {"version": 1}
        app = run.call_args.args[0]
        assert app.state.config.api_base_url == "https://wajik.test"

    def test_port_from_env_and_flag(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PORT", "8123")
        monkeypatch.setenv("API_BASE_URL", "https://wajik.test")
        with (
            patch.object(cli, "configure_logging", return_value={"version": 1}),
            patch.object(cli.uvicorn, "run") as run,
        ):
            cli.start([])
            assert run.call_args.kwargs["port"] == 8123
            cli.start(["--port", "9000", "--host", "127.0.0.1"])
            assert run.call_args.kwargs["port"] == 9000
            assert run.call_args.kwargs["host"] == "127.0.0.1"
