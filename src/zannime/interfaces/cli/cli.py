from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog
import uvicorn

from zannime import __version__
from zannime.infrastructure.config import load_config
from zannime.infrastructure.logging.setup import configure_logging
from zannime.interfaces.app import create_app

log = structlog.get_logger(__name__)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 7000

# Flags passed through to load_config() as overrides
_OVERRIDE_FLAGS = ("api_base_url", "log_level", "log_format")


def _parse_args(argv: Iterable[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="zannime",
        description="Stremio addon for the Wajik anime API.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    server = parser.add_argument_group("server")
    server.add_argument("--host", help=f"Bind host (HOST env, default {DEFAULT_HOST}).")
    server.add_argument(
        "--port", type=int, help=f"Bind port (PORT env, default {DEFAULT_PORT})."
    )

    config = parser.add_argument_group("configuration")
    config.add_argument("--config", type=Path, help="Path to YAML config file.")
    config.add_argument("--dotenv", type=Path, help="Path to .env file.")
    config.add_argument(
        "--api-base-url", help="Upstream API base URL (overrides API_BASE_URL)."
    )
    config.add_argument(
        "--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"]
    )
    config.add_argument("--log-format", choices=["json", "console"])

    return parser.parse_args(argv)


def _cli_overrides(args: argparse.Namespace) -> dict[str, Any]:
    return {
        flag: getattr(args, flag)
        for flag in _OVERRIDE_FLAGS
        if getattr(args, flag) is not None
    }


def _bind_address(args: argparse.Namespace) -> tuple[str, int]:
    """Flags win over HOST/PORT env vars, which win over the defaults."""
    host = args.host or os.getenv("HOST") or DEFAULT_HOST
    port = args.port or int(os.getenv("PORT") or DEFAULT_PORT)
    return host, port


def start(argv: Iterable[str] | None = None) -> int:
    """
    Process entrypoint.

    Loads config exactly once, then builds the FastAPI app with it.
    Returns 2 when the configuration cannot be loaded.
    """
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    host, port = _bind_address(args)

    try:
        config = load_config(
            config_path=args.config,
            dotenv_path=args.dotenv,
            cli_overrides=_cli_overrides(args),
        )
    except (FileNotFoundError, ValueError) as exc:
        # pydantic.ValidationError is a ValueError
        print(f"zannime: invalid configuration: {exc}", file=sys.stderr)
        return 2

    log_config = configure_logging(config)
    log.info("server_starting", url=f"http://127.0.0.1:{port}/manifest.json")

    uvicorn.run(create_app(config), host=host, port=port, log_config=log_config)
    return 0


if __name__ == "__main__":
    raise SystemExit(start())
