"""Pydantic configuration models with validation."""

from __future__ import annotations

from typing import Any, Literal, Optional
from urllib.parse import urlsplit

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]


def _normalize_base_url(value: Any) -> str:
    """Validate an http(s) base URL and strip trailing slashes."""
    if not isinstance(value, str):
        raise ValueError(f"Expected URL string, got: {type(value)!r}")
    url = value.strip().rstrip("/")
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ValueError(f"api_base_url must be an http(s) URL, got: {value!r}")
    return url


class StremioConfig(BaseModel):
    """Addon identity and stream fan-out settings (YAML section: stremio.*)."""

    addon_id: str = Field(
        default="org.zannime.stremio",
        description="Stremio addon id advertised in the manifest.",
    )
    addon_name: str = Field(default="Zannime", description="Addon display name.")
    addon_version: str = Field(default="1.0.0", description="Addon version.")
    addon_description: str = Field(
        default="Stremio addon for WAJIK ANIME API",
        description="Addon description shown in Stremio.",
    )
    max_concurrent_servers: int = Field(
        default=8,
        description="Max parallel server lookups while resolving one episode.",
    )

    @field_validator("max_concurrent_servers")
    @classmethod
    def _validate_concurrency(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_concurrent_servers must be >= 1")
        return v


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (upstream/http/logging/stremio).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="zannime", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # Upstream API (YAML section: upstream.base_url), required
    api_base_url: str = Field(
        validation_alias=AliasChoices(
            "api_base_url",
            AliasPath("upstream", "base_url"),
        ),
        description="Base URL of the Wajik anime API.",
    )

    # HTTP client (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=30.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="HTTP timeout in seconds for upstream requests.",
    )
    http_follow_redirects: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "http_follow_redirects",
            AliasPath("http", "follow_redirects"),
        ),
        description="Whether HTTP client follows redirects.",
    )
    http_user_agent: str = Field(
        default="Zannime/1.0.0",
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="User-Agent for outgoing HTTP requests.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    # Stremio addon configuration (YAML section: stremio.*)
    stremio: StremioConfig = Field(default_factory=StremioConfig)

    @field_validator("api_base_url", mode="before")
    @classmethod
    def _validate_base_url(cls, v: Any) -> str:
        return _normalize_base_url(v)

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.
        """
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "upstream": {"base_url": self.api_base_url},
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "follow_redirects": self.http_follow_redirects,
                "user_agent": self.http_user_agent,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
            "stremio": self.stremio.model_dump(),
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    load.py creates EnvOverrides() to read ZANNIME_* variables, converts the
    set values to a dict, merges it over YAML/defaults, then validates AppConfig.

    Supported env vars:
    - API_BASE_URL (or ZANNIME_API_BASE_URL)
    - ZANNIME_ENVIRONMENT
    - ZANNIME_HTTP_TIMEOUT_SECONDS
    - ZANNIME_LOG_LEVEL, ZANNIME_LOG_FORMAT
    """

    model_config = SettingsConfigDict(
        env_prefix="ZANNIME_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    api_base_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("ZANNIME_API_BASE_URL", "API_BASE_URL"),
    )

    http_timeout_seconds: Optional[float] = None
    http_follow_redirects: Optional[bool] = None
    http_user_agent: Optional[str] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
