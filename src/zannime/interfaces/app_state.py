"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx
from starlette.datastructures import State

from zannime.domain.entities.source import Genre, SourceRegistry
from zannime.infrastructure.config import AppConfig

if TYPE_CHECKING:
    from zannime.application.use_cases import (
        CatalogUseCase,
        MetaUseCase,
        StreamUseCase,
    )
    from zannime.domain.ports import UpstreamClientPort


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    http_client: httpx.AsyncClient
    upstream: UpstreamClientPort

    # Loaded once at startup, read-only afterwards
    sources: SourceRegistry
    genres: dict[str, list[Genre]]
    manifest: dict[str, Any]

    # Use cases
    catalog_uc: CatalogUseCase
    meta_uc: MetaUseCase
    stream_uc: StreamUseCase
