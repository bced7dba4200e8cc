"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from zannime.application.use_cases import CatalogUseCase, MetaUseCase, StreamUseCase
from zannime.application.use_cases.discovery import discover_genres, discover_sources
from zannime.domain.entities.source import Genre, SourceRegistry
from zannime.domain.ports import UpstreamClientPort
from zannime.infrastructure.stremio.url_rewrite import rewrite_stream_url
from zannime.infrastructure.upstream import HttpxUpstreamClient
from zannime.interfaces.api.stremio.manifest import build_manifest
from zannime.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


async def _load_genres(
    upstream: UpstreamClientPort, sources: SourceRegistry
) -> dict[str, list[Genre]]:
    """Fetch every source's genre list concurrently, keyed by route."""
    genre_lists = await asyncio.gather(*(discover_genres(upstream, s) for s in sources))
    return {s.route: genres for s, genres in zip(sources, genre_lists)}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan Hook: Initialize and cleanup all resources (DI Composition Root).

    Order matters:
        1. HTTP client
        2. Upstream client (uses HTTP client)
        3. Source registry + genres (startup discovery)
        4. Manifest
        5. Use cases
    """
    state = cast(AppState, app.state)
    config = state.config

    # 1) HTTP client shared by all upstream calls
    state.http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(config.http_timeout_seconds),
        headers={"User-Agent": config.http_user_agent},
        follow_redirects=config.http_follow_redirects,
    )
    log.info("http_client_initialized", timeout=config.http_timeout_seconds)

    # 2) Upstream API client
    state.upstream = HttpxUpstreamClient(
        base_url=config.api_base_url,
        http_client=state.http_client,
    )
    log.info("upstream_client_initialized", base_url=config.api_base_url)

    # 3) Sources (read-only after this point)
    state.sources = await discover_sources(state.upstream)
    state.genres = await _load_genres(state.upstream, state.sources)

    # 4) Manifest
    state.manifest = build_manifest(state.sources, config.stremio, state.genres)
    log.info(
        "manifest_built",
        catalogs=len(state.manifest["catalogs"]),
        id_prefixes=state.manifest["idPrefixes"],
    )

    # 5) Use cases
    state.catalog_uc = CatalogUseCase(upstream=state.upstream)
    state.meta_uc = MetaUseCase(upstream=state.upstream)
    state.stream_uc = StreamUseCase(
        upstream=state.upstream,
        rewrite_fn=rewrite_stream_url,
        max_concurrent_servers=config.stremio.max_concurrent_servers,
    )

    log.info("app_startup_complete", sources=len(state.sources))

    try:
        yield
    finally:
        await state.http_client.aclose()
        log.info("http_client_closed")
        log.info("app_shutdown_complete")
