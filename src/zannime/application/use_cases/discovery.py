"""Startup discovery of upstream sources and their genres."""

from __future__ import annotations

from typing import Any

import structlog

from zannime.domain.entities.source import Genre, Source, SourceRegistry
from zannime.domain.exceptions import UpstreamError
from zannime.domain.ports.upstream import UpstreamClientPort

log = structlog.get_logger(__name__)


async def discover_sources(upstream: UpstreamClientPort) -> SourceRegistry:
    """Load the source registry from ``/view-data``.

    Any failure degrades to an empty registry so the addon still starts.
    """
    try:
        envelope = await upstream.fetch("/view-data")
    except UpstreamError:
        log.error("source_discovery_failed", exc_info=True)
        return SourceRegistry()

    data = envelope.get("data")
    raw_sources: Any = data.get("sources") if isinstance(data, dict) else None
    if not isinstance(raw_sources, list):
        log.error("source_discovery_malformed", data_type=type(data).__name__)
        return SourceRegistry()

    sources: list[Source] = []
    for raw in raw_sources:
        if not isinstance(raw, dict) or not raw.get("route"):
            log.warning("source_without_route_skipped", source=raw)
            continue
        sources.append(Source.from_route(str(raw["route"]), str(raw.get("title", ""))))

    registry = SourceRegistry(sources)
    log.info("sources_loaded", count=len(registry), sources=registry.names)
    return registry


async def discover_genres(upstream: UpstreamClientPort, source: Source) -> list[Genre]:
    """Load the genre list of one source; empty on failure."""
    try:
        envelope = await upstream.fetch(f"/{source.route}/genres")
    except UpstreamError:
        log.warning("genre_discovery_failed", source=source.route, exc_info=True)
        return []

    data = envelope.get("data")
    if isinstance(data, dict):
        data = data.get("genreList")
    if not isinstance(data, list):
        return []

    genres: list[Genre] = []
    for raw in data:
        if not isinstance(raw, dict):
            continue
        genre_id = raw.get("id") or raw.get("slug")
        if not genre_id:
            continue
        genres.append(Genre(id=str(genre_id), name=str(raw.get("title", genre_id))))
    return genres
