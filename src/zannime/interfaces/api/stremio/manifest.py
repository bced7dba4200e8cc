"""Stremio addon manifest, derived from the source registry at startup."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from zannime.domain.entities.source import Genre, SourceRegistry
from zannime.domain.entities.stremio import CATALOG_TYPES
from zannime.infrastructure.config.schema import StremioConfig


def _catalog_extra(genres: list[Genre]) -> list[dict[str, Any]]:
    genre_extra: dict[str, Any] = {"name": "genre", "isRequired": False}
    if genres:
        genre_extra["options"] = [g.id for g in genres]
    return [
        {"name": "search", "isRequired": False},
        genre_extra,
        {"name": "skip", "isRequired": False},
    ]


def build_manifest(
    sources: SourceRegistry,
    config: StremioConfig,
    genres: Mapping[str, list[Genre]] | None = None,
) -> dict[str, Any]:
    """Build the manifest: three series catalogs per source.

    ``genres`` maps source route to its genre list; used as the options of
    the ``genre`` extra when present.
    """
    genres = genres or {}
    catalogs: list[dict[str, Any]] = []
    for source in sources:
        extra = _catalog_extra(genres.get(source.route, []))
        for catalog_type in CATALOG_TYPES:
            catalogs.append(
                {
                    "type": "series",
                    "id": f"{source.id}-{catalog_type}",
                    "name": f"{source.name} ({catalog_type.capitalize()})",
                    "extra": extra,
                }
            )

    return {
        "id": config.addon_id,
        "version": config.addon_version,
        "name": config.addon_name,
        "description": config.addon_description,
        "types": ["series"],
        "catalogs": catalogs,
        "resources": ["catalog", "meta", "stream"],
        "idPrefixes": sources.id_prefixes,
        "behaviorHints": {
            "adult": False,
            "configurable": False,
        },
    }
