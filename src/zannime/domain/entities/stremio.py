"""Domain entities for the Stremio addon protocol.

Pure value objects without framework dependencies or I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

StremioContentType = Literal["series"]
CatalogType = Literal["ongoing", "completed", "recent"]

CATALOG_TYPES: tuple[CatalogType, ...] = ("ongoing", "completed", "recent")


@dataclass(frozen=True)
class Video:
    """One episode entry of a series meta (Stremio ``Video`` object)."""

    id: str  # "source:animeId:episodeId"
    title: str
    episode: int | float = 0
    season: int = 1
    released: str = "2000-01-01"


@dataclass(frozen=True)
class MetaRecord:
    """Normalized Stremio meta (catalog preview or full detail).

    ``release_info`` is a ``" | "``-joined list of informational fragments;
    order is significant.
    """

    id: str  # "source:animeId"
    name: str
    type: StremioContentType = "series"
    poster: str = ""
    background: str = ""
    poster_shape: str = "poster"
    description: str = ""
    release_info: str = ""
    genres: list[str] = field(default_factory=list)
    imdb_rating: float | None = None
    status: str | None = None
    runtime: str | None = None
    director: str | None = None
    videos: list[Video] | None = None


@dataclass(frozen=True)
class StreamCandidate:
    """Stremio protocol Stream object (JSON-serializable)."""

    title: str  # "720p - Pixeldrain"
    url: str
    name: str  # "720p [Pixeldrain]"


@dataclass(frozen=True)
class CatalogFilter:
    """Extra arguments of a catalog request.

    ``search`` wins over ``genre``, which wins over the catalog type.
    """

    search: str | None = None
    genre: str | None = None
    skip: int = 0
