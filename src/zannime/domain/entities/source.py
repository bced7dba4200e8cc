"""Upstream source registry entities."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

_SOURCE_ID_SUFFIX = "-anime"


@dataclass(frozen=True)
class Source:
    """A catalog namespace exposed by the upstream (e.g. ``otakudesu``)."""

    id: str  # "otakudesu-anime", prefix of catalog ids
    name: str  # "Otakudesu Anime"
    route: str  # "otakudesu", prefix of item ids

    @classmethod
    def from_route(cls, route: str, title: str) -> Source:
        """Derive a Source from the upstream route string (``"/otakudesu"``)."""
        clean = route.removeprefix("/")
        return cls(id=f"{clean}{_SOURCE_ID_SUFFIX}", name=f"{title} Anime", route=clean)

    @property
    def id_prefix(self) -> str:
        return f"{self.route}:"


@dataclass(frozen=True)
class Genre:
    id: str
    name: str


class SourceRegistry:
    """Read-only set of sources, loaded once at startup.

    Passed explicitly to whoever needs it; never mutated after construction.
    """

    __slots__ = ("_sources", "_by_id", "_by_route")

    def __init__(self, sources: Iterable[Source] = ()) -> None:
        self._sources: tuple[Source, ...] = tuple(sources)
        self._by_id = {s.id: s for s in self._sources}
        self._by_route = {s.route: s for s in self._sources}

    def __iter__(self) -> Iterator[Source]:
        return iter(self._sources)

    def __len__(self) -> int:
        return len(self._sources)

    def __repr__(self) -> str:
        return f"SourceRegistry({[s.route for s in self._sources]!r})"

    def get_by_id(self, source_id: str) -> Source | None:
        """Lookup by catalog source id (``"otakudesu-anime"``)."""
        return self._by_id.get(source_id)

    def get_by_route(self, route: str) -> Source | None:
        """Lookup by item-id prefix (``"otakudesu"``)."""
        return self._by_route.get(route)

    @property
    def id_prefixes(self) -> list[str]:
        return [s.id_prefix for s in self._sources]

    @property
    def names(self) -> list[str]:
        return [s.name for s in self._sources]
