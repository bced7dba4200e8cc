"""Stremio catalog use case: skip-to-page inference over the upstream lists.

The upstream pages by page number and does not advertise a page size, while
Stremio asks for an absolute item offset (``skip``). A non-zero skip is served
by probing page 1 to learn the page size, then fetching the computed page.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import structlog

from zannime.application.factories.metadata import preview_from_anime
from zannime.domain.entities.source import Source
from zannime.domain.entities.stremio import CatalogFilter, MetaRecord
from zannime.domain.exceptions import NetworkError, UpstreamError
from zannime.domain.ports.upstream import UpstreamClientPort

log = structlog.get_logger(__name__)

# Page size assumed when the page-1 probe fails.
FALLBACK_PAGE_SIZE = 24

_CATALOG_PATHS: dict[str, str] = {
    "ongoing": "ongoing",
    "completed": "completed",
    "recent": "recent",
}


@dataclass(frozen=True)
class CatalogRequest:
    """Upstream endpoint path and query params for one catalog listing."""

    path: str
    params: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class PagePlan:
    """Outcome of page inference for a given skip.

    Exactly one of: ``exhausted`` (serve nothing), ``items`` (serve the
    already-fetched page 1), or neither (fetch ``page``).
    """

    page: int
    items: list[dict[str, Any]] | None = None
    exhausted: bool = False


def build_catalog_request(
    source: Source, catalog_type: str, extra: CatalogFilter
) -> CatalogRequest | None:
    """Map a catalog filter to its upstream listing; None if unsupported.

    Search takes precedence over genre, genre over the catalog type.
    """
    if extra.search:
        return CatalogRequest(path=f"/{source.route}/search", params={"q": extra.search})
    if extra.genre:
        return CatalogRequest(path=f"/{source.route}/genres/{extra.genre}")
    endpoint = _CATALOG_PATHS.get(catalog_type)
    if endpoint is None:
        return None
    return CatalogRequest(path=f"/{source.route}/{endpoint}")


def extract_anime_list(envelope: dict[str, Any]) -> list[dict[str, Any]]:
    """Pull the item list from ``data`` or ``data.animeList``; empty otherwise."""
    data = envelope.get("data")
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get("animeList"), list):
        return data["animeList"]
    return []


def _total_pages(envelope: dict[str, Any]) -> int | None:
    pagination = envelope.get("pagination")
    if not isinstance(pagination, dict):
        return None
    total = pagination.get("totalPages")
    if isinstance(total, bool) or not isinstance(total, int) or total <= 0:
        return None
    return total


def plan_page(skip: int, probe: dict[str, Any] | None) -> PagePlan:
    """Decide which upstream page serves ``skip`` (skip > 0).

    Args:
        skip: Absolute item offset requested by Stremio.
        probe: Page-1 envelope, or None when the probe failed.

    Returns:
        The page plan. A failed probe assumes ``FALLBACK_PAGE_SIZE`` items per
        page; an empty probe page means there is nothing to serve.
    """
    if probe is None:
        return PagePlan(page=skip // FALLBACK_PAGE_SIZE + 1)

    items = extract_anime_list(probe)
    items_per_page = len(items)
    if items_per_page == 0:
        return PagePlan(page=1, exhausted=True)

    page = skip // items_per_page + 1

    total = _total_pages(probe)
    if total is not None and page > total:
        return PagePlan(page=page, exhausted=True)

    if page == 1:
        return PagePlan(page=1, items=items)
    return PagePlan(page=page)


class CatalogUseCase:
    """Serve Stremio catalogs (ongoing/completed/recent, search, genre)."""

    def __init__(self, *, upstream: UpstreamClientPort) -> None:
        self._upstream = upstream

    async def execute(
        self, source: Source, catalog_type: str, extra: CatalogFilter
    ) -> list[MetaRecord]:
        """Return the catalog metas at offset ``extra.skip``; empty on any error."""
        try:
            items = await self.fetch_items(source, catalog_type, extra)
        except UpstreamError:
            log.warning(
                "catalog_failed",
                source=source.id,
                catalog_type=catalog_type,
                skip=extra.skip,
                exc_info=True,
            )
            return []
        return [preview_from_anime(anime, source.route) for anime in items]

    async def fetch_items(
        self, source: Source, catalog_type: str, extra: CatalogFilter
    ) -> list[dict[str, Any]]:
        """Return the raw upstream items at offset ``extra.skip``.

        Raises:
            UpstreamError: the page request failed (except 404 past page 1).
        """
        request = build_catalog_request(source, catalog_type, extra)
        if request is None:
            return []

        if extra.skip <= 0:
            return await self._fetch_page(request, 1)

        probe = await self._probe(request)
        plan = plan_page(extra.skip, probe)
        log.debug(
            "catalog_page_planned",
            path=request.path,
            skip=extra.skip,
            page=plan.page,
            probed=probe is not None,
            exhausted=plan.exhausted,
        )
        if plan.exhausted:
            return []
        if plan.items is not None:
            return plan.items
        return await self._fetch_page(request, plan.page)

    async def _probe(self, request: CatalogRequest) -> dict[str, Any] | None:
        """Fetch page 1 without a page param; None on failure."""
        try:
            return await self._upstream.fetch(request.path, request.params or None)
        except UpstreamError:
            log.warning(
                "catalog_probe_failed",
                path=request.path,
                fallback_page_size=FALLBACK_PAGE_SIZE,
                exc_info=True,
            )
            return None

    async def _fetch_page(
        self, request: CatalogRequest, page: int
    ) -> list[dict[str, Any]]:
        params = {**request.params, "page": str(page)}
        try:
            envelope = await self._upstream.fetch(request.path, params)
        except NetworkError as exc:
            if exc.status_code == 404 and page > 1:
                log.debug("catalog_exhausted", path=request.path, page=page)
                return []
            raise
        return extract_anime_list(envelope)
