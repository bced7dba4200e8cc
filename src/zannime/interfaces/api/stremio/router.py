"""Stremio addon API endpoints (manifest, catalog, meta, stream).

Every handler answers with a structurally valid, possibly empty body;
errors are logged and never surface as protocol faults.
"""

from __future__ import annotations

import re
from dataclasses import asdict
from typing import Any, cast
from urllib.parse import parse_qsl, quote

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from zannime.domain.entities.identity import decode_item_id, decode_video_id
from zannime.domain.entities.stremio import (
    CatalogFilter,
    MetaRecord,
    StreamCandidate,
)
from zannime.domain.exceptions import FormatError
from zannime.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["stremio"])

_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "*",
}

_CATALOG_ID_RE = re.compile(r"^(.+?)-(ongoing|completed|recent)$")

# MetaRecord attribute -> Stremio JSON key
_META_KEYS = {
    "id": "id",
    "type": "type",
    "name": "name",
    "poster": "poster",
    "background": "background",
    "poster_shape": "posterShape",
    "description": "description",
    "release_info": "releaseInfo",
    "genres": "genres",
    "imdb_rating": "imdbRating",
    "status": "status",
    "runtime": "runtime",
    "director": "director",
}


def _json(content: dict[str, Any]) -> JSONResponse:
    return JSONResponse(content=content, headers=_CORS_HEADERS)


def parse_catalog_id(catalog_id: str) -> tuple[str, str] | None:
    """Split ``"{sourceId}-{catalogType}"``; None if it does not match."""
    m = _CATALOG_ID_RE.match(catalog_id)
    if not m:
        return None
    return m.group(1), m.group(2)


def parse_extra(extra: str | None) -> CatalogFilter:
    """Parse the Stremio extra segment (``"search=naruto&skip=24"``).

    ``extra`` must still be percent-encoded; it is decoded exactly once here,
    so ``search=C%2B%2B`` yields ``"C++"``.

    A skip that is not an integer counts as 0.
    """
    if not extra:
        return CatalogFilter()
    values = dict(parse_qsl(extra, keep_blank_values=False))
    try:
        skip = max(0, int(values.get("skip", "0")))
    except ValueError:
        skip = 0
    return CatalogFilter(
        search=values.get("search") or None,
        genre=values.get("genre") or None,
        skip=skip,
    )


def _raw_extra_segment(request: Request, extra: str) -> str:
    """Return the undecoded extra path segment, without its ``.json`` suffix."""
    raw_path = request.scope.get("raw_path")
    if not raw_path:
        return quote(extra, safe="=&")
    segment = raw_path.decode("latin-1").split("?", 1)[0].rsplit("/", 1)[-1]
    return segment.removesuffix(".json")


def format_meta(meta: MetaRecord) -> dict[str, Any]:
    """Convert a MetaRecord to Stremio JSON, omitting unset optional fields."""
    out: dict[str, Any] = {}
    for attr, key in _META_KEYS.items():
        value = getattr(meta, attr)
        if value is None:
            continue
        out[key] = value
    if meta.videos is not None:
        out["videos"] = [asdict(v) for v in meta.videos]
    return out


def _format_stream(stream: StreamCandidate) -> dict[str, str]:
    return {"title": stream.title, "url": stream.url, "name": stream.name}


@router.get("/manifest.json")
async def stremio_manifest(request: Request) -> JSONResponse:
    """Serve the addon manifest built at startup."""
    state = cast(AppState, request.app.state)
    return _json(state.manifest)


@router.get("/catalog/{content_type}/{catalog_id}.json")
async def stremio_catalog(
    request: Request, content_type: str, catalog_id: str
) -> JSONResponse:
    return await _serve_catalog(request, content_type, catalog_id, None)


@router.get("/catalog/{content_type}/{catalog_id}/{extra}.json")
async def stremio_catalog_extra(
    request: Request, content_type: str, catalog_id: str, extra: str
) -> JSONResponse:
    raw_extra = _raw_extra_segment(request, extra)
    return await _serve_catalog(request, content_type, catalog_id, raw_extra)


async def _serve_catalog(
    request: Request, content_type: str, catalog_id: str, extra: str | None
) -> JSONResponse:
    state = cast(AppState, request.app.state)
    empty = {"metas": []}

    if content_type != "series":
        return _json(empty)

    parsed = parse_catalog_id(catalog_id)
    if parsed is None:
        return _json(empty)
    source_id, catalog_type = parsed

    source = state.sources.get_by_id(source_id)
    if source is None:
        log.info("stremio_catalog_unknown_source", catalog_id=catalog_id)
        return _json(empty)

    filters = parse_extra(extra)
    try:
        metas = await state.catalog_uc.execute(source, catalog_type, filters)
    except Exception:
        log.warning(
            "stremio_catalog_failed",
            catalog_id=catalog_id,
            extra=extra,
            exc_info=True,
        )
        return _json(empty)

    return _json({"metas": [format_meta(m) for m in metas]})


@router.get("/meta/{content_type}/{meta_id}.json")
async def stremio_meta(request: Request, content_type: str, meta_id: str) -> JSONResponse:
    """Serve the full meta of ``source:animeId``; ``meta: null`` on failure."""
    state = cast(AppState, request.app.state)
    empty: dict[str, Any] = {"meta": None}

    if content_type != "series":
        return _json(empty)

    try:
        item = decode_item_id(meta_id)
    except FormatError:
        log.info("stremio_meta_invalid_id", meta_id=meta_id)
        return _json(empty)

    source = state.sources.get_by_route(item.source)
    if source is None:
        log.info("stremio_meta_unknown_source", meta_id=meta_id)
        return _json(empty)

    try:
        meta = await state.meta_uc.execute(source, item.anime_id)
    except Exception:
        log.warning("stremio_meta_failed", meta_id=meta_id, exc_info=True)
        return _json(empty)

    return _json({"meta": format_meta(meta)})


@router.get("/stream/{content_type}/{stream_id}.json")
async def stremio_stream(
    request: Request, content_type: str, stream_id: str
) -> JSONResponse:
    """Resolve streams for ``source:animeId:episodeId``."""
    state = cast(AppState, request.app.state)
    empty: dict[str, Any] = {"streams": []}

    if content_type != "series":
        return _json(empty)

    try:
        video = decode_video_id(stream_id)
    except FormatError:
        log.info("stremio_stream_invalid_id", stream_id=stream_id)
        return _json(empty)

    if state.sources.get_by_route(video.source) is None:
        log.info("stremio_stream_unknown_source", stream_id=stream_id)
        return _json(empty)

    try:
        streams = await state.stream_uc.execute(stream_id)
    except Exception:
        log.warning("stremio_stream_failed", stream_id=stream_id, exc_info=True)
        return _json(empty)

    return _json({"streams": [_format_stream(s) for s in streams]})
