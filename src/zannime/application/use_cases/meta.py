"""Stremio meta use case: anime detail enriched with its weekly airing day."""

from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import Any

import structlog

from zannime.application.factories.metadata import (
    RELEASE_INFO_SEPARATOR,
    meta_from_detail,
)
from zannime.domain.entities.source import Source
from zannime.domain.entities.stremio import MetaRecord
from zannime.domain.exceptions import EnvelopeError, UpstreamError
from zannime.domain.ports.upstream import UpstreamClientPort

log = structlog.get_logger(__name__)


def merge_schedule(meta: MetaRecord, schedule: Any, anime_id: str) -> MetaRecord:
    """Append ``"Airs on {day}"`` for the first weekday listing ``anime_id``.

    Days are scanned in schedule order and the first listing wins. Nothing is
    appended when the day name already occurs anywhere in the release info,
    so merging the same schedule twice is a no-op.
    """
    if not isinstance(schedule, list):
        return meta

    for day_schedule in schedule:
        if not isinstance(day_schedule, dict):
            continue
        anime_list = day_schedule.get("animeList")
        if not isinstance(anime_list, list):
            continue
        if not any(
            isinstance(a, dict) and a.get("animeId") == anime_id for a in anime_list
        ):
            continue

        day = str(day_schedule.get("day") or "")
        release_info = meta.release_info or ""
        if day in release_info:
            return meta
        fragment = f"Airs on {day}"
        if release_info:
            fragment = f"{release_info}{RELEASE_INFO_SEPARATOR}{fragment}"
        return replace(meta, release_info=fragment)

    return meta


class MetaUseCase:
    """Fetch one anime's detail and merge the source's weekly schedule into it."""

    def __init__(self, *, upstream: UpstreamClientPort) -> None:
        self._upstream = upstream

    async def execute(self, source: Source, anime_id: str) -> MetaRecord:
        """Build the full meta for ``source.route:anime_id``.

        The schedule is requested alongside the detail and cancelled if the
        detail request fails.

        Raises:
            UpstreamError: the detail request failed or its ``data`` is not
                an object. A failing schedule request only drops the airing info.
        """
        schedule_task = asyncio.create_task(self._fetch_schedule(source))
        try:
            envelope = await self._upstream.fetch(f"/{source.route}/anime/{anime_id}")
            data = envelope.get("data")
            if not isinstance(data, dict):
                raise EnvelopeError(
                    f"Anime detail for {anime_id!r} is {type(data).__name__}, not an object"
                )
        except BaseException:
            schedule_task.cancel()
            raise

        meta = meta_from_detail(source.route, anime_id, data)
        return merge_schedule(meta, await schedule_task, anime_id)

    async def _fetch_schedule(self, source: Source) -> Any:
        try:
            envelope = await self._upstream.fetch(f"/{source.route}/schedule")
        except UpstreamError:
            log.warning("schedule_fetch_failed", source=source.route, exc_info=True)
            return None
        return envelope.get("data")
