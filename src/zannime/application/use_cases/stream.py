"""Stremio stream use case.

episode id -> episode detail -> default stream
+ per-quality, per-server fan-out -> StreamCandidate list.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import structlog

from zannime.domain.entities.identity import decode_video_id
from zannime.domain.entities.stremio import StreamCandidate
from zannime.domain.exceptions import FormatError, UpstreamError
from zannime.domain.ports.upstream import UpstreamClientPort

log = structlog.get_logger(__name__)

_RewriteFn = Callable[[str], str]


@dataclass(frozen=True)
class _ServerJob:
    """One quality × server pair from the episode's server tree."""

    quality_title: str
    server_id: str
    server_title: str


def _server_jobs(episode: dict[str, Any]) -> list[_ServerJob]:
    """Flatten ``server.qualities[].serverList[]`` in upstream order."""
    server = episode.get("server")
    if not isinstance(server, dict):
        return []
    qualities = server.get("qualities")
    if not isinstance(qualities, list):
        return []

    jobs: list[_ServerJob] = []
    for quality in qualities:
        if not isinstance(quality, dict):
            continue
        server_list = quality.get("serverList")
        if not isinstance(server_list, list):
            continue
        for entry in server_list:
            if not isinstance(entry, dict):
                continue
            jobs.append(
                _ServerJob(
                    quality_title=str(quality.get("title", "")),
                    server_id=str(entry.get("serverId", "")),
                    server_title=str(entry.get("title", "")),
                )
            )
    return jobs


class StreamUseCase:
    """Resolve a video id into playable stream candidates.

    Per-server requests run concurrently (bounded); each yields either a
    candidate or a skip, and the output keeps upstream quality-then-server
    order regardless of completion order.
    """

    def __init__(
        self,
        *,
        upstream: UpstreamClientPort,
        rewrite_fn: _RewriteFn,
        max_concurrent_servers: int = 8,
    ) -> None:
        self._upstream = upstream
        self._rewrite_fn = rewrite_fn
        self._max_concurrent_servers = max(1, max_concurrent_servers)

    async def execute(self, video_id: str) -> list[StreamCandidate]:
        """Return stream candidates for ``source:animeId:episodeId``.

        Never raises: a malformed id or failed episode request yields [].
        """
        try:
            parsed = decode_video_id(video_id)
        except FormatError:
            log.warning("stream_invalid_video_id", video_id=video_id)
            return []
        if not parsed.episode_id:
            return []

        try:
            envelope = await self._upstream.fetch(
                f"/{parsed.source}/episode/{parsed.episode_id}"
            )
        except UpstreamError:
            log.warning("stream_episode_fetch_failed", video_id=video_id, exc_info=True)
            return []

        episode = envelope.get("data")
        if not isinstance(episode, dict):
            return []

        streams: list[StreamCandidate] = []
        default_url = episode.get("defaultStreamingUrl")
        if default_url:
            streams.append(
                StreamCandidate(title="Default Stream", url=default_url, name="Default")
            )

        jobs = _server_jobs(episode)
        if jobs:
            streams.extend(await self._resolve_servers(parsed.source, jobs))

        log.info(
            "stream_resolve_complete",
            video_id=video_id,
            servers=len(jobs),
            streams=len(streams),
        )
        return streams

    async def _resolve_servers(
        self, source: str, jobs: list[_ServerJob]
    ) -> list[StreamCandidate]:
        semaphore = asyncio.Semaphore(self._max_concurrent_servers)

        async def _bounded(job: _ServerJob) -> StreamCandidate | None:
            async with semaphore:
                return await self._resolve_server(source, job)

        # gather() returns results in submission order
        outcomes = await asyncio.gather(*(_bounded(job) for job in jobs))
        resolved = [c for c in outcomes if c is not None]
        if len(resolved) < len(jobs):
            log.info(
                "stream_servers_skipped",
                source=source,
                total=len(jobs),
                skipped=len(jobs) - len(resolved),
            )
        return resolved

    async def _resolve_server(
        self, source: str, job: _ServerJob
    ) -> StreamCandidate | None:
        """Resolve one server to a candidate; None when it cannot be resolved."""
        try:
            envelope = await self._upstream.fetch(f"/{source}/server/{job.server_id}")
        except UpstreamError:
            log.debug(
                "stream_server_failed",
                server_id=job.server_id,
                quality=job.quality_title,
                exc_info=True,
            )
            return None

        data = envelope.get("data")
        url = data.get("url") if isinstance(data, dict) else None
        if not url or not isinstance(url, str):
            log.debug("stream_server_without_url", server_id=job.server_id)
            return None

        return StreamCandidate(
            title=f"{job.quality_title} - {job.server_title}",
            url=self._rewrite_fn(url),
            name=f"{job.quality_title} [{job.server_title}]",
        )
