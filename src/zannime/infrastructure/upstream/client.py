"""Upstream anime API client: async httpx implementation of UpstreamClientPort."""

from __future__ import annotations

from typing import Any, Mapping

import httpx
import structlog

from zannime.domain.exceptions import EnvelopeError, NetworkError

log = structlog.get_logger(__name__)


class HttpxUpstreamClient:
    """Thin fetch + JSON decode + envelope check over a shared AsyncClient.

    No retries and no caching: every call is one-shot and failures are
    raised to the caller, which owns the degrade policy.
    """

    def __init__(self, *, base_url: str, http_client: httpx.AsyncClient) -> None:
        self._base_url = base_url.rstrip("/")
        self._http = http_client

    @property
    def base_url(self) -> str:
        return self._base_url

    def url_for(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    async def fetch(
        self, path: str, params: Mapping[str, str | int] | None = None
    ) -> dict[str, Any]:
        """GET ``{base}{path}`` and return the decoded envelope.

        Raises:
            NetworkError: transport failure or non-2xx status.
            EnvelopeError: body is not JSON, not an object, or ``ok`` is not true.
        """
        url = self.url_for(path)
        log.debug("upstream_request", url=url, params=dict(params or {}))

        try:
            resp = await self._http.get(url, params=dict(params) if params else None)
        except httpx.HTTPError as exc:
            raise NetworkError(f"Upstream request to {url} failed: {exc!r}") from exc

        if not resp.is_success:
            raise NetworkError(
                f"API request failed with status {resp.status_code}",
                status_code=resp.status_code,
            )

        try:
            envelope = resp.json()
        except ValueError as exc:
            raise EnvelopeError(f"Malformed JSON from {url}") from exc

        if not isinstance(envelope, dict):
            raise EnvelopeError(f"Unexpected envelope type {type(envelope).__name__}")
        if not envelope.get("ok"):
            raise EnvelopeError(f"API returned error: {envelope.get('message')}")

        return envelope
