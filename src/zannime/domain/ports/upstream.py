"""Port for the upstream anime-listing API."""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable


@runtime_checkable
class UpstreamClientPort(Protocol):
    """Fetch-and-decode primitive for ``GET {base}{path}``.

    Returns the full envelope (``{ok, message?, data, pagination?}``).

    Raises:
        NetworkError: transport failure or non-2xx status.
        EnvelopeError: undecodable body or ``ok: false``.
    """

    async def fetch(
        self, path: str, params: Mapping[str, str | int] | None = None
    ) -> dict[str, Any]: ...
