"""Shared test fixtures for the Zannime test suite."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

import pytest

from zannime.domain.entities.source import Source, SourceRegistry
from zannime.domain.exceptions import NetworkError

Responder = Callable[[dict[str, str]], dict[str, Any]]

# ---------------------------------------------------------------------------
# Fake upstream port
# ---------------------------------------------------------------------------


def _not_found() -> NetworkError:
    return NetworkError("API request failed with status 404", status_code=404)


class FakeUpstream:
    """In-memory UpstreamClientPort keyed by request path.

    A route maps to an envelope dict, an exception instance (raised), or a
    callable receiving the query params. Unknown paths raise a 404.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, str]]] = []
        self._routes: dict[str, Any] = {}

    def add(
        self, path: str, response: dict[str, Any] | BaseException | Responder
    ) -> None:
        self._routes[path] = response

    def add_data(self, path: str, data: Any, **envelope: Any) -> None:
        self.add(path, {"ok": True, "message": "", "data": data, **envelope})

    def add_pages(
        self,
        path: str,
        pages: list[list[dict[str, Any]]],
        *,
        total_pages: int | None = None,
    ) -> None:
        """Serve ``pages`` by the ``page`` param (absent means page 1).

        Pages past the end raise a 404, like the upstream does.
        """

        def _respond(params: dict[str, str]) -> dict[str, Any]:
            page = int(params.get("page", "1"))
            if page > len(pages):
                raise _not_found()
            envelope: dict[str, Any] = {"ok": True, "data": {"animeList": pages[page - 1]}}
            if total_pages is not None:
                envelope["pagination"] = {"currentPage": page, "totalPages": total_pages}
            return envelope

        self.add(path, _respond)

    def paths(self) -> list[str]:
        return [path for path, _ in self.calls]

    async def fetch(
        self, path: str, params: Mapping[str, str | int] | None = None
    ) -> dict[str, Any]:
        query = {k: str(v) for k, v in (params or {}).items()}
        self.calls.append((path, query))
        response = self._routes.get(path)
        if response is None:
            raise _not_found()
        if isinstance(response, BaseException):
            raise response
        if callable(response):
            return response(query)
        return response


@pytest.fixture()
def fake_upstream() -> FakeUpstream:
    return FakeUpstream()


# ---------------------------------------------------------------------------
# Domain fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def source() -> Source:
    """The ``otakudesu`` source as discovered from ``/view-data``."""
    return Source.from_route("/otakudesu", "Otakudesu")


@pytest.fixture()
def registry(source: Source) -> SourceRegistry:
    return SourceRegistry([source, Source.from_route("/samehadaku", "Samehadaku")])
