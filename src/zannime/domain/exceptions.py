"""Error taxonomy shared by the upstream client and the use cases."""

from __future__ import annotations


class UpstreamError(Exception):
    """Base class for failures talking to the upstream anime API."""


class NetworkError(UpstreamError):
    """Transport failure or non-2xx response.

    ``status_code`` is ``None`` when no response was received at all.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class EnvelopeError(UpstreamError):
    """Response body is not a valid ``{ok, data}`` envelope or has ``ok: false``."""


class FormatError(ValueError):
    """Raised when a composite item or video id cannot be decoded."""
