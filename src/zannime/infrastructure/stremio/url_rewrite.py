"""Per-hoster rewrites of resolved stream URLs into direct-download URLs."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit, urlunsplit

import structlog

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PathRewrite:
    """Replace a share-page path prefix with the hoster's direct path prefix."""

    host_marker: str  # matched case-insensitively against the hostname
    share_prefix: str
    direct_prefix: str


# Share page https://pixeldrain.com/u/<id> → file API https://pixeldrain.com/api/file/<id>
HOST_REWRITES: tuple[PathRewrite, ...] = (
    PathRewrite(host_marker="pixeldrain", share_prefix="/u/", direct_prefix="/api/file/"),
)


def rewrite_stream_url(
    url: str, rewrites: tuple[PathRewrite, ...] = HOST_REWRITES
) -> str:
    """Apply the first rewrite whose host marker matches ``url``.

    URLs with a non-matching host, or a matching host without the share
    prefix, are returned unchanged.
    """
    parts = urlsplit(url)
    hostname = (parts.hostname or "").lower()
    for rule in rewrites:
        if rule.host_marker not in hostname:
            continue
        if not parts.path.startswith(rule.share_prefix):
            return url
        path = rule.direct_prefix + parts.path[len(rule.share_prefix) :]
        rewritten = urlunsplit(parts._replace(path=path))
        log.debug("stream_url_rewritten", hoster=rule.host_marker, url=rewritten)
        return rewritten
    return url
