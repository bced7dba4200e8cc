"""Factory functions mapping upstream anime records to Stremio metas.

Upstream records are loosely shaped dicts; every field is optional and
missing values fall back to empty strings/lists.
"""

from __future__ import annotations

import re
from typing import Any

from zannime.domain.entities.identity import encode_item_id, encode_video_id
from zannime.domain.entities.stremio import MetaRecord, Video

# Leading decimal number, e.g. "12", "12.5", "-1", ".5 END"
_LEADING_NUMBER_RE = re.compile(r"^\s*[-+]?(?:\d+\.?\d*|\.\d+)")

# Preview fields appended to release info, in display order.
_PREVIEW_INFO_FIELDS = (
    "releaseDay",
    "latestReleaseDate",
    "status",
    "type",
    "releaseDate",
    "releasedOn",
)

_EPISODE_LABEL = "Episode"
RELEASE_INFO_SEPARATOR = " | "


def parse_leading_number(value: Any) -> int | float | None:
    """Parse the leading number of ``value``; whole numbers come back as int.

    Returns None when ``value`` does not start with a number.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        m = _LEADING_NUMBER_RE.match(str(value))
        if not m:
            return None
        number = float(m.group(0))
    return int(number) if number.is_integer() else number


def _description(anime: dict[str, Any]) -> str:
    synopsis = anime.get("synopsis")
    if isinstance(synopsis, dict) and isinstance(synopsis.get("paragraphs"), list):
        return "\n\n".join(str(p) for p in synopsis["paragraphs"])
    return ""


def _genres(anime: dict[str, Any]) -> list[str]:
    genre_list = anime.get("genreList")
    if not isinstance(genre_list, list):
        return []
    return [g.get("title", "") for g in genre_list if isinstance(g, dict)]


def preview_from_anime(anime: dict[str, Any], route: str) -> MetaRecord:
    """Map one catalog list entry to a catalog preview meta."""
    poster = anime.get("poster") or ""

    info_parts: list[str] = []
    if anime.get("episodes") is not None:
        info_parts.append(f"{anime['episodes']} episodes")
    info_parts.extend(str(anime[f]) for f in _PREVIEW_INFO_FIELDS if anime.get(f))

    rating: float | None = None
    if anime.get("score"):
        score = parse_leading_number(str(anime["score"]).replace(",", ".", 1))
        if score is not None:
            rating = score * 10  # 0-10 upstream scale → 0-100

    return MetaRecord(
        id=encode_item_id(route, anime.get("animeId") or ""),
        name=anime.get("title") or "",
        poster=poster,
        background=poster,
        description=_description(anime),
        release_info=RELEASE_INFO_SEPARATOR.join(info_parts),
        genres=_genres(anime),
        imdb_rating=rating,
    )


def _episode_label(title: Any) -> str:
    text = "" if title is None else str(title)
    if _EPISODE_LABEL in text:
        text = text.replace(_EPISODE_LABEL, "").strip()
    return text


def videos_from_episodes(
    episode_list: list[dict[str, Any]], route: str, anime_id: str
) -> list[Video]:
    """Build the videos list, sorted ascending by episode number.

    Titles like ``"Episode 12"`` yield episode 12; unparseable titles sort
    as episode 0. The sort is stable.
    """
    videos = []
    for episode in episode_list:
        label = _episode_label(episode.get("title"))
        videos.append(
            Video(
                id=encode_video_id(route, anime_id, str(episode.get("episodeId", ""))),
                title=f"{_EPISODE_LABEL} {label}",
                episode=parse_leading_number(label) or 0,
            )
        )
    return sorted(videos, key=lambda v: v.episode)


def meta_from_detail(route: str, anime_id: str, data: dict[str, Any]) -> MetaRecord:
    """Map an upstream anime detail record to a full meta."""
    name = data.get("title") or ""
    if data.get("japanese"):
        name = f"{name} ({data['japanese']})"

    runtime: str | None = None
    if data.get("episodes"):
        runtime = f"{data['episodes']} episodes"
    if data.get("duration"):
        runtime = str(data["duration"])

    rating = parse_leading_number(data["score"]) if data.get("score") else None

    videos: list[Video] = []
    if isinstance(data.get("episodeList"), list):
        videos = videos_from_episodes(data["episodeList"], route, anime_id)

    poster = data.get("poster") or ""
    return MetaRecord(
        id=encode_item_id(route, anime_id),
        name=name,
        poster=poster,
        background=poster,
        description=_description(data),
        release_info=data.get("aired") or data.get("season") or "",
        genres=_genres(data),
        imdb_rating=rating,
        status=data.get("status") or None,
        runtime=runtime,
        director=data.get("studios") or None,
        videos=videos,
    )
