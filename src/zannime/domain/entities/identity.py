"""Composite Stremio ids: ``source:animeId`` and ``source:animeId:episodeId``.

No escaping is performed; neither ``source`` nor ``animeId`` may contain ``:``.
A video id with more than three parts keeps everything after the second
separator as its episode id.
"""

from __future__ import annotations

from dataclasses import dataclass

from zannime.domain.exceptions import FormatError

SEPARATOR = ":"


@dataclass(frozen=True)
class ItemId:
    source: str
    anime_id: str

    def __str__(self) -> str:
        return encode_item_id(self.source, self.anime_id)


@dataclass(frozen=True)
class VideoId:
    source: str
    anime_id: str
    episode_id: str

    def __str__(self) -> str:
        return SEPARATOR.join((self.source, self.anime_id, self.episode_id))


def encode_item_id(source: str, anime_id: str) -> str:
    return f"{source}{SEPARATOR}{anime_id}"


def encode_video_id(source: str, anime_id: str, episode_id: str) -> str:
    return str(VideoId(source, anime_id, episode_id))


def decode_item_id(raw: str) -> ItemId:
    """Split on the first separator.

    Raises:
        FormatError: if ``raw`` has no separator.
    """
    source, sep, anime_id = raw.partition(SEPARATOR)
    if not sep:
        raise FormatError(f"Invalid item id format: {raw!r}")
    return ItemId(source=source, anime_id=anime_id)


def decode_video_id(raw: str) -> VideoId:
    """Split into ``source``, ``animeId`` and ``episodeId``.

    ``"src:a1:"`` decodes with an empty episode id; ``"src:a1"`` is an error.
    Extra separators are folded into the episode id.

    Raises:
        FormatError: if fewer than three parts are present.
    """
    parts = raw.split(SEPARATOR, 2)
    if len(parts) < 3:
        raise FormatError(f"Invalid episode ID format: {raw!r}")
    source, anime_id, episode_id = parts
    return VideoId(source=source, anime_id=anime_id, episode_id=episode_id)
