from .identity import (
    ItemId,
    VideoId,
    decode_item_id,
    decode_video_id,
    encode_item_id,
    encode_video_id,
)
from .source import Genre, Source, SourceRegistry
from .stremio import (
    CATALOG_TYPES,
    CatalogFilter,
    CatalogType,
    MetaRecord,
    StreamCandidate,
    StremioContentType,
    Video,
)

__all__ = [
    "CATALOG_TYPES",
    "CatalogFilter",
    "CatalogType",
    "Genre",
    "ItemId",
    "MetaRecord",
    "Source",
    "SourceRegistry",
    "StreamCandidate",
    "StremioContentType",
    "Video",
    "VideoId",
    "decode_item_id",
    "decode_video_id",
    "encode_item_id",
    "encode_video_id",
]
