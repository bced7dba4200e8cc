from .metadata import meta_from_detail, preview_from_anime, videos_from_episodes

__all__ = ["meta_from_detail", "preview_from_anime", "videos_from_episodes"]
