from .client import HttpxUpstreamClient

__all__ = ["HttpxUpstreamClient"]
