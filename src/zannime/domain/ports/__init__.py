from .upstream import UpstreamClientPort

__all__ = ["UpstreamClientPort"]
