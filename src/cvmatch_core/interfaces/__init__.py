"""Public interface re-exports for cvmatch_core."""

from cvmatch_core.interfaces.cache import CacheClient
from cvmatch_core.interfaces.embedder import EmbedderBase

__all__ = [
    "CacheClient",
    "EmbedderBase",
]
