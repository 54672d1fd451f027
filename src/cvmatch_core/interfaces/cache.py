"""Abstract key/value cache interface used by the embedding layer."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class CacheClient(Protocol):
    """String key/value cache with expiry."""

    async def get(self, key: str) -> str | None:
        """Return the cached value, or None on a miss."""
        ...

    async def set(self, key: str, value: str, ttl_seconds: int = 86400) -> None:
        """Store a value for ttl_seconds."""
        ...

    async def delete(self, key: str) -> None:
        """Remove a key if present."""
        ...
