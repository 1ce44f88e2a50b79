"""In-process cache backend.

A thin wrapper over :class:`cachetools.LRUCache` (or
:class:`cachetools.TTLCache` when a TTL is configured) implementing the
``exists``/``get``/``set`` backend contract. Entries live only as long as the
process.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from cachetools import LRUCache, TTLCache  # type: ignore[import-untyped]

from ..errors import CacheMissError, ConfigurationError


class MemoryCacheBackend:
    """Process-local LRU cache.

    Parameters
    ----------
    maxsize: int
        Maximum number of entries to retain.
        When the cache is full, the least-recently-used entry is discarded.
    ttl: Optional[float]
        Optional time-to-live in seconds for every entry.
    """

    def __init__(self, maxsize: int = 1024, ttl: Optional[float] = None) -> None:
        self._cache: LRUCache[str, Any]
        if ttl is not None:
            self._cache = TTLCache(maxsize=maxsize, ttl=ttl)
        else:
            self._cache = LRUCache(maxsize=maxsize)

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "MemoryCacheBackend":
        try:
            maxsize = int(options.get("maxsize", 1024))
            ttl = options.get("ttl")
            ttl = float(ttl) if ttl is not None else None
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Invalid memory cache options: {exc}") from exc
        if maxsize < 1 or (ttl is not None and ttl <= 0):
            raise ConfigurationError("Memory cache `maxsize` and `ttl` must be positive")
        return cls(maxsize=maxsize, ttl=ttl)

    def exists(self, key: str) -> bool:
        return key in self._cache

    def get(self, key: str) -> Any:
        try:
            return self._cache[key]
        except KeyError:
            raise CacheMissError(f"No cached value for key `{key}`") from None

    def set(self, key: str, value: Any) -> None:
        """Insert or update `key` with `value`."""
        self._cache[key] = value

    def __len__(self) -> int:
        return len(self._cache)
