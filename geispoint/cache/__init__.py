"""Cache backend interfaces and registry.

A cache backend is any object exposing ``exists``/``get``/``set`` keyed by
string. Backends are selected by a registry name from the service options;
the registry maps each name to a factory that receives the backend specific
``cache_options`` mapping.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Protocol, runtime_checkable

from ..errors import ConfigurationError


@runtime_checkable
class CacheBackend(Protocol):
    """Protocol for cache backends.

    Implementations store JSON-compatible values under string keys. Backend
    failures must raise :class:`~geispoint.errors.CacheBackendError` rather
    than being reported as a miss.
    """

    def exists(self, key: str) -> bool:
        """Return True if a value is stored under ``key``."""
        raise NotImplementedError

    def get(self, key: str) -> Any:
        """Return the value stored under ``key``.

        Raises :class:`~geispoint.errors.CacheMissError` when the key is
        absent; callers are expected to check :meth:`exists` first.
        """
        raise NotImplementedError

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        raise NotImplementedError


CacheBackendFactory = Callable[[Mapping[str, Any]], CacheBackend]

_backends: Dict[str, CacheBackendFactory] = {}


def register_cache_backend(name: str, factory: CacheBackendFactory) -> None:
    """Register a backend factory under ``name``."""
    _backends[name] = factory


def available_cache_backends() -> list[str]:
    """Get list of registered backend names."""
    return list(_backends.keys())


def create_cache_backend(name: str | None, options: Mapping[str, Any]) -> CacheBackend:
    """Instantiate the backend registered under ``name``.

    Raises
    ------
    ConfigurationError
        If ``name`` is not registered, ``options`` is not a mapping, or the
        resulting object does not satisfy :class:`CacheBackend`.
    """
    logger = logging.getLogger(__name__)

    if not name or name not in _backends:
        raise ConfigurationError(
            f"Cache backend `{name}` does not exist! "
            f"Available: {', '.join(sorted(_backends)) or 'none'}"
        )
    if not isinstance(options, Mapping):
        raise ConfigurationError("Invalid value for options key `cacheOptions`!")

    backend = _backends[name](options)
    if not isinstance(backend, CacheBackend):
        raise ConfigurationError(
            f"Cache backend `{name}` lacks the exists/get/set capability set"
        )
    logger.info(
        "geispoint.cache.backend.created",
        extra={"backend": name, "backend_type": type(backend).__name__},
    )
    return backend


def reset_cache_backends() -> None:
    """Test-only helper restoring the built-in registry."""
    _backends.clear()
    _register_builtin_backends()


def _register_builtin_backends() -> None:
    from .file import FileCacheBackend
    from .memory import MemoryCacheBackend
    from .table import TableCacheBackend

    register_cache_backend("memory", MemoryCacheBackend.from_options)
    register_cache_backend("file", FileCacheBackend.from_options)
    register_cache_backend("table", TableCacheBackend.from_options)


_register_builtin_backends()
