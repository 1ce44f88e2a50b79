"""Error taxonomy for the GeisPoint client.

Every error raised by the library derives from :class:`GeisPointError`. The
concrete classes also inherit from the closest builtin exception so callers
that only know about ``ValueError``/``LookupError``/``KeyError`` keep working.
"""

from __future__ import annotations


class GeisPointError(Exception):
    """Base class for all GeisPoint client errors."""


class ConfigurationError(GeisPointError, ValueError):
    """Invalid service options or an unresolvable cache backend."""


class InvalidArgumentError(GeisPointError, ValueError):
    """A caller-supplied argument failed a precondition."""


class NotFoundError(GeisPointError, LookupError):
    """The requested record does not exist."""


class PointNotFoundError(NotFoundError):
    """Point detail lookup yielded zero or more than one record."""


class CacheMissError(NotFoundError, KeyError):
    """``get`` was called for a key the cache backend does not hold."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message instead
        return Exception.__str__(self)


class CacheBackendError(GeisPointError):
    """The cache backend is unreachable or its persisted state is corrupt."""


class RemoteServiceError(GeisPointError):
    """Transport failure, SOAP fault or malformed remote payload."""
