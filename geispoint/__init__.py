"""
GeisPoint client Python package.

This package hosts the GeisPoint lookup service, its remote adapters, cache
backends, and supporting configuration. See README.md for usage.
"""

from .__version__ import __version__
from .errors import (
    CacheBackendError,
    CacheMissError,
    ConfigurationError,
    GeisPointError,
    InvalidArgumentError,
    NotFoundError,
    PointNotFoundError,
    RemoteServiceError,
)
from .service import GeisPointService

__all__ = [
    "__version__",
    "GeisPointService",
    "GeisPointError",
    "ConfigurationError",
    "InvalidArgumentError",
    "NotFoundError",
    "PointNotFoundError",
    "CacheMissError",
    "CacheBackendError",
    "RemoteServiceError",
]
