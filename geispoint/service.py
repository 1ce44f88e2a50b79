"""GeisPoint lookup service with a cache-aside layer.

:class:`GeisPointService` is the public entry point of the package. It wraps
a :class:`~geispoint.adapters.RemoteLookupClient` and, when caching is
enabled, consults a :class:`~geispoint.cache.CacheBackend` before every
cacheable remote call.

Caching policy
--------------
- Regions are cached under ``region|<country>``.
- Cities are cached under ``city|<region_id>``. The country code does not
  take part in the key, so two countries asking for the same region id
  share one entry.
- Point details are cached under ``point|<gpid>``.
- Searches are never cached.

Cached values are stored as JSON-compatible renderings of the domain objects
and re-validated on a hit. The check-then-act sequence is not atomic:
concurrent callers missing the same key may both call the service and both
write the (identical) value.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Mapping, Optional, TypeVar, Union

from pydantic import TypeAdapter, ValidationError

from .adapters import RemoteLookupClient
from .adapters.geispoint import GeisPointClient
from .cache import CacheBackend, create_cache_backend
from .config.models import ServiceConfig
from .domain.models import City, Point, Region
from .errors import (
    CacheBackendError,
    CacheMissError,
    ConfigurationError,
    GeisPointError,
    InvalidArgumentError,
    PointNotFoundError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

POINT_NOT_FOUND_MESSAGE = "GeisPoint details was not found."

_REGIONS = TypeAdapter(List[Region])
_CITIES = TypeAdapter(List[City])
_POINT = TypeAdapter(Point)


def region_cache_key(country_code: str) -> str:
    return f"region|{country_code}"


def city_cache_key(region_id: int) -> str:
    return f"city|{region_id}"


def point_cache_key(gpid: str) -> str:
    return f"point|{gpid}"


class GeisPointService:
    """Typed access to GeisPoint lookups with optional caching.

    Parameters
    ----------
    config: Union[ServiceConfig, Mapping[str, Any], None]
        Service options; a plain mapping is validated with
        :meth:`ServiceConfig.from_options`.
    client: Optional[RemoteLookupClient]
        Remote client; defaults to :class:`GeisPointClient` over SOAP.
    cache: Optional[CacheBackend]
        Cache backend instance. When omitted and caching is enabled, the
        backend named by ``used_cache`` is created from ``cache_options``.

    Raises
    ------
    ConfigurationError
        On invalid options or an unresolvable cache backend.
    """

    def __init__(
        self,
        config: Union[ServiceConfig, Mapping[str, Any], None] = None,
        *,
        client: Optional[RemoteLookupClient] = None,
        cache: Optional[CacheBackend] = None,
    ) -> None:
        if not isinstance(config, ServiceConfig):
            config = ServiceConfig.from_options(config)
        self._config = config
        self._last_error: Optional[str] = None

        self._cache: Optional[CacheBackend] = None
        if config.use_cache:
            if cache is None:
                cache = create_cache_backend(config.used_cache, config.cache_options)
            elif not isinstance(cache, CacheBackend):
                raise ConfigurationError(
                    "Cache instance lacks the exists/get/set capability set"
                )
            self._cache = cache

        self._client: RemoteLookupClient = client or GeisPointClient()
        logger.info(
            "geispoint.service.init",
            extra={
                "default_country": config.default_country,
                "default_region": config.default_region,
                "use_cache": config.use_cache,
                "cache_backend": type(self._cache).__name__ if self._cache else None,
            },
        )

    @property
    def config(self) -> ServiceConfig:
        return self._config

    @property
    def cache(self) -> Optional[CacheBackend]:
        return self._cache

    @property
    def caching_enabled(self) -> bool:
        return self._cache is not None

    def get_last_error(self) -> Optional[str]:
        """Return message of the latest error, or None if none occurred.

        Kept for diagnostics only; errors are always raised to the caller.
        """
        return self._last_error

    def _fail(self, exc: GeisPointError) -> GeisPointError:
        self._last_error = str(exc)
        return exc

    def _cached(
        self,
        key: str,
        adapter: TypeAdapter[T],
        load: Callable[[], T],
    ) -> T:
        """Read-through/write-through around ``load`` for ``key``."""
        cache = self._cache
        if cache is not None and cache.exists(key):
            try:
                value = adapter.validate_python(cache.get(key))
            except CacheMissError:
                # Entry vanished between exists() and get(), e.g. TTL expiry
                logger.debug("geispoint.cache.miss", extra={"key": key})
            except ValidationError as exc:
                raise CacheBackendError(
                    f"Cached value for `{key}` does not match its type"
                ) from exc
            else:
                logger.debug("geispoint.cache.hit", extra={"key": key})
                return value
        elif cache is not None:
            logger.debug("geispoint.cache.miss", extra={"key": key})

        value = load()
        if cache is not None:
            cache.set(key, adapter.dump_python(value, mode="json"))
            logger.debug("geispoint.cache.stored", extra={"key": key})
        return value

    def _country(self, country_code: Optional[str]) -> str:
        # "0" counts as an empty country code
        if not country_code or country_code == "0":
            return self._config.default_country
        return country_code

    def _guarded(self, call: Callable[[], T]) -> T:
        try:
            return call()
        except GeisPointError as exc:
            self._last_error = str(exc)
            raise

    def get_regions(self, country_code: Optional[str] = None) -> List[Region]:
        """Retrieve regions, defaulting to the configured country."""
        country = self._country(country_code)
        return self._guarded(
            lambda: self._cached(
                region_cache_key(country),
                _REGIONS,
                lambda: self._client.fetch_regions(country),
            )
        )

    def get_cities(
        self, country_code: Optional[str] = None, region_id: Optional[int] = None
    ) -> List[City]:
        """Retrieve cities of a region.

        Empty arguments fall back to the configured country and region. The
        cache key is built from the region only.
        """
        country = self._country(country_code)
        region = region_id or self._config.default_region
        return self._guarded(
            lambda: self._cached(
                city_cache_key(region),
                _CITIES,
                lambda: self._client.fetch_cities(country, region),
            )
        )

    def get_point_detail(self, gpid: str) -> Point:
        """Return details of a single point.

        Raises
        ------
        InvalidArgumentError
            If ``gpid`` is not a non-empty string. Nothing is looked up.
        PointNotFoundError
            If the service does not return exactly one matching record.
        """
        if not isinstance(gpid, str) or not gpid:
            raise self._fail(
                InvalidArgumentError("GeisPoint id must be a non-empty string")
            )

        def load() -> Point:
            try:
                return self._client.fetch_point_detail(gpid)
            except PointNotFoundError as exc:
                raise PointNotFoundError(POINT_NOT_FOUND_MESSAGE) from exc

        return self._guarded(lambda: self._cached(point_cache_key(gpid), _POINT, load))

    def search_points(
        self,
        zip: Optional[str] = None,
        city: Optional[str] = None,
        gpid: Optional[str] = None,
    ) -> List[Point]:
        """Search points; if all filters are empty every point is returned.

        Search results are never cached.
        """
        return self._guarded(lambda: self._client.search(zip, city, gpid))

    def close(self) -> None:
        """Release the remote client and a closable cache backend."""
        for resource in (self._client, self._cache):
            close = getattr(resource, "close", None)
            if callable(close):
                close()

    def __enter__(self) -> "GeisPointService":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
