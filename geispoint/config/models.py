"""Config models and loader.

This module defines Pydantic models for the lookup service options and for
environment-based settings. Service options accept both the Python field
names and the camelCase names used by the GeisPoint service documentation
(``defaultCountry``, ``useCache``, ...).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..errors import ConfigurationError

DEFAULT_COUNTRY = "CZ"
# Praha
DEFAULT_REGION = 19

DEFAULT_ENDPOINT = "http://plugin.geispoint.cz/wsdl/wsdl.php"
DEFAULT_NAMESPACE = "urn:GeisPoint"


class ServiceConfig(BaseModel):
    """Options of a :class:`~geispoint.service.GeisPointService` instance.

    Attributes
    ----------
    default_country: str
        Country code used when a call passes none. Defaults to ``"CZ"``.
    default_region: int
        Region id used when a call passes none. Defaults to ``19`` (Praha).
    use_cache: bool
        Enable the cache-aside layer for regions, cities and point details.
    used_cache: Optional[str]
        Registry name of the cache backend (``"memory"``, ``"file"``,
        ``"table"`` or a custom registered name).
    cache_options: Dict[str, Any]
        Backend specific options, e.g. ``{"path": ...}`` for the file backend
        or ``{"dsn", "user", "password", "table"}`` for the table backend.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    default_country: str = Field(
        DEFAULT_COUNTRY,
        min_length=1,
        validation_alias=AliasChoices("defaultCountry", "default_country"),
    )
    default_region: int = Field(
        DEFAULT_REGION,
        ge=1,
        validation_alias=AliasChoices("defaultRegion", "default_region"),
    )
    use_cache: bool = Field(
        False, validation_alias=AliasChoices("useCache", "use_cache")
    )
    used_cache: Optional[str] = Field(
        None, validation_alias=AliasChoices("usedCache", "used_cache")
    )
    cache_options: Dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("cacheOptions", "cache_options"),
    )

    @classmethod
    def from_options(cls, options: Optional[Mapping[str, Any]] = None) -> "ServiceConfig":
        """Build a config from a plain options mapping.

        Raises
        ------
        ConfigurationError
            If ``options`` is not a mapping or any value fails validation,
            e.g. ``cacheOptions`` that is not a mapping.
        """
        if options is None:
            options = {}
        if not isinstance(options, Mapping):
            raise ConfigurationError("Service options must be a mapping")
        try:
            return cls.model_validate(dict(options))
        except ValidationError as exc:
            fields = ", ".join(
                ".".join(str(part) for part in err["loc"]) for err in exc.errors()
            )
            raise ConfigurationError(
                f"Invalid value for options key(s) `{fields}`"
            ) from exc

    @staticmethod
    def load(path: Path) -> "ServiceConfig":
        """Load service options from a JSON file."""
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise ConfigurationError(f"Cannot read config file {path}: {exc}") from exc
        return ServiceConfig.from_options(data)


class EnvSettings(BaseSettings):
    """Environment-driven settings and .env support.

    Attributes
    ----------
    log_level: str
        Logging level name (e.g., "DEBUG", "INFO"). Defaults to "INFO".
    endpoint: str
        SOAP endpoint of the GeisPoint web service.
    namespace: str
        XML namespace of the RPC operation elements.
    timeout_seconds: float
        HTTP timeout for a single remote call.
    """

    model_config = SettingsConfigDict(env_file=".env", env_prefix="GEISPOINT_")

    log_level: str = Field("INFO")
    endpoint: str = Field(DEFAULT_ENDPOINT)
    namespace: str = Field(DEFAULT_NAMESPACE)
    timeout_seconds: float = Field(30.0, gt=0)
