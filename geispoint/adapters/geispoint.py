"""GeisPoint remote lookup client.

Translates lookup operations into the service's RPC calls (``getRegions``,
``getCities``, ``getGPDetail``, ``searchGP``) and decodes the JSON documents
they return into domain objects. Results are never cached here; see
:mod:`geispoint.service` for the cache-aside layer.

Notes
-----
- The remote payload is a JSON array of heterogeneous entries, or an object
  whose values are the entries. Only entries that are JSON objects become
  domain objects; scalars and nulls are skipped.
- Object entries that fail model validation are skipped with a warning so a
  single bad record does not hide the rest of the list.
"""

from __future__ import annotations

import json
import logging
from typing import Any, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..domain.models import City, Point, Region
from ..errors import PointNotFoundError, RemoteServiceError
from . import RemoteTransport
from .soap import SoapTransport

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def decode_payload(raw: str, operation: str) -> Any:
    """Decode the JSON document returned by ``operation``.

    A blank document decodes to ``None``.

    Raises
    ------
    RemoteServiceError
        If ``raw`` is not valid JSON.
    """
    if not raw or not raw.strip():
        return None
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise RemoteServiceError(f"{operation} returned invalid JSON: {exc}") from exc


def decode_items(data: Any, model: Type[M], operation: str = "") -> List[M]:
    """Convert the object entries of a decoded payload into ``model`` items.

    Parameters
    ----------
    data: Any
        Decoded payload. A list is read as is, a dict through its values;
        anything else yields an empty result.
    model: Type[M]
        Domain model to validate each object entry with.
    operation: str
        Remote operation name, used for log context only.
    """
    if isinstance(data, dict):
        data = list(data.values())
    elif not isinstance(data, list):
        return []
    items: List[M] = []
    for entry in data:
        if not isinstance(entry, dict):
            continue
        try:
            items.append(model.model_validate(entry))
        except ValidationError as exc:
            logger.warning(
                "geispoint.decode.skipped",
                extra={
                    "operation": operation,
                    "model": model.__name__,
                    "errors": exc.error_count(),
                },
            )
    return items


class GeisPointClient:
    """Un-cached client of the GeisPoint web service.

    Parameters
    ----------
    transport: Optional[RemoteTransport]
        RPC transport; defaults to a :class:`SoapTransport` against the
        public endpoint.
    """

    def __init__(self, transport: Optional[RemoteTransport] = None) -> None:
        self._transport: RemoteTransport = transport or SoapTransport()

    @property
    def transport(self) -> RemoteTransport:
        return self._transport

    def _call(self, operation: str, **arguments: Any) -> Any:
        raw = self._transport.call(operation, arguments)
        return decode_payload(raw, operation)

    def fetch_regions(self, country_code: str) -> List[Region]:
        """Retrieve regions of ``country_code``.

        The country code is passed through as is; the service is
        authoritative for what it accepts.
        """
        data = self._call("getRegions", country_code=country_code)
        return decode_items(data, Region, "getRegions")

    def fetch_cities(self, country_code: str, region_id: int) -> List[City]:
        """Retrieve cities of region ``region_id``."""
        data = self._call("getCities", country_code=country_code, id_region=region_id)
        return decode_items(data, City, "getCities")

    def fetch_point_detail(self, gpid: str) -> Point:
        """Return details of a single point.

        Raises
        ------
        PointNotFoundError
            Unless the service returns exactly one point record. More than
            one record is an error, not a reason to pick the first.
        """
        data = self._call("getGPDetail", id_gp=str(gpid))
        if not isinstance(data, list) or len(data) != 1:
            count = len(data) if isinstance(data, list) else 0
            logger.info(
                "geispoint.point.not_found", extra={"gpid": gpid, "records": count}
            )
            raise PointNotFoundError(f"GeisPoint `{gpid}` returned {count} records")
        points = decode_items(data, Point, "getGPDetail")
        if not points:
            raise PointNotFoundError(f"GeisPoint `{gpid}` record is not a valid point")
        return points[0]

    def search(
        self,
        zip: Optional[str] = None,
        city: Optional[str] = None,
        gpid: Optional[str] = None,
    ) -> List[Point]:
        """Search points; all filters empty returns every point."""
        data = self._call(
            "searchGP",
            zip="" if zip is None else str(zip),
            city="" if city is None else str(city),
            id_gp="" if gpid is None else str(gpid),
        )
        return decode_items(data, Point, "searchGP")

    def close(self) -> None:
        close = getattr(self._transport, "close", None)
        if callable(close):
            close()
