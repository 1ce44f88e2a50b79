"""Remote adapter interfaces.

The lookup service depends on these protocols only, so tests (and callers
with their own transport) can substitute any object with the same shape.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Protocol

from ..domain.models import City, Point, Region


class RemoteTransport(Protocol):
    """Protocol for the RPC transport carrying GeisPoint calls."""

    def call(self, operation: str, arguments: Mapping[str, Any]) -> str:
        """Invoke ``operation`` and return its raw string result."""
        raise NotImplementedError


class RemoteLookupClient(Protocol):
    """Protocol for un-cached GeisPoint lookups.

    Implementations perform exactly one remote round trip per call and
    return freshly decoded domain objects.
    """

    def fetch_regions(self, country_code: str) -> List[Region]:
        """List regions of a country."""
        raise NotImplementedError

    def fetch_cities(self, country_code: str, region_id: int) -> List[City]:
        """List cities of a region."""
        raise NotImplementedError

    def fetch_point_detail(self, gpid: str) -> Point:
        """Return the single point identified by ``gpid``."""
        raise NotImplementedError

    def search(
        self,
        zip: Optional[str] = None,
        city: Optional[str] = None,
        gpid: Optional[str] = None,
    ) -> List[Point]:
        """Search points by any combination of the filters."""
        raise NotImplementedError
