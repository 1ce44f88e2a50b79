"""Domain records produced by GeisPoint lookups."""

from .models import City, Point, Region

__all__ = ["City", "Point", "Region"]
