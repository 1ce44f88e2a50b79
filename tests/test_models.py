"""Tests for decoding GeisPoint domain records from raw payload fields."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from geispoint.domain.models import City, Point, Region


def test_region_from_remote_fields():
    """Remote `id_region` maps onto `id`."""
    region = Region.model_validate({"id_region": "19", "name": "Praha"})
    assert region.id == 19
    assert region.name == "Praha"


def test_city_from_remote_fields():
    """Remote `city`/`id_region` map onto `name`/`region_id`."""
    city = City.model_validate({"city": "Brno", "id_region": 11})
    assert city == City(name="Brno", region_id=11)


def test_point_from_remote_fields():
    """Point fields are mapped and unknown fields ignored."""
    point = Point.model_validate(
        {
            "id_gp": "CZ-0001",
            "name": "Trafika",
            "street": "Vodickova 1",
            "city": "Praha",
            "zipcode": 11000,
            "country": "CZ",
            "openiningHours": "Po-Pa 8-18",
            "gpsn": 50.08,
            "gpse": 14.42,
            "map": "http://maps.example/cz-0001",
            "photo": "http://img.example/cz-0001.jpg",
            "unexpected": "ignored",
        }
    )
    assert point.gpid == "CZ-0001"
    assert point.zipcode == "11000"
    assert point.opening_hours == "Po-Pa 8-18"
    assert point.gps_north == "50.08"
    assert point.map_url == "http://maps.example/cz-0001"
    assert point.photo_url == "http://img.example/cz-0001.jpg"
    assert point.email is None


def test_point_requires_non_empty_gpid():
    """A point without an identifier is rejected."""
    with pytest.raises(ValidationError):
        Point.model_validate({"id_gp": "", "name": "x"})
    with pytest.raises(ValidationError):
        Point.model_validate({"name": "x"})


def test_models_are_frozen():
    """Domain records cannot be mutated after construction."""
    region = Region(id=1, name="Praha")
    with pytest.raises(ValidationError):
        region.name = "Brno"  # type: ignore[misc]


def test_dump_and_validate_by_field_name():
    """Cached renderings use field names and validate back to equal records."""
    point = Point.model_validate({"id_gp": "CZ-1", "openiningHours": "nonstop"})
    dumped = point.model_dump(mode="json")
    assert dumped["gpid"] == "CZ-1"
    assert dumped["opening_hours"] == "nonstop"
    assert Point.model_validate(dumped) == point
