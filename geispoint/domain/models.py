"""Domain data model for GeisPoint lookups.

These Pydantic models represent the records returned by the GeisPoint web
service. Raw field names of the remote payload are mapped through validation
aliases, while serialization uses the Python field names. Cached renderings
therefore round-trip through ``model_dump`` / ``model_validate``.

All models are frozen: they are created once from a remote payload (or from
a cache entry) and never mutated afterwards.
"""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

_MODEL_CONFIG = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class Region(BaseModel):
    """Administrative region.

    Attributes
    ----------
    id: int
        Region identifier (remote field ``id_region``).
    name: str
        Human readable region name.
    """

    model_config = _MODEL_CONFIG

    id: int = Field(validation_alias=AliasChoices("id_region", "id"))
    name: str


class City(BaseModel):
    """City within a region.

    The remote service does not assign cities an identifier of their own;
    a city is identified by its name within ``region_id``.
    """

    model_config = _MODEL_CONFIG

    name: str = Field(validation_alias=AliasChoices("city", "name"))
    region_id: int = Field(validation_alias=AliasChoices("id_region", "region_id"))


class Point(BaseModel):
    """Pickup point (GeisPoint) details.

    Attributes
    ----------
    gpid: str
        Unique point code (remote field ``id_gp``), never empty.
    name, street, city, zipcode, country: Optional[str]
        Postal address of the point.
    email, phone: Optional[str]
        Contact details.
    opening_hours, holiday: Optional[str]
        Free-form opening hours and holiday notice.
    map_url, photo_url: Optional[str]
        Links to a map and a photo of the point.
    gps_north, gps_east: Optional[str]
        GPS coordinates as sent by the service.
    note: Optional[str]
        Additional remarks.
    """

    model_config = _MODEL_CONFIG

    gpid: str = Field(validation_alias=AliasChoices("id_gp", "gpid"))
    name: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    zipcode: Optional[str] = Field(
        None, validation_alias=AliasChoices("zipcode", "zip")
    )
    country: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    # "openiningHours" is the service's own spelling
    opening_hours: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("openiningHours", "openingHours", "opening_hours"),
    )
    holiday: Optional[str] = None
    map_url: Optional[str] = Field(None, validation_alias=AliasChoices("map", "map_url"))
    gps_north: Optional[str] = Field(
        None, validation_alias=AliasChoices("gpsn", "gps_north")
    )
    gps_east: Optional[str] = Field(
        None, validation_alias=AliasChoices("gpse", "gps_east")
    )
    photo_url: Optional[str] = Field(
        None, validation_alias=AliasChoices("photo", "photo_url")
    )
    note: Optional[str] = None

    @field_validator(
        "gpid", "zipcode", "phone", "gps_north", "gps_east", mode="before"
    )
    @classmethod
    def _numbers_as_text(cls, value: object) -> object:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("gpid")
    @classmethod
    def _gpid_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("gpid must be a non-empty string")
        return value
