"""Pydantic data models for route distance indexing."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class Coordinate(BaseModel):
    """A geographic position in degrees."""

    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float

    @classmethod
    def from_pair(cls, pair: tuple[float, float]) -> Coordinate:
        """Build from a ``(lat, lng)`` pair."""
        lat, lng = pair
        return cls(lat=lat, lng=lng)

    @property
    def lnglat(self) -> tuple[float, float]:
        return self.lng, self.lat


class DistanceMarker(BaseModel):
    """A point placed along a route at a whole multiple of the marker interval."""

    model_config = ConfigDict(frozen=True)

    position: Coordinate
    cumulative_distance: float
    segment_index: int


class DistanceSample(BaseModel):
    """A profile point carrying its map position and distance from the route start."""

    model_config = ConfigDict(frozen=True)

    position: Coordinate
    cumulative_distance: float
    elevation: float | None = None


# Profile geometry. Line coordinates are [lng, lat, elevation, distance].


class LineStringGeometry(BaseModel):
    type: Literal["LineString"] = "LineString"
    coordinates: list[list[float | None]]


class MultiLineStringGeometry(BaseModel):
    type: Literal["MultiLineString"] = "MultiLineString"
    coordinates: list[list[list[float | None]]]


class PointGeometry(BaseModel):
    type: Literal["Point"] = "Point"
    coordinates: list[float | None]


class PolygonGeometry(BaseModel):
    type: Literal["Polygon"] = "Polygon"
    coordinates: list[list[list[float | None]]]


ProfileGeometry = Annotated[
    Union[LineStringGeometry, MultiLineStringGeometry, PointGeometry, PolygonGeometry],
    Field(discriminator="type"),
]


class ProfileFeatureProperties(BaseModel):
    attributeType: int = 0


class ProfileFeature(BaseModel):
    type: Literal["Feature"] = "Feature"
    geometry: ProfileGeometry
    properties: ProfileFeatureProperties = Field(default_factory=ProfileFeatureProperties)


class ProfileSummary(BaseModel):
    summary: str = "steepness"
    inclineTotal: float = 0.0
    declineTotal: float = 0.0


class ProfileCollection(BaseModel):
    """A height profile: one feature per run of equal steepness."""

    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: list[ProfileFeature] = Field(default_factory=list)
    properties: ProfileSummary = Field(default_factory=ProfileSummary)


class GeocodeResult(BaseModel):
    """A forward or reverse geocoding hit normalized across providers.

    Coordinates here are ``(lng, lat)`` pairs, the order geocoders return them in.
    """

    title: str
    description: str
    selected: bool
    address_coordinate: tuple[float, float] | None
    source_coordinate: tuple[float, float] | None
    display_coordinate: tuple[float, float] | None
    key: int
    address_index: int
