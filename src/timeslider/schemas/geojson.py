"""
Geographic record types and their GeoJSON rendering.

Coordinates are always stored in canonical (longitude, latitude) order.
"""

from dataclasses import dataclass, field
from typing import Any, Union

Position = tuple[float, ...]
FeatureCollection = dict[str, Any]


@dataclass(frozen=True)
class Point:
    """A single position."""

    lon: float
    lat: float

    type = "Point"

    @property
    def coordinates(self) -> list[float]:
        return [self.lon, self.lat]


@dataclass(frozen=True)
class LineString:
    """An ordered path of positions (at least 2 expected)."""

    positions: tuple[Position, ...]

    type = "LineString"

    @property
    def coordinates(self) -> list[list[float]]:
        return [list(p) for p in self.positions]


@dataclass(frozen=True)
class Polygon:
    """Linear rings, each closed (first == last) with at least 4 positions."""

    rings: tuple[tuple[Position, ...], ...]

    type = "Polygon"

    @property
    def coordinates(self) -> list[list[list[float]]]:
        return [[list(p) for p in ring] for ring in self.rings]


Geometry = Union[Point, LineString, Polygon]


@dataclass(frozen=True)
class GeoRecord:
    """
    One converted input row or item.

    Attributes:
        geometry: Point, LineString, or Polygon in (lon, lat) order.
        timestamp: Epoch milliseconds, or None when not derivable.
        properties: Remaining source fields (coordinate and time fields
            already removed).
    """

    geometry: Geometry
    timestamp: int | None
    properties: dict[str, Any] = field(default_factory=dict)

    def to_feature(self) -> dict[str, Any]:
        """Render as a GeoJSON Feature; timestamp leads the properties."""
        properties: dict[str, Any] = {}
        if self.timestamp is not None:
            properties["timestamp"] = self.timestamp
        for key, value in self.properties.items():
            if key != "timestamp":
                properties[key] = value
        return {
            "type": "Feature",
            "geometry": {
                "type": self.geometry.type,
                "coordinates": self.geometry.coordinates,
            },
            "properties": properties,
        }


def feature_collection(records: list[GeoRecord]) -> FeatureCollection:
    """Wrap records into a GeoJSON FeatureCollection."""
    return {
        "type": "FeatureCollection",
        "features": [record.to_feature() for record in records],
    }


def is_feature_collection(data: Any) -> bool:
    """
    True for a mapping that declares itself a FeatureCollection with features.

    The features value is not inspected here; a malformed one is left for
    the validator to report.
    """
    return (
        isinstance(data, dict)
        and data.get("type") == "FeatureCollection"
        and data.get("features") is not None
    )
