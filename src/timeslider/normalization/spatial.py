"""
Coordinate order and geometry shape helpers.

Simple inputs list positions as (latitude, longitude); GeoJSON requires
(longitude, latitude). Everything here produces the canonical order.
"""

import math
from collections.abc import Sequence
from typing import Any

from timeslider.schemas.geojson import Position
from timeslider.schemas.report import IssueKind

LONGITUDE_RANGE = (-180.0, 180.0)
LATITUDE_RANGE = (-90.0, 90.0)
MIN_LINE_POINTS = 2
MIN_RING_POINTS = 4

SWAPPED_AXES_WARNING = (
    "Coordinates may be in wrong order. GeoJSON uses [longitude, latitude]"
)


def is_coordinate_number(value: Any) -> bool:
    """True for a finite int or float (bools excluded)."""
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def latlon_to_lonlat(position: Sequence[Any]) -> Position:
    """
    Reorder one (lat, lon[, ...]) position to (lon, lat[, ...]).

    Extra ordinates such as altitude keep their place after the pair.

    Raises:
        ValueError: If the position is not a sequence of >= 2 numbers.
    """
    if isinstance(position, (str, bytes)) or not isinstance(position, Sequence):
        msg = f"Position must be a [lat, lon] array, got {position!r}"
        raise ValueError(msg)
    if len(position) < 2:
        msg = f"Position needs at least 2 values, got {list(position)!r}"
        raise ValueError(msg)

    values = []
    for value in position:
        if isinstance(value, bool):
            msg = f"Invalid coordinate value: {value!r}"
            raise ValueError(msg)
        number = float(value)
        if not math.isfinite(number):
            msg = f"Invalid coordinate value: {value!r}"
            raise ValueError(msg)
        values.append(number)

    lat, lon, *rest = values
    return (lon, lat, *rest)


def parse_waypoints(text: str) -> tuple[Position, ...]:
    """
    Parse a "lat,lon;lat,lon;..." waypoint string.

    Args:
        text: Semicolon-separated waypoints, each "lat,lon".

    Returns:
        Positions in (lon, lat) order.

    Raises:
        ValueError: If any waypoint is not two numbers.
    """
    positions = []
    for raw_point in text.split(";"):
        if not raw_point.strip():
            continue
        parts = [part.strip() for part in raw_point.split(",")]
        if len(parts) != 2:
            msg = f"Waypoint must be 'lat,lon', got {raw_point.strip()!r}"
            raise ValueError(msg)
        positions.append(latlon_to_lonlat(parts))
    if not positions:
        msg = "Waypoint string holds no points"
        raise ValueError(msg)
    return tuple(positions)


def same_position(a: Sequence[Any], b: Sequence[Any]) -> bool:
    """Coordinate equality on the (lon, lat) pair."""
    return a[0] == b[0] and a[1] == b[1]


def close_ring(ring: Sequence[Position]) -> tuple[Position, ...]:
    """
    Append the first position if the ring is open.

    Idempotent: an already-closed ring is returned unchanged.
    """
    ring = tuple(ring)
    if ring and not same_position(ring[0], ring[-1]):
        ring = (*ring, ring[0])
    return ring


def check_position(
    lon: Any, lat: Any
) -> tuple[list[tuple[IssueKind, str]], list[tuple[IssueKind, str]]]:
    """
    Range-check one (lon, lat) pair.

    Args:
        lon: Longitude candidate.
        lat: Latitude candidate.

    Returns:
        (errors, warnings), each a list of (kind, message).
    """
    errors: list[tuple[IssueKind, str]] = []
    warnings: list[tuple[IssueKind, str]] = []

    lon_ok = is_coordinate_number(lon)
    lat_ok = is_coordinate_number(lat)

    if not lon_ok:
        errors.append((IssueKind.INVALID_COORDINATE, f"Invalid longitude: {lon!r}"))
    elif not LONGITUDE_RANGE[0] <= lon <= LONGITUDE_RANGE[1]:
        errors.append(
            (IssueKind.LONGITUDE_OUT_OF_RANGE, f"Longitude {lon} out of range (-180 to 180)")
        )

    if not lat_ok:
        errors.append((IssueKind.INVALID_COORDINATE, f"Invalid latitude: {lat!r}"))
    elif not LATITUDE_RANGE[0] <= lat <= LATITUDE_RANGE[1]:
        errors.append(
            (IssueKind.LATITUDE_OUT_OF_RANGE, f"Latitude {lat} out of range (-90 to 90)")
        )

    # Heuristic only; high-latitude data can legitimately trip it
    if lon_ok and lat_ok and abs(lon) <= 90 and abs(lat) > 90:
        warnings.append((IssueKind.SWAPPED_AXES, SWAPPED_AXES_WARNING))

    return errors, warnings
