"""
Field-name candidates for schema inference.

User exports name their columns freely. Each semantic role has an ordered
list of accepted names; the first present (and usable) name wins. These
lists are part of the input format contract.
"""

import math
from collections.abc import Iterable, Mapping
from typing import Any

# Ordered by priority
TIME_FIELDS: tuple[str, ...] = ("timestamp", "date", "time", "year", "datetime")
LATITUDE_FIELDS: tuple[str, ...] = ("latitude", "lat", "y")
LONGITUDE_FIELDS: tuple[str, ...] = ("longitude", "lon", "lng", "long", "x")
WAYPOINT_FIELDS: tuple[str, ...] = ("waypoints", "coordinates", "path")

# Geometry kind keywords for simple JSON records (matched lower-cased)
GEOMETRY_KEYWORDS: dict[str, str] = {
    "point": "Point",
    "line": "LineString",
    "linestring": "LineString",
    "route": "LineString",
    "polygon": "Polygon",
    "area": "Polygon",
}
DEFAULT_GEOMETRY_KEYWORD = "point"

COORDINATE_FIELDS: frozenset[str] = frozenset(
    (*LATITUDE_FIELDS, *LONGITUDE_FIELDS, *WAYPOINT_FIELDS)
)

# Simple JSON records carry line and polygon positions only in "coordinates"
JSON_COORDINATE_FIELDS: frozenset[str] = frozenset(
    (*LATITUDE_FIELDS, *LONGITUDE_FIELDS, "coordinates")
)


def has_value(record: Mapping[str, Any], field: str) -> bool:
    """True if the field exists and holds something other than None or ''."""
    value = record.get(field)
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def detect_time_field(
    record: Mapping[str, Any],
    candidates: Iterable[str] = TIME_FIELDS,
) -> str | None:
    """
    Find the timestamp column of a tabular header.

    Args:
        record: First row (header keys are what matters).
        candidates: Ordered candidate names.

    Returns:
        First candidate present in the row, or None.
    """
    for field in candidates:
        if field in record:
            return field
    return None


def first_time_value(
    record: Mapping[str, Any],
    candidates: Iterable[str] = TIME_FIELDS,
) -> tuple[str, Any] | None:
    """
    Find the first candidate timestamp field that holds a value.

    Used for JSON records where every item may name its time differently.

    Returns:
        (field, value) or None.
    """
    for field in candidates:
        if has_value(record, field):
            return field, record[field]
    return None


def extract_number(
    record: Mapping[str, Any],
    candidates: Iterable[str],
) -> float | None:
    """
    Read the first candidate field holding a parseable finite number.

    Args:
        record: Row or JSON record.
        candidates: Ordered field names for one semantic role.

    Returns:
        Parsed value, or None when no candidate parses.
    """
    for field in candidates:
        if not has_value(record, field):
            continue
        value = record[field]
        if isinstance(value, bool):
            continue
        try:
            number = float(value)
        except (TypeError, ValueError):
            continue
        if math.isfinite(number):
            return number
    return None


def property_fields(
    record: Mapping[str, Any],
    excluded: Iterable[str],
    *,
    case_insensitive: bool = False,
) -> dict[str, Any]:
    """
    Copy the fields that are not consumed as coordinates or time.

    Args:
        record: Source row or JSON record.
        excluded: Field names consumed elsewhere.
        case_insensitive: Compare lower-cased keys against excluded.

    Returns:
        Remaining fields in source order.
    """
    excluded_set = {f.lower() for f in excluded} if case_insensitive else set(excluded)
    kept = {}
    for key, value in record.items():
        probe = key.lower() if case_insensitive else key
        if probe not in excluded_set:
            kept[key] = value
    return kept
