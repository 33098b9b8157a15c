"""
Schema inference and conversion to geographic records.

Decides which fields hold coordinates, geometry, and time, then emits one
GeoRecord per usable row or item. A bad row or item is logged and dropped;
conversion never aborts because of a single record.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from timeslider.errors import InvalidTimestampError, NoTimestampFieldError
from timeslider.ingestion.tabular import parse_csv
from timeslider.normalization.columns import (
    COORDINATE_FIELDS,
    DEFAULT_GEOMETRY_KEYWORD,
    GEOMETRY_KEYWORDS,
    JSON_COORDINATE_FIELDS,
    LATITUDE_FIELDS,
    LONGITUDE_FIELDS,
    TIME_FIELDS,
    WAYPOINT_FIELDS,
    detect_time_field,
    extract_number,
    first_time_value,
    has_value,
    property_fields,
)
from timeslider.normalization.spatial import close_ring, latlon_to_lonlat, parse_waypoints
from timeslider.normalization.temporal import normalize_timestamp
from timeslider.schemas.geojson import (
    FeatureCollection,
    Geometry,
    GeoRecord,
    LineString,
    Point,
    Polygon,
    Position,
    feature_collection,
    is_feature_collection,
)
from timeslider.utils.logging import get_logger

log = get_logger(__name__)


def records_from_rows(
    rows: Sequence[Mapping[str, str]],
    time_field: str | None = None,
) -> list[GeoRecord]:
    """
    Convert parsed CSV rows into geographic records.

    The timestamp column is the explicit time_field, or else the first
    of TIME_FIELDS present in the header. A non-empty waypoint column
    (WAYPOINT_FIELDS) yields a LineString from "lat,lon;lat,lon"; otherwise
    latitude/longitude candidates yield a Point.

    Args:
        rows: Rows from parse_csv.
        time_field: Explicit timestamp column name.

    Returns:
        One record per usable row, in source order.

    Raises:
        NoTimestampFieldError: If no timestamp column exists.
    """
    if not rows:
        return []

    header = rows[0]
    if time_field is not None:
        if time_field not in header:
            msg = f"Timestamp field {time_field!r} not found. Columns: {list(header)}"
            raise NoTimestampFieldError(msg)
    else:
        time_field = detect_time_field(header)
        if time_field is None:
            msg = (
                "No timestamp field found. CSV must include one of: "
                f"{', '.join(TIME_FIELDS)}"
            )
            raise NoTimestampFieldError(msg)

    log.debug("Detected timestamp column", field=time_field)

    excluded = (*COORDINATE_FIELDS, time_field)
    records = []
    for index, row in enumerate(rows):
        geometry = _row_geometry(row, index)
        if geometry is None:
            continue

        try:
            timestamp = normalize_timestamp(row.get(time_field, ""))
        except InvalidTimestampError as e:
            log.warning("Skipping row with invalid timestamp", row=index, error=str(e))
            continue

        properties = property_fields(row, excluded, case_insensitive=True)
        records.append(GeoRecord(geometry, timestamp, properties))

    dropped = len(rows) - len(records)
    log.info("Converted CSV rows", records=len(records), dropped=dropped)
    return records


def _row_geometry(row: Mapping[str, str], index: int) -> Geometry | None:
    """Geometry for one CSV row, or None (with a diagnostic) if unusable."""
    waypoint_field = next((f for f in WAYPOINT_FIELDS if has_value(row, f)), None)
    if waypoint_field is not None:
        try:
            return LineString(parse_waypoints(row[waypoint_field]))
        except ValueError as e:
            log.warning(
                "Skipping row with invalid waypoints",
                row=index,
                field=waypoint_field,
                error=str(e),
            )
            return None

    lat = extract_number(row, LATITUDE_FIELDS)
    lon = extract_number(row, LONGITUDE_FIELDS)
    if lat is None or lon is None:
        log.warning("Skipping row without valid coordinates", row=index)
        return None
    return Point(lon=lon, lat=lat)


def records_from_json(
    data: Any,
    time_field: str | None = None,
) -> list[GeoRecord]:
    """
    Convert simple JSON records into geographic records.

    Each item names its geometry kind in "type" (point, line, linestring,
    route, polygon, area; default point). Points read latitude/longitude
    candidates; lines and polygons read a "coordinates" array of
    [lat, lon] pairs. Polygons may give one ring or a list of rings, and
    every ring is closed if needed.

    Args:
        data: A list of records or a single record.
        time_field: Explicit timestamp key; otherwise the first of
            TIME_FIELDS holding a value.

    Returns:
        One record per usable item, in source order.
    """
    items = data if isinstance(data, list) else [data]
    time_candidates = (time_field,) if time_field else TIME_FIELDS
    excluded = (*JSON_COORDINATE_FIELDS, "type", *TIME_FIELDS, *time_candidates)

    records = []
    for index, item in enumerate(items):
        if not isinstance(item, Mapping):
            log.warning("Skipping item that is not an object", item=index)
            continue

        found = first_time_value(item, time_candidates)
        if found is None:
            log.warning("Skipping item without timestamp", item=index)
            continue
        try:
            timestamp = normalize_timestamp(found[1])
        except InvalidTimestampError as e:
            log.warning("Skipping item with invalid timestamp", item=index, error=str(e))
            continue

        geometry = _item_geometry(item, index)
        if geometry is None:
            continue

        properties = property_fields(item, excluded)
        records.append(GeoRecord(geometry, timestamp, properties))

    log.info("Converted JSON records", records=len(records), dropped=len(items) - len(records))
    return records


def _item_geometry(item: Mapping[str, Any], index: int) -> Geometry | None:
    """Geometry for one JSON item, or None (with a diagnostic) if unusable."""
    keyword = str(item.get("type") or DEFAULT_GEOMETRY_KEYWORD).lower()
    kind = GEOMETRY_KEYWORDS.get(keyword)

    if kind is None:
        log.warning("Skipping item with unknown geometry type", item=index, type=keyword)
        return None

    if kind == "Point":
        lat = extract_number(item, LATITUDE_FIELDS)
        lon = extract_number(item, LONGITUDE_FIELDS)
        if lat is None or lon is None:
            log.warning("Skipping point without coordinates", item=index)
            return None
        return Point(lon=lon, lat=lat)

    coordinates = item.get("coordinates")
    if not isinstance(coordinates, list) or not coordinates:
        log.warning(
            "Skipping item without coordinates array", item=index, geometry=kind
        )
        return None

    try:
        if kind == "LineString":
            return LineString(_positions(coordinates))
        return Polygon(tuple(close_ring(_positions(ring)) for ring in _rings(coordinates)))
    except (TypeError, ValueError) as e:
        log.warning(
            "Skipping item with invalid coordinates",
            item=index,
            geometry=kind,
            error=str(e),
        )
        return None


def _positions(coordinates: Sequence[Any]) -> tuple[Position, ...]:
    return tuple(latlon_to_lonlat(coord) for coord in coordinates)


def _rings(coordinates: list[Any]) -> list[list[Any]]:
    """A single ring [[lat, lon], ...] or a list of rings [[[lat, lon], ...], ...]."""
    first = coordinates[0]
    if isinstance(first, list) and first and isinstance(first[0], list):
        return coordinates
    return [coordinates]


def json_to_geojson(data: Any, time_field: str | None = None) -> FeatureCollection:
    """
    Convert parsed JSON to a FeatureCollection.

    An existing FeatureCollection is returned unchanged (same object);
    anything else goes through records_from_json.
    """
    if is_feature_collection(data):
        log.info("Input is already a FeatureCollection")
        return data
    return feature_collection(records_from_json(data, time_field))


def csv_to_geojson(text: str, time_field: str | None = None) -> FeatureCollection:
    """
    Convert CSV text to a FeatureCollection.

    Raises:
        EmptyInputError: If the text has no data rows.
        NoTimestampFieldError: If no timestamp column exists.
    """
    return feature_collection(records_from_rows(parse_csv(text), time_field))
