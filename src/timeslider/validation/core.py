"""
Geometry and metadata validation for FeatureCollections.

Validation never stops at the first problem: structural problems become
errors, recoverable concerns become warnings, and statistics are computed
over whatever is readable. The input collection is never modified.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from timeslider.normalization.spatial import (
    MIN_LINE_POINTS,
    MIN_RING_POINTS,
    check_position,
    same_position,
)
from timeslider.normalization.temporal import coerce_epoch_ms
from timeslider.schemas.report import (
    CollectionStats,
    IssueKind,
    Severity,
    ValidationIssue,
    ValidationReport,
)
from timeslider.utils.logging import get_logger

log = get_logger(__name__)

SUPPORTED_GEOMETRIES = ("Point", "LineString", "Polygon")


def _is_position(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and len(value) >= 2


@dataclass
class _Collector:
    """Mutable accumulator; frozen into a ValidationReport at the end."""

    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)

    def error(
        self,
        kind: IssueKind,
        message: str,
        feature_index: int | None = None,
        field: str | None = None,
    ) -> None:
        self.errors.append(
            ValidationIssue(
                kind, Severity.ERROR, _locate(message, feature_index), feature_index, field
            )
        )

    def warning(
        self,
        kind: IssueKind,
        message: str,
        feature_index: int | None = None,
        field: str | None = None,
    ) -> None:
        self.warnings.append(
            ValidationIssue(
                kind, Severity.WARNING, _locate(message, feature_index), feature_index, field
            )
        )

    def report(self, stats: CollectionStats) -> ValidationReport:
        return ValidationReport(tuple(self.errors), tuple(self.warnings), stats)


def _locate(message: str, feature_index: int | None) -> str:
    if feature_index is None:
        return message
    return f"Feature {feature_index}: {message}"


def _check_positions(
    out: _Collector,
    positions: list[Any],
    index: int,
    where: str,
) -> None:
    """Check every position of a line or ring; where is e.g. 'ring 0, '."""
    for i, coord in enumerate(positions):
        if not _is_position(coord):
            out.error(
                IssueKind.INVALID_COORDINATE,
                f"Invalid coordinate at {where}position {i}",
                index,
                "geometry.coordinates",
            )
            continue
        errors, warnings = check_position(coord[0], coord[1])
        for kind, message in errors:
            out.error(kind, f"{where}point {i}: {message}", index, "geometry.coordinates")
        for kind, message in warnings:
            out.warning(kind, f"{where}point {i}: {message}", index, "geometry.coordinates")


def _check_geometry(out: _Collector, geometry: Any, index: int) -> str | None:
    """
    Validate one geometry.

    Returns:
        The geometry type when it could be read, else None.
    """
    if not isinstance(geometry, Mapping):
        out.error(IssueKind.MISSING_GEOMETRY, "Missing or invalid geometry", index, "geometry")
        return None

    geometry_type = geometry.get("type")
    if not geometry_type or not isinstance(geometry_type, str):
        out.error(
            IssueKind.MISSING_GEOMETRY, "Geometry missing 'type' field", index, "geometry.type"
        )
        return None

    coordinates = geometry.get("coordinates")
    if coordinates is None:
        out.error(
            IssueKind.MISSING_GEOMETRY,
            "Geometry missing 'coordinates' field",
            index,
            "geometry.coordinates",
        )
        return geometry_type

    if geometry_type == "Point":
        if not _is_position(coordinates):
            out.error(
                IssueKind.TOO_FEW_POINTS,
                "Point coordinates must be [lon, lat]",
                index,
                "geometry.coordinates",
            )
        else:
            errors, warnings = check_position(coordinates[0], coordinates[1])
            for kind, message in errors:
                out.error(kind, message, index, "geometry.coordinates")
            for kind, message in warnings:
                out.warning(kind, message, index, "geometry.coordinates")

    elif geometry_type == "LineString":
        if not isinstance(coordinates, (list, tuple)) or len(coordinates) < MIN_LINE_POINTS:
            out.error(
                IssueKind.TOO_FEW_POINTS,
                "LineString must have at least 2 points",
                index,
                "geometry.coordinates",
            )
        else:
            _check_positions(out, list(coordinates), index, "")

    elif geometry_type == "Polygon":
        if not isinstance(coordinates, (list, tuple)) or len(coordinates) < 1:
            out.error(
                IssueKind.TOO_FEW_POINTS,
                "Polygon must have at least one ring",
                index,
                "geometry.coordinates",
            )
        else:
            for ring_index, ring in enumerate(coordinates):
                _check_ring(out, ring, ring_index, index)

    else:
        out.warning(
            IssueKind.UNSUPPORTED_GEOMETRY,
            f"Geometry type '{geometry_type}' is not fully supported. "
            f"Supported types: {', '.join(SUPPORTED_GEOMETRIES)}",
            index,
            "geometry.type",
        )

    return geometry_type


def _check_ring(out: _Collector, ring: Any, ring_index: int, index: int) -> None:
    if not isinstance(ring, (list, tuple)) or len(ring) < MIN_RING_POINTS:
        out.error(
            IssueKind.TOO_FEW_POINTS,
            f"Polygon ring {ring_index} must have at least 4 points",
            index,
            "geometry.coordinates",
        )
        return

    first, last = ring[0], ring[-1]
    if _is_position(first) and _is_position(last) and not same_position(first, last):
        out.error(
            IssueKind.RING_NOT_CLOSED,
            f"Polygon ring {ring_index} is not closed (first and last points must match)",
            index,
            "geometry.coordinates",
        )

    _check_positions(out, list(ring), index, f"ring {ring_index}, ")


def validate_collection(collection: Any) -> ValidationReport:
    """
    Validate a FeatureCollection.

    Rules:
        - The top level must be a FeatureCollection with a features list;
          otherwise a single error is returned with empty stats.
        - An empty collection is valid, with a warning.
        - Coordinates must be numeric, longitude in [-180, 180], latitude
          in [-90, 90]; |lon| <= 90 with |lat| > 90 adds a swapped-axes
          warning.
        - Points need 2 ordinates, LineStrings 2 points, Polygon rings
          4 points and first == last. Other geometry types are warnings.
        - Missing properties is a warning. A missing or unparseable
          timestamp is a per-feature warning; if no feature has one, a
          single collection-level error is added.
        - A zero time span is a warning.

    Args:
        collection: Parsed GeoJSON-like data.

    Returns:
        A complete ValidationReport; valid is True iff there are no errors.
    """
    out = _Collector()

    if not isinstance(collection, Mapping):
        out.error(IssueKind.NOT_A_COLLECTION, "Data is not a valid object")
        return out.report(CollectionStats())

    if collection.get("type") != "FeatureCollection":
        out.error(
            IssueKind.NOT_A_COLLECTION,
            f"Expected type 'FeatureCollection', got '{collection.get('type')}'",
        )
        return out.report(CollectionStats())

    features = collection.get("features")
    if not isinstance(features, list):
        out.error(
            IssueKind.NOT_A_COLLECTION, 'FeatureCollection must have a "features" array'
        )
        return out.report(CollectionStats())

    if not features:
        out.warning(IssueKind.EMPTY_COLLECTION, "FeatureCollection is empty (no features)")
        return out.report(CollectionStats())

    counts = {"Point": 0, "LineString": 0, "Polygon": 0, "other": 0}
    timestamps: list[int] = []
    missing = 0

    for index, feature in enumerate(features):
        if not isinstance(feature, Mapping):
            out.error(IssueKind.INVALID_FEATURE, "Not a valid object", index)
            continue

        if feature.get("type") != "Feature":
            out.error(
                IssueKind.INVALID_FEATURE,
                f"Expected type 'Feature', got '{feature.get('type')}'",
                index,
                "type",
            )

        geometry_type = _check_geometry(out, feature.get("geometry"), index)
        if geometry_type is not None:
            key = geometry_type if geometry_type in counts else "other"
            counts[key] += 1

        properties = feature.get("properties")
        if not isinstance(properties, Mapping):
            out.warning(
                IssueKind.MISSING_PROPERTIES, "Missing 'properties' object", index, "properties"
            )
            properties = {}

        raw = properties.get("timestamp")
        timestamp = coerce_epoch_ms(raw)
        if timestamp is None:
            missing += 1
            reason = "Missing" if raw is None else f"Invalid ({raw!r})"
            out.warning(
                IssueKind.MISSING_TIMESTAMP,
                f"{reason} 'timestamp' property. Feature will not be displayed on timeline.",
                index,
                "properties.timestamp",
            )
        else:
            timestamps.append(timestamp)

    if missing and not timestamps:
        out.error(
            IssueKind.NO_TIMESTAMPS,
            'No features have valid timestamps. Add a "timestamp" property to each feature.',
        )

    stats = CollectionStats(
        feature_count=len(features),
        point_count=counts["Point"],
        line_count=counts["LineString"],
        polygon_count=counts["Polygon"],
        other_count=counts["other"],
        min_timestamp=min(timestamps) if timestamps else None,
        max_timestamp=max(timestamps) if timestamps else None,
        missing_timestamps=missing,
    )

    span = stats.time_span
    if span is not None and span.milliseconds == 0:
        out.warning(
            IssueKind.ZERO_TIME_SPAN,
            "All features have the same timestamp. Timeline will not be very useful.",
        )

    report = out.report(stats)
    log.info(
        "Validated collection",
        features=stats.feature_count,
        errors=len(report.errors),
        warnings=len(report.warnings),
    )
    return report
