"""
Data contracts for the ingestion pipeline.

Record and report types are plain dataclasses; the exported feature
table is checked with a Pandera schema.
"""

from timeslider.schemas.geojson import (
    FeatureCollection,
    GeoRecord,
    LineString,
    Point,
    Polygon,
    feature_collection,
    is_feature_collection,
)
from timeslider.schemas.report import (
    CollectionStats,
    IssueKind,
    Severity,
    TimeSpan,
    ValidationIssue,
    ValidationReport,
)
from timeslider.schemas.table import FeatureTableSchema

__all__ = [
    "CollectionStats",
    "FeatureCollection",
    "FeatureTableSchema",
    "GeoRecord",
    "IssueKind",
    "LineString",
    "Point",
    "Polygon",
    "Severity",
    "TimeSpan",
    "ValidationIssue",
    "ValidationReport",
    "feature_collection",
    "is_feature_collection",
]
