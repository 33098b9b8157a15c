"""Tests for validation module."""

import copy
from typing import Any

import pytest
from rich.console import Console

from timeslider.schemas.report import IssueKind, Severity
from timeslider.validation import (
    ConsoleReporter,
    failure_message,
    summarize,
    validate_collection,
)


def make_feature(
    geometry: dict[str, Any] | None,
    timestamp: Any = 0,
    **properties: Any,
) -> dict[str, Any]:
    """Build a GeoJSON Feature; pass timestamp=None to omit it."""
    props = dict(properties)
    if timestamp is not None:
        props["timestamp"] = timestamp
    return {"type": "Feature", "geometry": geometry, "properties": props}


def point(lon: Any, lat: Any) -> dict[str, Any]:
    """Point geometry."""
    return {"type": "Point", "coordinates": [lon, lat]}


def collection(*features: Any) -> dict[str, Any]:
    """Wrap features in a FeatureCollection."""
    return {"type": "FeatureCollection", "features": list(features)}


class TestCollectionShape:
    """Tests for top-level structure checks."""

    @pytest.mark.parametrize("data", [None, [], "text", 42])
    def test_not_an_object(self, data: Any) -> None:
        """Test that non-objects give a single error."""
        report = validate_collection(data)
        assert not report.valid
        assert report.error_messages == ["Data is not a valid object"]
        assert report.stats.feature_count == 0

    def test_wrong_type(self) -> None:
        """Test that other GeoJSON types are rejected."""
        report = validate_collection({"type": "Feature"})
        assert report.error_messages == ["Expected type 'FeatureCollection', got 'Feature'"]

    def test_features_not_a_list(self) -> None:
        """Test that features must be an array."""
        report = validate_collection({"type": "FeatureCollection", "features": {}})
        assert report.issues_of(IssueKind.NOT_A_COLLECTION)
        assert not report.valid

    def test_empty_collection_is_valid(self) -> None:
        """Test that zero features is a warning, not an error."""
        report = validate_collection(collection())
        assert report.valid
        assert report.warning_messages == ["FeatureCollection is empty (no features)"]


class TestValidCollection:
    """Tests on a well-formed collection."""

    def test_valid_with_stats(self, valid_collection: dict[str, Any]) -> None:
        """Test counts and time range."""
        report = validate_collection(valid_collection)
        stats = report.stats

        assert report.valid
        assert report.errors == ()
        assert stats.feature_count == 3
        assert (stats.point_count, stats.line_count, stats.polygon_count) == (1, 1, 1)
        assert stats.min_timestamp == -2208988800000
        assert stats.max_timestamp == 631152000000
        assert stats.missing_timestamps == 0
        assert stats.time_span is not None
        assert stats.time_span.years == pytest.approx(90.0, abs=0.01)

    def test_idempotent_and_non_mutating(self, valid_collection: dict[str, Any]) -> None:
        """Test that validating twice gives equal reports and leaves input alone."""
        before = copy.deepcopy(valid_collection)
        first = validate_collection(valid_collection)
        second = validate_collection(valid_collection)

        assert first == second
        assert valid_collection == before

    def test_string_timestamps_accepted(self) -> None:
        """Test that date strings count as timestamps."""
        report = validate_collection(collection(make_feature(point(1, 1), "1990-01-01")))
        assert report.valid
        assert report.stats.min_timestamp == 631152000000


class TestCoordinates:
    """Tests for coordinate checks."""

    def test_longitude_out_of_range(self) -> None:
        """Test that longitude 200 is an error."""
        report = validate_collection(collection(make_feature(point(200, 10))))
        assert not report.valid
        assert any("Longitude 200 out of range" in m for m in report.error_messages)
        assert report.errors[0].feature_index == 0
        assert report.errors[0].field == "geometry.coordinates"

    def test_latitude_out_of_range_and_swapped(self) -> None:
        """Test that lat 95 with lon 10 gives a range error and a swap warning."""
        report = validate_collection(collection(make_feature(point(10, 95))))
        assert [i.kind for i in report.errors] == [IssueKind.LATITUDE_OUT_OF_RANGE]
        assert "Feature 0: Latitude 95 out of range (-90 to 90)" in report.error_messages
        assert report.issues_of(IssueKind.SWAPPED_AXES)[0].severity is Severity.WARNING

    def test_non_numeric_coordinate(self) -> None:
        """Test that string coordinates are errors."""
        report = validate_collection(collection(make_feature(point("10", 20))))
        assert report.issues_of(IssueKind.INVALID_COORDINATE)

    def test_line_positions_checked(self) -> None:
        """Test that every line position is range checked."""
        line = {"type": "LineString", "coordinates": [[0, 0], [0, 100]]}
        report = validate_collection(collection(make_feature(line)))
        assert report.error_messages == [
            "Feature 0: point 1: Latitude 100 out of range (-90 to 90)"
        ]


class TestGeometryShape:
    """Tests for per-kind structure rules."""

    def test_missing_geometry(self) -> None:
        """Test that a null geometry is an error."""
        report = validate_collection(collection(make_feature(None)))
        assert report.error_messages == ["Feature 0: Missing or invalid geometry"]

    def test_missing_type_and_coordinates(self) -> None:
        """Test geometry field presence."""
        report = validate_collection(
            collection(make_feature({"coordinates": [0, 0]}), make_feature({"type": "Point"}))
        )
        assert report.error_messages == [
            "Feature 0: Geometry missing 'type' field",
            "Feature 1: Geometry missing 'coordinates' field",
        ]

    def test_short_point(self) -> None:
        """Test that a point needs two ordinates."""
        report = validate_collection(collection(make_feature({"type": "Point", "coordinates": [1]})))
        assert report.issues_of(IssueKind.TOO_FEW_POINTS)

    def test_short_line(self) -> None:
        """Test that a line needs two points."""
        line = {"type": "LineString", "coordinates": [[0, 0]]}
        report = validate_collection(collection(make_feature(line)))
        assert report.error_messages == ["Feature 0: LineString must have at least 2 points"]

    def test_short_ring(self) -> None:
        """Test that a ring needs four points."""
        polygon = {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [0, 0]]]}
        report = validate_collection(collection(make_feature(polygon)))
        assert report.error_messages == ["Feature 0: Polygon ring 0 must have at least 4 points"]

    def test_open_ring(self) -> None:
        """Test that an open ring is an error."""
        polygon = {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 1]]]}
        report = validate_collection(collection(make_feature(polygon)))
        assert [i.kind for i in report.errors] == [IssueKind.RING_NOT_CLOSED]

    def test_unsupported_type_is_warning(self) -> None:
        """Test that other geometry kinds only warn."""
        multi = {"type": "MultiPoint", "coordinates": [[0, 0], [1, 1]]}
        report = validate_collection(collection(make_feature(multi)))
        assert report.valid
        assert report.issues_of(IssueKind.UNSUPPORTED_GEOMETRY)
        assert report.stats.other_count == 1

    def test_wrong_feature_type(self) -> None:
        """Test that features must declare type Feature."""
        feature = make_feature(point(1, 1))
        feature["type"] = "Thing"
        report = validate_collection(collection(feature))
        assert report.error_messages == ["Feature 0: Expected type 'Feature', got 'Thing'"]


class TestTimestamps:
    """Tests for timestamp checks."""

    def test_all_missing_is_one_error(self) -> None:
        """Test a single collection-level error plus per-feature warnings."""
        report = validate_collection(
            collection(make_feature(point(1, 1), None), make_feature(point(2, 2), None))
        )
        assert not report.valid
        assert len(report.errors) == 1
        assert report.errors[0].kind is IssueKind.NO_TIMESTAMPS
        assert report.errors[0].feature_index is None
        assert len(report.issues_of(IssueKind.MISSING_TIMESTAMP)) == 2
        assert report.stats.missing_timestamps == 2

    def test_some_missing_is_warning(self) -> None:
        """Test that partial coverage stays valid."""
        report = validate_collection(
            collection(make_feature(point(1, 1), 0), make_feature(point(2, 2), "someday"))
        )
        assert report.valid
        assert report.stats.missing_timestamps == 1
        assert "Invalid ('someday')" in report.warning_messages[0]

    def test_missing_properties(self) -> None:
        """Test that absent properties warn and count as missing timestamp."""
        feature = {"type": "Feature", "geometry": point(1, 1)}
        report = validate_collection(collection(feature, make_feature(point(2, 2), 5)))
        assert report.valid
        assert report.issues_of(IssueKind.MISSING_PROPERTIES)
        assert report.stats.missing_timestamps == 1

    def test_non_object_features_not_counted(self) -> None:
        """Test that non-object features are errors but not missing timestamps."""
        report = validate_collection(collection("oops", 42))
        assert [issue.kind for issue in report.errors] == [IssueKind.INVALID_FEATURE] * 2
        assert report.stats.missing_timestamps == 0

    def test_non_object_beside_untimed_feature(self) -> None:
        """Test that the collection error still fires when no object has a timestamp."""
        report = validate_collection(collection("oops", make_feature(point(1, 1), None)))
        assert report.issues_of(IssueKind.NO_TIMESTAMPS)
        assert report.stats.missing_timestamps == 1

    def test_oversized_numeric_string_is_warning(self) -> None:
        """Test that a huge digit string is reported, not raised."""
        report = validate_collection(
            collection(make_feature(point(1, 1), "1" * 5000), make_feature(point(2, 2), 5))
        )
        assert report.valid
        assert report.stats.missing_timestamps == 1
        assert report.issues_of(IssueKind.MISSING_TIMESTAMP)

    def test_out_of_range_number_is_warning(self) -> None:
        """Test that epoch ms beyond the representable range is unreadable."""
        report = validate_collection(
            collection(make_feature(point(1, 1), 1e20), make_feature(point(2, 2), 5))
        )
        assert report.stats.missing_timestamps == 1

    def test_zero_span_warning(self) -> None:
        """Test that identical timestamps warn."""
        report = validate_collection(
            collection(make_feature(point(1, 1), 7), make_feature(point(2, 2), 7))
        )
        assert report.valid
        assert report.issues_of(IssueKind.ZERO_TIME_SPAN)


class TestReporter:
    """Tests for text summaries and console output."""

    def test_summary(self, valid_collection: dict[str, Any]) -> None:
        """Test the success summary lines."""
        text = summarize(validate_collection(valid_collection))
        assert text.splitlines() == [
            "Valid GeoJSON with 3 feature(s)",
            "  - 1 point(s)",
            "  - 1 line(s)",
            "  - 1 polygon(s)",
            "  - Time span: 90.0 years",
            "  - Range: 1900-01-01 to 1990-01-01",
        ]

    def test_summary_truncates_warnings(self) -> None:
        """Test that only the first warnings are listed."""
        features = [make_feature(point(1, 1), 1), make_feature(point(1, 1), 2)] + [
            make_feature(point(1, 1), None) for _ in range(5)
        ]
        text = summarize(validate_collection(collection(*features)), max_warnings=3)
        assert "5 warning(s):" in text
        assert text.endswith("...and 2 more")

    def test_failure_message(self) -> None:
        """Test the first-five-errors rule."""
        features = [make_feature(point(500, 1), 1) for _ in range(7)]
        report = validate_collection(collection(*features))
        lines = failure_message(report).splitlines()

        assert lines[0] == "Validation failed with 7 error(s):"
        assert len(lines) == 7
        assert lines[-1] == "...and 2 more"

    def test_console_reporter(self) -> None:
        """Test that the console report shows stats and issues."""
        console = Console(record=True, width=120)
        report = validate_collection(collection(make_feature(point(10, 95))))
        ConsoleReporter(console).print_report(report, source="bad.geojson")
        output = console.export_text()

        assert "Validation Results: bad.geojson" in output
        assert "latitude_out_of_range" in output
        assert "swapped_axes" in output
        assert "Invalid (1 error(s))" in output
