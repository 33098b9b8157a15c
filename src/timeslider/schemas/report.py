"""
Validation report types.

Issues are structured (kind, feature index, field) so callers can filter
them programmatically, while each still carries the literal message shown
to users.
"""

from dataclasses import dataclass, field
from enum import Enum

MS_PER_DAY = 1000 * 60 * 60 * 24
DAYS_PER_YEAR = 365.25


class Severity(Enum):
    """Whether an issue blocks loading."""

    ERROR = "error"
    WARNING = "warning"


class IssueKind(Enum):
    """Classification of validation findings."""

    NOT_A_COLLECTION = "not_a_collection"
    EMPTY_COLLECTION = "empty_collection"
    INVALID_FEATURE = "invalid_feature"
    MISSING_GEOMETRY = "missing_geometry"
    INVALID_COORDINATE = "invalid_coordinate"
    LONGITUDE_OUT_OF_RANGE = "longitude_out_of_range"
    LATITUDE_OUT_OF_RANGE = "latitude_out_of_range"
    SWAPPED_AXES = "swapped_axes"
    TOO_FEW_POINTS = "too_few_points"
    RING_NOT_CLOSED = "ring_not_closed"
    UNSUPPORTED_GEOMETRY = "unsupported_geometry"
    MISSING_PROPERTIES = "missing_properties"
    MISSING_TIMESTAMP = "missing_timestamp"
    NO_TIMESTAMPS = "no_timestamps"
    ZERO_TIME_SPAN = "zero_time_span"


@dataclass(frozen=True)
class ValidationIssue:
    """
    A single validation finding.

    Attributes:
        kind: Machine-readable classification.
        severity: Error (blocks loading) or warning.
        message: Human-readable text, prefixed with the feature location.
        feature_index: Index into features, or None for collection-level issues.
        field: Offending field (e.g. "geometry", "properties.timestamp").
    """

    kind: IssueKind
    severity: Severity
    message: str
    feature_index: int | None = None
    field: str | None = None


@dataclass(frozen=True)
class TimeSpan:
    """Distance between the earliest and latest timestamp."""

    milliseconds: int

    @property
    def days(self) -> float:
        return self.milliseconds / MS_PER_DAY

    @property
    def years(self) -> float:
        return self.days / DAYS_PER_YEAR


@dataclass(frozen=True)
class CollectionStats:
    """Aggregate statistics over the structurally readable features."""

    feature_count: int = 0
    point_count: int = 0
    line_count: int = 0
    polygon_count: int = 0
    other_count: int = 0
    min_timestamp: int | None = None
    max_timestamp: int | None = None
    missing_timestamps: int = 0

    @property
    def has_timestamps(self) -> bool:
        return self.min_timestamp is not None

    @property
    def time_span(self) -> TimeSpan | None:
        if self.min_timestamp is None or self.max_timestamp is None:
            return None
        return TimeSpan(self.max_timestamp - self.min_timestamp)


@dataclass(frozen=True)
class ValidationReport:
    """
    Complete result of validating one collection.

    A report is never mutated after it is returned.
    """

    errors: tuple[ValidationIssue, ...] = ()
    warnings: tuple[ValidationIssue, ...] = ()
    stats: CollectionStats = field(default_factory=CollectionStats)

    @property
    def valid(self) -> bool:
        return len(self.errors) == 0

    @property
    def error_messages(self) -> list[str]:
        return [issue.message for issue in self.errors]

    @property
    def warning_messages(self) -> list[str]:
        return [issue.message for issue in self.warnings]

    def issues_of(self, kind: IssueKind) -> list[ValidationIssue]:
        """All errors and warnings of one kind."""
        return [i for i in (*self.errors, *self.warnings) if i.kind == kind]
