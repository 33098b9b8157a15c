"""
Exception hierarchy for the ingestion pipeline.

Each stage raises a specific error type so callers can tell a bad file
apart from a bad timestamp without parsing messages. Errors caused by
malformed input also subclass ValueError.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from timeslider.schemas.report import ValidationReport


class IngestionError(Exception):
    """Base exception for all ingestion failures."""


class EmptyInputError(IngestionError, ValueError):
    """Raised when tabular input has no header or no data rows."""


class InvalidTimestampError(IngestionError, ValueError):
    """Raised when a value cannot be read as a timestamp."""


class NoTimestampFieldError(IngestionError, ValueError):
    """Raised when no timestamp column can be found in tabular input."""


class UnrecognizedFormatError(IngestionError, ValueError):
    """Raised when input is neither JSON nor CSV."""


class FileTooLargeError(IngestionError):
    """Raised when a file fails the pre-flight size check."""


class IngestionFailedError(IngestionError):
    """Raised when converted data does not pass validation."""

    def __init__(self, message: str, report: "ValidationReport") -> None:
        super().__init__(message)
        self.report = report
