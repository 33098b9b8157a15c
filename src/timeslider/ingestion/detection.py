"""
Input format detection and dispatch.

The format is decided once by a probe that returns an explicit tag; the
converters never learn the format from a caught exception.
"""

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath
from typing import Any

from timeslider.errors import UnrecognizedFormatError
from timeslider.ingestion.conversion import csv_to_geojson, json_to_geojson
from timeslider.schemas.geojson import FeatureCollection
from timeslider.utils.logging import get_logger

log = get_logger(__name__)


class InputFormat(Enum):
    """Recognized input encodings."""

    JSON = "json"
    CSV = "csv"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class FormatDetection:
    """
    Outcome of probing raw text.

    Attributes:
        format: The detected format tag.
        payload: Parsed JSON value when format is JSON, else None.
        json_error: Why JSON parsing failed, when it did.
    """

    format: InputFormat
    payload: Any = None
    json_error: str | None = None


def file_extension(filename: str) -> str:
    """Lower-cased extension including the dot ("" when absent)."""
    return PurePath(filename).suffix.lower()


def detect_format(text: str, filename: str = "") -> FormatDetection:
    """
    Probe text for its encoding.

    JSON is tried first. If it does not parse, the text is CSV when the
    filename ends in .csv or the text contains a comma.

    Args:
        text: Decoded file content.
        filename: Original filename, used only as a hint.

    Returns:
        FormatDetection with the format tag.
    """
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        json_error = str(e)
    else:
        return FormatDetection(InputFormat.JSON, payload=payload)

    if file_extension(filename) == ".csv" or "," in text:
        return FormatDetection(InputFormat.CSV, json_error=json_error)

    return FormatDetection(InputFormat.UNRECOGNIZED, json_error=json_error)


def auto_convert(
    text: str,
    filename: str = "",
    time_field: str | None = None,
) -> FeatureCollection:
    """
    Detect the input format and convert to a FeatureCollection.

    Args:
        text: Decoded file content.
        filename: Original filename (format hint).
        time_field: Explicit timestamp field for CSV and simple JSON.

    Returns:
        FeatureCollection (an input FeatureCollection is passed through).

    Raises:
        UnrecognizedFormatError: If the text is neither JSON nor CSV.
        EmptyInputError: If CSV input has no data rows.
        NoTimestampFieldError: If CSV input has no timestamp column.
    """
    detection = detect_format(text, filename)
    log.info("Detected input format", format=detection.format.value, filename=filename)

    if detection.format is InputFormat.JSON:
        return json_to_geojson(detection.payload, time_field)

    if detection.format is InputFormat.CSV:
        return csv_to_geojson(text, time_field)

    msg = (
        "Failed to parse data. Not valid JSON or CSV "
        f"(CSV not attempted: no .csv extension and no commas). "
        f"JSON error: {detection.json_error}"
    )
    raise UnrecognizedFormatError(msg)
