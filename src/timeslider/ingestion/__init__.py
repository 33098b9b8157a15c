"""
Data ingestion layer: raw file content to validated FeatureCollections.

All raw data enters through this module so that format detection,
conversion, and validation happen consistently at the system boundary.
"""

from timeslider.ingestion.conversion import (
    csv_to_geojson,
    json_to_geojson,
    records_from_json,
    records_from_rows,
)
from timeslider.ingestion.detection import (
    FormatDetection,
    InputFormat,
    auto_convert,
    detect_format,
)
from timeslider.ingestion.pipeline import (
    FileCheck,
    IngestionPipeline,
    IngestionResult,
    check_file,
    ingest,
    ingest_example,
    ingest_path,
)
from timeslider.ingestion.tabular import parse_csv

__all__ = [
    "FileCheck",
    "FormatDetection",
    "IngestionPipeline",
    "IngestionResult",
    "InputFormat",
    "auto_convert",
    "check_file",
    "csv_to_geojson",
    "detect_format",
    "ingest",
    "ingest_example",
    "ingest_path",
    "json_to_geojson",
    "parse_csv",
    "records_from_json",
    "records_from_rows",
]
