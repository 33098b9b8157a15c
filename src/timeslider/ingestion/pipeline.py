"""
Ingestion orchestration.

Composes format detection, conversion, and validation into the single
entry point used by callers: raw bytes plus a filename in, a validated
FeatureCollection and its report out.
"""

from dataclasses import dataclass, replace
from pathlib import Path

from timeslider.config.settings import IngestionConfig
from timeslider.errors import FileTooLargeError, IngestionFailedError
from timeslider.ingestion.detection import auto_convert, file_extension
from timeslider.schemas.geojson import FeatureCollection
from timeslider.schemas.report import ValidationReport
from timeslider.utils.logging import get_logger, log_context
from timeslider.validation.core import validate_collection
from timeslider.validation.reporter import failure_message, summarize

log = get_logger(__name__)


def _megabytes(size: int) -> str:
    return f"{size / 1024 / 1024:.2f}MB"


@dataclass(frozen=True)
class FileCheck:
    """Result of the pre-flight file check."""

    filename: str
    size: int
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def valid(self) -> bool:
        return len(self.errors) == 0


@dataclass(frozen=True)
class IngestionResult:
    """
    A successfully ingested dataset.

    Attributes:
        collection: Validated FeatureCollection.
        report: Its validation report (valid, possibly with warnings).
        filename: Source filename.
        file_warnings: Warnings from the pre-flight check, if one ran.
    """

    collection: FeatureCollection
    report: ValidationReport
    filename: str
    file_warnings: tuple[str, ...] = ()
    max_warnings_shown: int = 3

    def summary(self) -> str:
        """Human-readable load summary."""
        return summarize(self.report, max_warnings=self.max_warnings_shown)


class IngestionPipeline:
    """
    Runs the detect-convert-validate sequence for one input at a time.

    Holds no per-call state; every call rebuilds everything from its
    input, so identical bytes always produce identical results.
    """

    def __init__(self, config: IngestionConfig | None = None) -> None:
        """
        Initialize the pipeline.

        Args:
            config: Ingestion configuration (defaults when None).
        """
        self.config = config or IngestionConfig()

    def check_file(self, filename: str, size: int) -> FileCheck:
        """
        Pre-flight check on name and size, before any bytes are read.

        Oversized files are errors; large files and unexpected extensions
        are warnings only.

        Args:
            filename: Original filename.
            size: File size in bytes.

        Returns:
            FileCheck with errors and warnings.
        """
        limits = self.config.limits
        errors = []
        warnings = []

        if size > limits.max_file_size_bytes:
            errors.append(
                f"File size {_megabytes(size)} exceeds limit of "
                f"{_megabytes(limits.max_file_size_bytes)}"
            )
        elif size > limits.large_file_warning_bytes:
            warnings.append(f"Large file ({_megabytes(size)}) may take a while to load")

        if file_extension(filename) not in limits.allowed_extensions:
            warnings.append(
                "Unexpected file extension. Expected: "
                f"{', '.join(limits.allowed_extensions)}"
            )

        check = FileCheck(filename, size, tuple(errors), tuple(warnings))
        if warnings:
            log.warning("File check warnings", filename=filename, warnings=warnings)
        return check

    def ingest(
        self,
        raw: bytes | str,
        filename: str = "",
        time_field: str | None = None,
    ) -> IngestionResult:
        """
        Convert and validate raw file content.

        Args:
            raw: File content (bytes are decoded as UTF-8, falling back to
                Latin-1).
            filename: Original filename (format hint).
            time_field: Explicit timestamp field; overrides the config.

        Returns:
            IngestionResult with the collection and its report.

        Raises:
            UnrecognizedFormatError: If the content is neither JSON nor CSV.
            EmptyInputError: If CSV content has no data rows.
            NoTimestampFieldError: If CSV content has no timestamp column.
            IngestionFailedError: If the converted data has validation errors.
        """
        time_field = time_field or self.config.time_field

        with log_context(filename=filename):
            text = self._decode(raw)
            collection = auto_convert(text, filename, time_field)
            report = validate_collection(collection)

            if not report.valid:
                message = failure_message(report, self.config.reporting.max_errors_shown)
                log.error("Ingestion failed validation", errors=len(report.errors))
                raise IngestionFailedError(message, report)

            log.info(
                "Ingestion complete",
                features=report.stats.feature_count,
                warnings=len(report.warnings),
            )

        return IngestionResult(
            collection=collection,
            report=report,
            filename=filename,
            max_warnings_shown=self.config.reporting.max_warnings_shown,
        )

    def ingest_path(self, path: Path, time_field: str | None = None) -> IngestionResult:
        """
        Check, read, and ingest a file from disk.

        Args:
            path: File to ingest.
            time_field: Explicit timestamp field.

        Returns:
            IngestionResult including the pre-flight warnings.

        Raises:
            FileNotFoundError: If the file does not exist.
            FileTooLargeError: If the pre-flight check fails.
        """
        if not path.is_file():
            msg = f"File not found: {path}"
            raise FileNotFoundError(msg)

        check = self.check_file(path.name, path.stat().st_size)
        if not check.valid:
            raise FileTooLargeError("\n".join(check.errors))

        result = self.ingest(path.read_bytes(), path.name, time_field)
        return replace(result, file_warnings=check.warnings)

    def ingest_example(self, name: str) -> IngestionResult:
        """
        Ingest a bundled example file by name.

        Args:
            name: File name inside the configured examples directory.

        Returns:
            IngestionResult for the example.
        """
        examples_dir = self.config.paths.examples_dir
        path = examples_dir / name
        if path.resolve().parent != examples_dir.resolve():
            msg = f"Example name must be a plain file name, got: {name!r}"
            raise ValueError(msg)
        log.info("Loading example", name=name, directory=str(examples_dir))
        return self.ingest_path(path)

    def _decode(self, raw: bytes | str) -> str:
        """Decode bytes as UTF-8 (BOM stripped), falling back to Latin-1."""
        if isinstance(raw, str):
            return raw
        try:
            return raw.decode("utf-8-sig")
        except UnicodeDecodeError:
            log.warning("UTF-8 decode failed, retrying with Latin-1")
            return raw.decode("latin-1")


def check_file(
    filename: str, size: int, config: IngestionConfig | None = None
) -> FileCheck:
    """Convenience function for the pre-flight file check."""
    return IngestionPipeline(config).check_file(filename, size)


def ingest(
    raw: bytes | str,
    filename: str = "",
    time_field: str | None = None,
    config: IngestionConfig | None = None,
) -> IngestionResult:
    """
    Convenience function to ingest raw content.

    Args:
        raw: File content.
        filename: Original filename (format hint).
        time_field: Explicit timestamp field.
        config: Ingestion configuration.

    Returns:
        IngestionResult with the validated collection.
    """
    return IngestionPipeline(config).ingest(raw, filename, time_field)


def ingest_path(
    path: Path,
    time_field: str | None = None,
    config: IngestionConfig | None = None,
) -> IngestionResult:
    """Convenience function to ingest a file from disk."""
    return IngestionPipeline(config).ingest_path(path, time_field)


def ingest_example(name: str, config: IngestionConfig | None = None) -> IngestionResult:
    """Convenience function to ingest a bundled example file."""
    return IngestionPipeline(config).ingest_example(name)
