"""
Typed configuration models using Pydantic.

All tunable limits of the ingestion pipeline are defined here with
explicit typing and validation. Processing code never hardcodes them.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

MIB = 1024 * 1024
BUNDLED_EXAMPLES_DIR = Path(__file__).resolve().parent.parent / "examples"


class LimitsConfig(BaseModel):
    """Pre-flight file limits."""

    model_config = ConfigDict(frozen=True)

    max_file_size_bytes: int = Field(
        default=10 * MIB, gt=0, description="Hard upper bound for uploaded files"
    )
    large_file_warning_bytes: int = Field(
        default=1 * MIB, gt=0, description="Size above which a slow-load warning is emitted"
    )
    allowed_extensions: list[str] = Field(
        default_factory=lambda: [".json", ".geojson", ".csv"],
        description="Expected file extensions (mismatch is only a warning)",
    )

    @field_validator("allowed_extensions")
    @classmethod
    def normalize_extensions(cls, v: list[str]) -> list[str]:
        """Lower-case extensions and ensure the leading dot."""
        normalized = []
        for ext in v:
            ext = ext.strip().lower()
            if not ext:
                msg = "Extensions must not be empty"
                raise ValueError(msg)
            normalized.append(ext if ext.startswith(".") else f".{ext}")
        return normalized


class ReportingConfig(BaseModel):
    """How much detail human-readable summaries show."""

    model_config = ConfigDict(frozen=True)

    max_errors_shown: int = Field(default=5, ge=1)
    max_warnings_shown: int = Field(default=3, ge=0)


class LoggingConfig(BaseModel):
    """Logging output configuration."""

    model_config = ConfigDict(frozen=True)

    level: str = Field(default="INFO")
    json_output: bool = Field(default=False)

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Ensure level is a known logging level name."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            msg = f"Log level must be one of {sorted(allowed)}, got: {v!r}"
            raise ValueError(msg)
        return v.upper()


class PathsConfig(BaseModel):
    """Filesystem locations."""

    model_config = ConfigDict(frozen=True)

    examples_dir: Path = Field(
        default=BUNDLED_EXAMPLES_DIR, description="Directory holding example files"
    )


class IngestionConfig(BaseModel):
    """Complete ingestion configuration."""

    model_config = ConfigDict(frozen=True)

    time_field: str | None = Field(
        default=None,
        description="Explicit timestamp column; auto-detected when unset",
    )
    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    reporting: ReportingConfig = Field(default_factory=ReportingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)

    @field_validator("time_field")
    @classmethod
    def blank_time_field_is_unset(cls, v: str | None) -> str | None:
        """Treat an empty time field as 'auto-detect'."""
        if v is not None and not v.strip():
            return None
        return v
