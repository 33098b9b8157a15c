"""
Configuration management with typed Pydantic models.

Provides file-limit, reporting, and logging settings with
environment-aware YAML loading.
"""

from timeslider.config.loader import load_config
from timeslider.config.settings import (
    IngestionConfig,
    LimitsConfig,
    LoggingConfig,
    PathsConfig,
    ReportingConfig,
)

__all__ = [
    "IngestionConfig",
    "LimitsConfig",
    "LoggingConfig",
    "PathsConfig",
    "ReportingConfig",
    "load_config",
]
