"""
Configuration loading utilities.

Supports environment variable interpolation and inheritance from a
sibling base.yaml. Every key is optional; an empty file yields defaults.
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml

from timeslider.config.settings import (
    BUNDLED_EXAMPLES_DIR,
    IngestionConfig,
    LimitsConfig,
    LoggingConfig,
    PathsConfig,
    ReportingConfig,
)


def _interpolate_env_vars(value: str) -> str:
    """
    Interpolate environment variables in string values.

    Supports ${VAR} and ${VAR:default} syntax.
    """
    pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default = match.group(2)
        return os.environ.get(var_name, default if default is not None else "")

    return re.sub(pattern, replacer, value)


def _process_config_values(obj: Any) -> Any:
    """Recursively process config values for env var interpolation."""
    if isinstance(obj, str):
        return _interpolate_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _process_config_values(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_process_config_values(item) for item in obj]
    return obj


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML file and process environment variables."""
    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"Config file {path} must contain a mapping, got {type(data).__name__}"
        raise ValueError(msg)
    return _process_config_values(data)


def load_config(
    config_path: Path,
    base_path: Path | None = None,
) -> IngestionConfig:
    """
    Load ingestion configuration from YAML file(s).

    Recognized keys:
        - time_field: str
        - limits.max_file_size_mb, limits.large_file_warning_mb,
          limits.allowed_extensions
        - reporting.max_errors_shown, reporting.max_warnings_shown
        - logging.level, logging.json
        - paths.examples

    Args:
        config_path: Path to the main configuration file.
        base_path: Optional path to base configuration for inheritance.

    Returns:
        Fully validated IngestionConfig instance.
    """
    if base_path is not None:
        base_data = load_yaml(base_path)
    else:
        potential_base = config_path.parent / "base.yaml"
        base_data = (
            load_yaml(potential_base)
            if potential_base.exists() and potential_base != config_path
            else {}
        )

    main_data = load_yaml(config_path)
    merged = _deep_merge(base_data, main_data)

    limits_data = merged.get("limits", {})
    defaults = LimitsConfig()
    limits = LimitsConfig(
        max_file_size_bytes=_megabytes(
            limits_data.get("max_file_size_mb"), defaults.max_file_size_bytes
        ),
        large_file_warning_bytes=_megabytes(
            limits_data.get("large_file_warning_mb"), defaults.large_file_warning_bytes
        ),
        allowed_extensions=limits_data.get(
            "allowed_extensions", defaults.allowed_extensions
        ),
    )

    reporting_data = merged.get("reporting", {})
    reporting = ReportingConfig(
        max_errors_shown=reporting_data.get("max_errors_shown", 5),
        max_warnings_shown=reporting_data.get("max_warnings_shown", 3),
    )

    logging_data = merged.get("logging", {})
    logging_config = LoggingConfig(
        level=logging_data.get("level", "INFO"),
        json_output=logging_data.get("json", False),
    )

    paths_data = merged.get("paths", {})
    paths = PathsConfig(
        examples_dir=Path(paths_data["examples"])
        if paths_data.get("examples")
        else BUNDLED_EXAMPLES_DIR,
    )

    return IngestionConfig(
        time_field=merged.get("time_field"),
        limits=limits,
        reporting=reporting,
        logging=logging_config,
        paths=paths,
    )


def _megabytes(value: Any, default: int) -> int:
    """Convert an optional megabyte setting (MiB) to bytes."""
    if value is None or value == "":
        return default
    return int(float(value) * 1024 * 1024)
