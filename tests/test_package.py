"""Basic package tests to verify installation."""


def test_package_imports() -> None:
    """Verify the main package can be imported."""
    import timeslider

    assert timeslider.__version__


def test_config_module_imports() -> None:
    """Verify config module structure is correct."""
    from timeslider.config import (
        IngestionConfig,
        LimitsConfig,
        LoggingConfig,
        PathsConfig,
        ReportingConfig,
        load_config,
    )

    assert IngestionConfig is not None
    assert LimitsConfig is not None
    assert LoggingConfig is not None
    assert PathsConfig is not None
    assert ReportingConfig is not None
    assert load_config is not None


def test_schemas_module_imports() -> None:
    """Verify schemas module structure is correct."""
    from timeslider.schemas import (
        CollectionStats,
        FeatureTableSchema,
        GeoRecord,
        IssueKind,
        ValidationReport,
    )

    assert CollectionStats is not None
    assert FeatureTableSchema is not None
    assert GeoRecord is not None
    assert IssueKind is not None
    assert ValidationReport is not None


def test_ingestion_module_imports() -> None:
    """Verify ingestion module exports the pipeline entry points."""
    from timeslider.ingestion import (
        IngestionPipeline,
        auto_convert,
        check_file,
        ingest,
        ingest_path,
        parse_csv,
    )

    assert IngestionPipeline is not None
    assert auto_convert is not None
    assert check_file is not None
    assert ingest is not None
    assert ingest_path is not None
    assert parse_csv is not None
