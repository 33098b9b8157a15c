"""Command-line interface for the timeslider ingestion pipeline."""

from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console
from rich.markup import escape

if TYPE_CHECKING:
    from timeslider.config.settings import IngestionConfig
    from timeslider.ingestion.pipeline import IngestionResult

app = typer.Typer(
    name="timeslider",
    help="Convert and validate time-stamped geographic data for the time-slider map.",
    no_args_is_help=True,
)

console = Console()

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to configuration YAML file.",
        exists=True,
        dir_okay=False,
    ),
]


def _setup(config: Path | None) -> "IngestionConfig":
    """Load configuration (defaults when no file is given) and configure logging."""
    from timeslider.config.loader import load_config
    from timeslider.config.settings import IngestionConfig
    from timeslider.utils.logging import configure_logging

    try:
        ingestion_config = load_config(config) if config is not None else IngestionConfig()
    except ValueError as e:
        console.print(f"[red]Invalid configuration: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e

    configure_logging(
        level=ingestion_config.logging.level,
        json_output=ingestion_config.logging.json_output,
    )
    return ingestion_config


def _print_result(result: "IngestionResult") -> None:
    for warning in result.file_warnings:
        console.print(f"[yellow]{escape(warning)}[/yellow]")
    console.print(f"[green]{escape(result.summary())}[/green]", highlight=False)


def _write_output(result: "IngestionResult", output: Path) -> None:
    from timeslider.export import write_collection

    try:
        written = write_collection(result.collection, output)
    except ValueError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e
    console.print(f"\n[green]Saved to: {written}[/green]")


@app.command()
def ingest(
    file: Annotated[
        Path,
        typer.Argument(
            help="JSON, GeoJSON, or CSV file to ingest.",
            exists=True,
            dir_okay=False,
        ),
    ],
    time_field: Annotated[
        str | None,
        typer.Option(
            "--time-field",
            "-t",
            help="Timestamp column or key (auto-detected when omitted).",
        ),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Write the converted data (.geojson, .json, .csv, .gpkg, .fgb).",
        ),
    ] = None,
    config: ConfigOption = None,
) -> None:
    """Convert and validate a data file."""
    from timeslider.errors import IngestionError
    from timeslider.ingestion.pipeline import IngestionPipeline

    ingestion_config = _setup(config)
    console.print(f"[blue]Ingesting {file}[/blue]")

    try:
        result = IngestionPipeline(ingestion_config).ingest_path(file, time_field)
    except IngestionError as e:
        console.print(f"[red]Ingestion failed:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(code=1) from e

    _print_result(result)
    if output is not None:
        _write_output(result, output)


@app.command()
def validate(
    file: Annotated[
        Path,
        typer.Argument(
            help="JSON, GeoJSON, or CSV file to validate.",
            exists=True,
            dir_okay=False,
        ),
    ],
    config: ConfigOption = None,
) -> None:
    """Show the full validation report for a data file."""
    from timeslider.errors import IngestionError, IngestionFailedError
    from timeslider.ingestion.pipeline import IngestionPipeline
    from timeslider.validation import ConsoleReporter

    ingestion_config = _setup(config)
    reporter = ConsoleReporter(console)

    try:
        result = IngestionPipeline(ingestion_config).ingest_path(file)
    except IngestionFailedError as e:
        reporter.print_report(e.report, source=file.name)
        raise typer.Exit(code=1) from e
    except IngestionError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]", highlight=False)
        raise typer.Exit(code=1) from e

    for warning in result.file_warnings:
        console.print(f"[yellow]{escape(warning)}[/yellow]")
    reporter.print_report(result.report, source=file.name)


@app.command()
def example(
    name: Annotated[
        str,
        typer.Argument(help="File name inside the configured examples directory."),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Write the converted data (.geojson, .json, .csv, .gpkg, .fgb).",
        ),
    ] = None,
    config: ConfigOption = None,
) -> None:
    """Load one of the bundled example files."""
    from timeslider.errors import IngestionError
    from timeslider.ingestion.pipeline import IngestionPipeline

    ingestion_config = _setup(config)

    try:
        result = IngestionPipeline(ingestion_config).ingest_example(name)
    except (IngestionError, FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]", highlight=False)
        raise typer.Exit(code=1) from e

    _print_result(result)
    if output is not None:
        _write_output(result, output)


@app.command()
def version() -> None:
    """Show version information."""
    from timeslider import __version__

    console.print(f"timeslider version {__version__}")


if __name__ == "__main__":
    app()
