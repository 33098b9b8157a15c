"""
Human-readable rendering of validation reports.

Plain-text summaries for load messages, and a Rich console reporter for
the command line.
"""

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from timeslider.normalization.temporal import epoch_ms_to_datetime
from timeslider.schemas.report import ValidationIssue, ValidationReport


def _format_date(ms: int) -> str:
    try:
        return epoch_ms_to_datetime(ms).date().isoformat()
    except OverflowError:
        return f"{ms} ms"


def _truncated(messages: list[str], limit: int) -> str:
    lines = messages[:limit]
    if len(messages) > limit:
        lines.append(f"...and {len(messages) - limit} more")
    return "\n".join(lines)


def failure_message(report: ValidationReport, max_errors: int = 5) -> str:
    """
    Summarize a failed report: the first errors plus a remainder count.

    Args:
        report: Report with at least one error.
        max_errors: How many errors to list.

    Returns:
        Multi-line message.
    """
    errors = report.error_messages
    return (
        f"Validation failed with {len(errors)} error(s):\n"
        f"{_truncated(errors, max_errors)}"
    )


def summarize(
    report: ValidationReport,
    max_errors: int = 5,
    max_warnings: int = 3,
) -> str:
    """
    Short multi-line load summary.

    Valid reports list counts per geometry kind, the time span and range,
    and the first warnings. Invalid reports defer to failure_message.

    Args:
        report: Validation report.
        max_errors: Errors listed for an invalid report.
        max_warnings: Warnings listed for a valid report.

    Returns:
        Summary text.
    """
    if not report.valid:
        return failure_message(report, max_errors)

    stats = report.stats
    lines = [f"Valid GeoJSON with {stats.feature_count} feature(s)"]
    if stats.point_count:
        lines.append(f"  - {stats.point_count} point(s)")
    if stats.line_count:
        lines.append(f"  - {stats.line_count} line(s)")
    if stats.polygon_count:
        lines.append(f"  - {stats.polygon_count} polygon(s)")
    if stats.other_count:
        lines.append(f"  - {stats.other_count} other geometry(s)")

    span = stats.time_span
    if span is not None and stats.min_timestamp is not None and stats.max_timestamp is not None:
        lines.append(f"  - Time span: {span.years:.1f} years")
        lines.append(
            f"  - Range: {_format_date(stats.min_timestamp)} "
            f"to {_format_date(stats.max_timestamp)}"
        )

    warnings = report.warning_messages
    if warnings and max_warnings > 0:
        lines.append("")
        lines.append(f"{len(warnings)} warning(s):")
        lines.append(_truncated(warnings, max_warnings))

    return "\n".join(lines)


class ConsoleReporter:
    """Formats and displays validation reports to the console."""

    def __init__(self, console: Console) -> None:
        """
        Initialize console reporter.

        Args:
            console: Rich Console instance for output.
        """
        self.console = console

    def print_report(self, report: ValidationReport, source: str | None = None) -> None:
        """
        Print statistics and every issue of a report.

        Args:
            report: Report to display.
            source: Optional file name for the table title.
        """
        title = "Validation Results" if source is None else f"Validation Results: {source}"
        self.console.print(self._stats_table(report, title))

        self._print_issues("Errors", "red", report.errors)
        self._print_issues("Warnings", "yellow", report.warnings)

        self.console.print()
        if report.valid:
            self.console.print("[green]Valid[/green]")
        else:
            self.console.print(f"[red]Invalid ({len(report.errors)} error(s))[/red]")

    def _stats_table(self, report: ValidationReport, title: str) -> Table:
        stats = report.stats
        table = Table(title=title, show_header=True)
        table.add_column("Metric", style="cyan", no_wrap=True)
        table.add_column("Value", style="green", justify="right")

        table.add_row("Features", str(stats.feature_count))
        table.add_row("Points", str(stats.point_count))
        table.add_row("Lines", str(stats.line_count))
        table.add_row("Polygons", str(stats.polygon_count))
        if stats.other_count:
            table.add_row("Other geometries", str(stats.other_count))
        table.add_row("Missing timestamps", str(stats.missing_timestamps))

        span = stats.time_span
        if span is not None and stats.min_timestamp is not None and stats.max_timestamp is not None:
            table.add_row("Earliest", _format_date(stats.min_timestamp))
            table.add_row("Latest", _format_date(stats.max_timestamp))
            table.add_row("Span (days)", f"{span.days:.0f}")
            table.add_row("Span (years)", f"{span.years:.1f}")

        table.add_row("Errors", str(len(report.errors)))
        table.add_row("Warnings", str(len(report.warnings)))
        return table

    def _print_issues(
        self, heading: str, color: str, issues: tuple[ValidationIssue, ...]
    ) -> None:
        if not issues:
            return
        self.console.print()
        self.console.print(f"[bold {color}]{heading}:[/bold {color}]")
        for issue in issues:
            self.console.print(
                f"  [dim]{issue.kind.value}[/dim] {escape(issue.message)}", highlight=False
            )
