"""Tests for the command-line interface."""

import json
from pathlib import Path

from typer.testing import CliRunner

from timeslider.cli import app

runner = CliRunner()


class TestIngestCommand:
    """Tests for `timeslider ingest`."""

    def test_success_summary(self, write_file, cities_csv: str) -> None:
        """Test that a good file prints the summary and exits 0."""
        path = write_file("cities.csv", cities_csv)
        result = runner.invoke(app, ["ingest", str(path)])

        assert result.exit_code == 0
        assert "Valid GeoJSON with 2 feature(s)" in result.output

    def test_writes_output(self, write_file, tmp_path: Path, cities_csv: str) -> None:
        """Test --output writes converted GeoJSON."""
        path = write_file("cities.csv", cities_csv)
        output = tmp_path / "converted.geojson"
        result = runner.invoke(app, ["ingest", str(path), "--output", str(output)])

        assert result.exit_code == 0
        written = json.loads(output.read_text(encoding="utf-8"))
        assert written["type"] == "FeatureCollection"
        assert len(written["features"]) == 2

    def test_time_field_option(self, write_file) -> None:
        """Test --time-field selects the timestamp column."""
        path = write_file("forts.csv", "founded,lat,lon\n1750,1,2\n")
        result = runner.invoke(app, ["ingest", str(path), "--time-field", "founded"])
        assert result.exit_code == 0

    def test_conversion_failure(self, write_file) -> None:
        """Test that a file without a time column exits 1."""
        path = write_file("cities.csv", "name,lat,lon\nA,1,2\n")
        result = runner.invoke(app, ["ingest", str(path)])

        assert result.exit_code == 1
        assert "No timestamp field found" in result.output

    def test_validation_failure(self, write_file) -> None:
        """Test that an invalid collection exits 1 with the error list."""
        data = {
            "type": "FeatureCollection",
            "features": [
                {
                    "type": "Feature",
                    "geometry": {"type": "Point", "coordinates": [200, 0]},
                    "properties": {"timestamp": 0},
                }
            ],
        }
        path = write_file("bad.geojson", json.dumps(data))
        result = runner.invoke(app, ["ingest", str(path)])

        assert result.exit_code == 1
        assert "Validation failed with 1 error(s)" in result.output

    def test_unsupported_output(self, write_file, tmp_path: Path, cities_csv: str) -> None:
        """Test that an unknown output extension exits 1."""
        path = write_file("cities.csv", cities_csv)
        result = runner.invoke(app, ["ingest", str(path), "-o", str(tmp_path / "out.xlsx")])
        assert result.exit_code == 1

    def test_config_file(self, write_file, cities_csv: str) -> None:
        """Test that --config limits apply."""
        path = write_file("cities.csv", cities_csv)
        config = write_file("config.yaml", "limits:\n  max_file_size_mb: 0.00001\n")
        result = runner.invoke(app, ["ingest", str(path), "--config", str(config)])

        assert result.exit_code == 1
        assert "exceeds limit" in result.output


class TestValidateCommand:
    """Tests for `timeslider validate`."""

    def test_valid_file(self, write_file, cities_csv: str) -> None:
        """Test the report table for a good file."""
        path = write_file("cities.csv", cities_csv)
        result = runner.invoke(app, ["validate", str(path)])

        assert result.exit_code == 0
        assert "Validation Results" in result.output
        assert "Valid" in result.output

    def test_invalid_file_shows_report(self, write_file) -> None:
        """Test that validation errors are listed and exit 1."""
        data = {
            "type": "FeatureCollection",
            "features": [
                {"type": "Feature", "geometry": {"type": "Point", "coordinates": [0, 0]}},
            ],
        }
        path = write_file("bad.geojson", json.dumps(data))
        result = runner.invoke(app, ["validate", str(path)])

        assert result.exit_code == 1
        assert "no_timestamps" in result.output

    def test_unreadable_file(self, write_file) -> None:
        """Test that an unrecognized format exits 1."""
        path = write_file("notes.txt", "hello world")
        result = runner.invoke(app, ["validate", str(path)])
        assert result.exit_code == 1


class TestExampleCommand:
    """Tests for `timeslider example`."""

    def test_loads_example(self, write_file, examples_dir: Path) -> None:
        """Test loading a bundled example through a config file."""
        config = write_file("config.yaml", f"paths:\n  examples: {examples_dir}\n")
        result = runner.invoke(app, ["example", "city_founding.csv", "--config", str(config)])

        assert result.exit_code == 0
        assert "Valid GeoJSON with 12 feature(s)" in result.output

    def test_unknown_example(self, write_file, examples_dir: Path) -> None:
        """Test that a missing example exits 1."""
        config = write_file("config.yaml", f"paths:\n  examples: {examples_dir}\n")
        result = runner.invoke(app, ["example", "nope.csv", "--config", str(config)])
        assert result.exit_code == 1


def test_version() -> None:
    """Test the version command."""
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "timeslider version" in result.output
