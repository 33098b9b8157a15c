"""Pytest configuration and shared fixtures."""

from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
import structlog


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    """Drop logging configuration bound to streams of a finished test."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def examples_dir(project_root: Path) -> Path:
    """Return the bundled examples directory."""
    return project_root / "src" / "timeslider" / "examples"


@pytest.fixture
def cities_csv() -> str:
    """CSV text with two dated cities."""
    return "timestamp,latitude,longitude,name\n1900,10,20,A\n1950,30,40,B\n"


@pytest.fixture
def valid_collection() -> dict[str, Any]:
    """A valid collection with one feature of each supported kind."""
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "geometry": {"type": "Point", "coordinates": [20.0, 10.0]},
                "properties": {"timestamp": -2208988800000, "name": "A"},
            },
            {
                "type": "Feature",
                "geometry": {"type": "LineString", "coordinates": [[20.0, 10.0], [25.0, 15.0]]},
                "properties": {"timestamp": -631152000000, "name": "B"},
            },
            {
                "type": "Feature",
                "geometry": {
                    "type": "Polygon",
                    "coordinates": [[[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0], [0.0, 0.0]]],
                },
                "properties": {"timestamp": 631152000000, "name": "C"},
            },
        ],
    }


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write text to a file under tmp_path and return its path."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write
