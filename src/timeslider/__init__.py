"""
Timeslider: data ingestion for time-scrubbed maps.

This package turns user-supplied CSV, simple JSON, and GeoJSON into a
validated GeoJSON FeatureCollection whose features carry epoch-millisecond
timestamps, ready for a time-slider map renderer.
"""

from importlib.metadata import version

__version__ = version("timeslider")

__all__ = ["__version__"]
