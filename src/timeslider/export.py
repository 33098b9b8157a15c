"""
Export of validated FeatureCollections.

Flattens a collection into a table for analysis, builds a GeoDataFrame,
and writes either to disk.
"""

import json
import math
from pathlib import Path
from typing import Any

import geopandas as gpd
import pandas as pd
from shapely.geometry import shape
from shapely.geometry.base import BaseGeometry

from timeslider.normalization.temporal import coerce_epoch_ms
from timeslider.schemas.geojson import FeatureCollection
from timeslider.schemas.table import FeatureTableSchema
from timeslider.utils.logging import get_logger

log = get_logger(__name__)

FIXED_COLUMNS = ("feature_index", "geometry_type", "timestamp", "datetime", "longitude", "latitude")

# Bounds of datetime64[ns]; older or later timestamps get NaT
MIN_DATETIME_MS = pd.Timestamp.min.value // 1_000_000 + 1
MAX_DATETIME_MS = pd.Timestamp.max.value // 1_000_000

TEXT_FORMATS = (".geojson", ".json", ".csv")
VECTOR_DRIVERS = {
    ".gpkg": "GPKG",
    ".fgb": "FlatGeobuf",
}


def _sanitize_for_json(obj: Any) -> Any:
    """
    Recursively sanitize data for JSON serialization.

    Replaces NaN/Infinity with None (becomes null in JSON).
    """
    if isinstance(obj, float):
        if math.isnan(obj) or math.isinf(obj):
            return None
        return obj
    if isinstance(obj, dict):
        return {k: _sanitize_for_json(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_sanitize_for_json(item) for item in obj]
    return obj


def _anchor(geometry: BaseGeometry) -> tuple[float, float]:
    """Representative (lon, lat) of a geometry; lines use their midpoint."""
    if geometry.geom_type == "Point":
        point = geometry
    elif geometry.geom_type == "LineString":
        point = geometry.interpolate(0.5, normalized=True)
    elif geometry.is_valid:
        point = geometry.representative_point()
    else:
        point = geometry.centroid
    return point.x, point.y


def collection_to_frame(collection: FeatureCollection) -> pd.DataFrame:
    """
    Flatten a FeatureCollection into one row per feature.

    Fixed columns come first (feature_index, geometry_type, timestamp,
    datetime, longitude, latitude), followed by the feature properties.
    A property whose name clashes with a fixed column is prefixed with
    "properties.".

    Args:
        collection: A validated FeatureCollection.

    Returns:
        DataFrame validated against FeatureTableSchema.
    """
    rows = []
    for index, feature in enumerate(collection.get("features") or []):
        geometry = shape(feature["geometry"])
        lon, lat = _anchor(geometry)
        properties = feature.get("properties") or {}

        row: dict[str, Any] = {
            "feature_index": index,
            "geometry_type": geometry.geom_type,
            "timestamp": coerce_epoch_ms(properties.get("timestamp")),
            "longitude": lon,
            "latitude": lat,
        }
        for key, value in properties.items():
            if key == "timestamp":
                continue
            column = f"properties.{key}" if key in FIXED_COLUMNS else key
            row[column] = value
        rows.append(row)

    df = pd.DataFrame(rows)
    if df.empty:
        df = pd.DataFrame(columns=list(FIXED_COLUMNS))

    df["timestamp"] = pd.array(df["timestamp"].tolist(), dtype="Int64")
    in_range = df["timestamp"].between(MIN_DATETIME_MS, MAX_DATETIME_MS).fillna(False)
    df["datetime"] = pd.to_datetime(df["timestamp"].where(in_range), unit="ms")
    properties_columns = [c for c in df.columns if c not in FIXED_COLUMNS]
    df = df[[*FIXED_COLUMNS, *properties_columns]]

    validated = FeatureTableSchema.validate(df)
    log.debug("Flattened collection", rows=len(validated), columns=len(validated.columns))
    return validated


def collection_to_geodataframe(collection: FeatureCollection) -> gpd.GeoDataFrame:
    """
    Build a GeoDataFrame (EPSG:4326) from a FeatureCollection.

    Properties become columns; the timestamp stays in epoch milliseconds.
    """
    return gpd.GeoDataFrame.from_features(collection.get("features") or [], crs="EPSG:4326")


def write_collection(collection: FeatureCollection, path: Path) -> Path:
    """
    Write a FeatureCollection to disk, choosing the format by extension.

    Supported:
        .geojson / .json: GeoJSON text (NaN/Infinity written as null).
        .csv: the flattened table from collection_to_frame.
        .gpkg / .fgb: vector file via geopandas.

    Args:
        collection: FeatureCollection to write.
        path: Output path.

    Returns:
        The written path.

    Raises:
        ValueError: If the extension is not supported.
    """
    suffix = path.suffix.lower()
    if suffix not in (*TEXT_FORMATS, *VECTOR_DRIVERS):
        supported = ", ".join([*TEXT_FORMATS, *VECTOR_DRIVERS])
        msg = f"Unsupported output format '{suffix}'. Supported: {supported}"
        raise ValueError(msg)

    path.parent.mkdir(parents=True, exist_ok=True)
    if suffix in (".geojson", ".json"):
        with path.open("w", encoding="utf-8") as f:
            json.dump(_sanitize_for_json(collection), f, indent=2, allow_nan=False)
    elif suffix == ".csv":
        collection_to_frame(collection).to_csv(path, index=False)
    else:
        collection_to_geodataframe(collection).to_file(path, driver=VECTOR_DRIVERS[suffix])

    log.info(
        "Wrote collection",
        path=str(path),
        features=len(collection.get("features") or []),
        size_kb=round(path.stat().st_size / 1e3, 2),
    )
    return path
