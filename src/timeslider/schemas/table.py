"""
Pandera schema for the flattened feature table.

One row per feature, used when a collection is exported for analysis.
"""

import pandas as pd
import pandera.pandas as pa
from pandera.typing import Series

GEOMETRY_TYPES = [
    "Point",
    "LineString",
    "Polygon",
    "MultiPoint",
    "MultiLineString",
    "MultiPolygon",
    "GeometryCollection",
]


class FeatureTableSchema(pa.DataFrameModel):
    """
    Schema for a flattened FeatureCollection.

    Property columns are carried alongside; only the fixed columns are
    checked.
    """

    feature_index: Series[int] = pa.Field(
        ge=0,
        unique=True,
        description="Position of the feature in the collection",
    )
    geometry_type: Series[str] = pa.Field(
        isin=GEOMETRY_TYPES,
        description="GeoJSON geometry type",
    )
    timestamp: Series[pd.Int64Dtype] = pa.Field(
        nullable=True,
        description="Epoch milliseconds",
    )
    datetime: Series[pa.DateTime] = pa.Field(
        nullable=True,
        description="Timestamp as naive UTC datetime (NaT outside pandas range)",
    )
    longitude: Series[float] = pa.Field(
        ge=-180.0,
        le=180.0,
        description="Representative point longitude in WGS84",
    )
    latitude: Series[float] = pa.Field(
        ge=-90.0,
        le=90.0,
        description="Representative point latitude in WGS84",
    )

    class Config:
        """Schema configuration."""

        name = "FeatureTableSchema"
        strict = False  # Property columns vary per dataset
        coerce = True
