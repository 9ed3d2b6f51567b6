"""Export services."""

from .geojson import (
    abbreviate_count,
    result_to_feature,
    station_properties,
    to_feature_collection,
)

__all__ = [
    "abbreviate_count",
    "result_to_feature",
    "station_properties",
    "to_feature_collection",
]
