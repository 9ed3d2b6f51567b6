"""GeoJSON serialisation of cluster and station results for map clients."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any, Dict, Iterable, List

from ...models.domain import ClusterResult, QueryResult, Station, StationPoint


def abbreviate_count(count: int) -> str | int:
    """Short marker label for a cluster size: 12, 3.4k, 27k."""
    if count >= 10000:
        return f"{round(count / 1000)}k"
    if count >= 1000:
        return f"{round(count / 100) / 10}k"
    return count


def station_properties(point: StationPoint) -> Dict[str, Any]:
    """Public properties of the record behind a station point."""

    record = point.station
    if isinstance(record, Station):
        properties = {
            f.name: getattr(record, f.name)
            for f in dataclasses.fields(record)
            if f.name not in ("raw", "latitude", "longitude")
        }
    elif isinstance(record, Mapping):
        properties = {
            key: value
            for key, value in record.items()
            if key not in ("latitude", "longitude", "lat", "lng", "lon")
        }
    else:
        properties = {}
    properties["id"] = point.id
    return properties


def _point_geometry(latitude: float, longitude: float) -> Dict[str, Any]:
    return {"type": "Point", "coordinates": [longitude, latitude]}


def cluster_to_feature(result: ClusterResult) -> Dict[str, Any]:
    return {
        "type": "Feature",
        "id": result.id,
        "properties": {
            "cluster": True,
            "cluster_id": result.id,
            "point_count": result.count,
            "point_count_abbreviated": abbreviate_count(result.count),
        },
        "geometry": _point_geometry(result.latitude, result.longitude),
    }


def station_to_feature(point: StationPoint) -> Dict[str, Any]:
    properties = station_properties(point)
    properties["cluster"] = False
    return {
        "type": "Feature",
        "id": point.id,
        "properties": properties,
        "geometry": _point_geometry(point.latitude, point.longitude),
    }


def result_to_feature(result: QueryResult) -> Dict[str, Any]:
    if result.is_cluster:
        return cluster_to_feature(result)
    return station_to_feature(result.station)


def to_feature_collection(results: Iterable[QueryResult | StationPoint]) -> Dict[str, Any]:
    """Wrap query results or bare station points in a FeatureCollection."""

    features: List[Dict[str, Any]] = []
    for item in results:
        if isinstance(item, StationPoint):
            features.append(station_to_feature(item))
        else:
            features.append(result_to_feature(item))
    return {"type": "FeatureCollection", "features": features}
