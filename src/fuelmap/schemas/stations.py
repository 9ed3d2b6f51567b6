"""Station and cluster API schemas."""

from __future__ import annotations

from typing import Any, List

from pydantic import BaseModel


class NearbyStationModel(BaseModel):
    station_id: str
    name: str | None = None
    brand: str | None = None
    address: str | None = None
    suburb: str | None = None
    latitude: float
    longitude: float
    distance_km: float
    prices: dict[str, float] = {}


class NearbyStationsResponse(BaseModel):
    items: List[NearbyStationModel]
    count: int
    radius_km: float


class ExpansionZoomResponse(BaseModel):
    cluster_id: int
    expansion_zoom: int


class FeatureCollectionModel(BaseModel):
    type: str = "FeatureCollection"
    features: List[dict[str, Any]]


class IndexStatsResponse(BaseModel):
    stations: int
    skipped: int
    clusters: int
    min_zoom: int
    max_zoom: int
    features_per_zoom: dict[int, int]
