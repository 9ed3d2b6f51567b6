"""Station proximity endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from ...config import settings
from ...schemas.stations import NearbyStationModel, NearbyStationsResponse
from ...services.export import station_properties
from ...services.geoindex import StationIndex
from ..dependencies import get_station_index

router = APIRouter(prefix="/stations", tags=["stations"])


@router.get("/nearby", response_model=NearbyStationsResponse, status_code=status.HTTP_200_OK)
def get_nearby_stations(
    lat: float = Query(ge=-90, le=90, description="Latitude of the search centre"),
    lon: float = Query(ge=-180, le=180, description="Longitude of the search centre"),
    radius_km: float | None = Query(default=None, ge=0, description="Search radius in kilometres"),
    limit: int | None = Query(default=None, ge=1, le=1000),
    index: StationIndex = Depends(get_station_index),
) -> NearbyStationsResponse:
    radius = settings.nearby_default_radius_km if radius_km is None else radius_km
    radius = min(radius, settings.nearby_max_radius_km)

    results = index.nearby(lat, lon, radius, limit=limit, strategy=settings.nearby_strategy)
    items = []
    for result in results:
        properties = station_properties(result.station)
        items.append(
            NearbyStationModel(
                station_id=str(result.station.id),
                name=properties.get("name"),
                brand=properties.get("brand"),
                address=properties.get("address"),
                suburb=properties.get("suburb"),
                latitude=result.station.latitude,
                longitude=result.station.longitude,
                distance_km=round(result.distance_km, 3),
                prices=properties.get("prices") or {},
            )
        )
    return NearbyStationsResponse(items=items, count=len(items), radius_km=radius)
