"""Map cluster endpoints."""

from __future__ import annotations

import math

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...schemas.stations import ExpansionZoomResponse, FeatureCollectionModel
from ...services.export import to_feature_collection
from ...services.geoindex import StationIndex
from ..dependencies import get_station_index

router = APIRouter(prefix="/clusters", tags=["clusters"])


def _parse_bbox(raw: str) -> tuple[float, float, float, float]:
    parts = [part.strip() for part in raw.split(",")]
    if len(parts) != 4:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="bbox must be 'west,south,east,north'.",
        )
    try:
        values = tuple(float(part) for part in parts)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid bbox: {raw}") from exc
    if not all(math.isfinite(value) for value in values):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid bbox: {raw}")
    return values


def _not_found(cluster_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Cluster {cluster_id} not found.",
    )


@router.get("", response_model=FeatureCollectionModel, status_code=status.HTTP_200_OK)
def get_clusters(
    bbox: str = Query(description="west,south,east,north in degrees"),
    zoom: float = Query(description="Map zoom level, floored and clamped to the indexed range"),
    index: StationIndex = Depends(get_station_index),
) -> dict:
    return to_feature_collection(index.query(_parse_bbox(bbox), zoom))


@router.get(
    "/{cluster_id}/expansion-zoom",
    response_model=ExpansionZoomResponse,
    status_code=status.HTTP_200_OK,
)
def get_expansion_zoom(cluster_id: int, index: StationIndex = Depends(get_station_index)) -> ExpansionZoomResponse:
    zoom = index.expansion_zoom(cluster_id)
    if zoom is None:
        raise _not_found(cluster_id)
    return ExpansionZoomResponse(cluster_id=cluster_id, expansion_zoom=zoom)


@router.get("/{cluster_id}/children", response_model=FeatureCollectionModel, status_code=status.HTTP_200_OK)
def get_children(cluster_id: int, index: StationIndex = Depends(get_station_index)) -> dict:
    children = index.children(cluster_id)
    if children is None:
        raise _not_found(cluster_id)
    return to_feature_collection(children)


@router.get("/{cluster_id}/leaves", response_model=FeatureCollectionModel, status_code=status.HTTP_200_OK)
def get_leaves(
    cluster_id: int,
    limit: int | None = Query(default=None, ge=1, le=10_000, description="Maximum number of stations"),
    offset: int = Query(default=0, ge=0),
    index: StationIndex = Depends(get_station_index),
) -> dict:
    leaves = index.leaves(cluster_id, limit=limit, offset=offset)
    if leaves is None:
        raise _not_found(cluster_id)
    return to_feature_collection(leaves)
