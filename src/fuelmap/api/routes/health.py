"""Health and index maintenance endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ...schemas.stations import IndexStatsResponse
from ...services.geoindex import StationIndex, StationIndexStore
from ..dependencies import get_index_store, get_station_index

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/index", response_model=IndexStatsResponse, status_code=status.HTTP_200_OK)
def health_index(index: StationIndex = Depends(get_station_index)) -> IndexStatsResponse:
    return IndexStatsResponse(**index.stats())


@router.post("/index/rebuild", response_model=IndexStatsResponse, status_code=status.HTTP_200_OK)
def rebuild_index(store: StationIndexStore = Depends(get_index_store)) -> IndexStatsResponse:
    """Reload the station file and swap in a freshly built index."""
    try:
        index = store.rebuild()
    except (FileNotFoundError, ValueError) as exc:
        logging.error(f"Station reload failed: {exc}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return IndexStatsResponse(**index.stats())
