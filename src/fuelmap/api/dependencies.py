"""Request-scoped access to the station index."""

from __future__ import annotations

from fastapi import Request

from ..services.geoindex import StationIndex, StationIndexStore


def get_index_store(request: Request) -> StationIndexStore:
    return request.app.state.stations


def get_station_index(request: Request) -> StationIndex:
    # one handle per request, even if a rebuild swaps the store meanwhile
    return get_index_store(request).current
