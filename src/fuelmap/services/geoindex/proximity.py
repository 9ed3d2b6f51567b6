"""Great-circle proximity search over validated station points."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Literal, Sequence

import numpy as np

from ...models.domain import NearbyResult, StationPoint
from ..geospatial import bounding_box_km, haversine_km_array, is_valid_coordinate, lat_y, lng_x
from .zoom_index import ZoomIndex

if TYPE_CHECKING:
    from .index import StationIndex

Strategy = Literal["scan", "index"]


class ProximitySearch:
    """Answer "stations near P" queries, nearest first.

    Two strategies return identical results. ``scan`` computes the distance
    to every station. ``index`` first range-queries the finest zoom index with
    the bounding box of the search circle and only measures the candidates.
    Ties on distance keep input order.
    """

    def __init__(self, points: Sequence[StationPoint], point_index: ZoomIndex | None = None) -> None:
        self._points = tuple(points)
        self._lats = np.array([point.latitude for point in self._points], dtype=float)
        self._lons = np.array([point.longitude for point in self._points], dtype=float)
        self._point_index = point_index

    def __len__(self) -> int:
        return len(self._points)

    def nearby(
        self,
        latitude: float,
        longitude: float,
        radius_km: float,
        *,
        limit: int | None = None,
        strategy: Strategy = "scan",
    ) -> list[NearbyResult]:
        if not self._points or not is_valid_coordinate(latitude, longitude):
            return []
        if not isinstance(radius_km, (int, float)) or math.isnan(radius_km) or radius_km < 0:
            return []
        if limit is not None and limit <= 0:
            return []

        if strategy == "index":
            candidates = self._candidates(latitude, longitude, radius_km)
        else:
            candidates = np.arange(len(self._points))
        if candidates.size == 0:
            return []

        distances = haversine_km_array(latitude, longitude, self._lats[candidates], self._lons[candidates])
        keep = distances <= radius_km
        return self._ranked(candidates[keep], distances[keep], limit)

    def nearest(self, latitude: float, longitude: float, count: int) -> list[NearbyResult]:
        if not self._points or count <= 0 or not is_valid_coordinate(latitude, longitude):
            return []
        distances = haversine_km_array(latitude, longitude, self._lats, self._lons)
        return self._ranked(np.arange(len(self._points)), distances, count)

    def _ranked(self, positions: np.ndarray, distances: np.ndarray, limit: int | None) -> list[NearbyResult]:
        order = np.argsort(distances, kind="stable")
        if limit is not None:
            order = order[:limit]
        return [
            NearbyResult(station=self._points[int(positions[i])], distance_km=float(distances[i]))
            for i in order
        ]

    def _candidates(self, latitude: float, longitude: float, radius_km: float) -> np.ndarray:
        """Positions inside the search circle's bounding box, ascending."""

        box = bounding_box_km(latitude, longitude, radius_km)
        if box is None or self._point_index is None:
            return np.arange(len(self._points))

        # widen slightly so points on the box edge survive float rounding
        pad = 1e-9
        west, south, east, north = box
        min_y = lat_y(north + pad)
        max_y = lat_y(south - pad)
        west, east = west - pad, east + pad
        if west <= east:
            spans = [(west, east)]
            # -180 and 180 are the same meridian
            if west <= -180.0:
                spans.append((west + 360.0, 180.0))
            if east >= 180.0:
                spans.append((-180.0, east - 360.0))
        else:
            spans = [(west, 180.0), (-180.0, east)]

        found = [
            self._point_index.range(lng_x(lo), min_y, lng_x(hi), max_y) for lo, hi in spans
        ]
        return np.unique(np.concatenate(found))


def nearby(
    index: "StationIndex",
    latitude: float,
    longitude: float,
    radius_km: float,
    limit: int | None = None,
    strategy: Strategy = "scan",
) -> list[NearbyResult]:
    """Stations within ``radius_km`` of the query point, nearest first."""

    return index.proximity.nearby(latitude, longitude, radius_km, limit=limit, strategy=strategy)


def nearest(index: "StationIndex", latitude: float, longitude: float, count: int) -> list[NearbyResult]:
    """The ``count`` stations closest to the query point, regardless of distance."""

    return index.proximity.nearest(latitude, longitude, count)
