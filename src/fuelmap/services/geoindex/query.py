"""Bounding-box queries against the prebuilt zoom levels."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Sequence

from ...models.domain import QueryResult, to_query_result
from ..geospatial import lat_y, lng_x

if TYPE_CHECKING:
    from .index import StationIndex

BBox = tuple[float, float, float, float]


def _wrap_lng(lng: float) -> float:
    return (lng + 180.0) % 360.0 - 180.0


def split_bbox(bbox: Sequence[float]) -> list[BBox]:
    """Normalise ``[west, south, east, north]`` into non-wrapping boxes.

    Longitudes are wrapped into [-180, 180) with an east edge of exactly 180
    kept, latitudes are clamped. A box crossing the antimeridian is split in
    two, the part ending at 180 first. Malformed input yields no boxes.
    """

    try:
        west, south, east, north = (float(value) for value in bbox)
    except (TypeError, ValueError):
        return []
    if not all(math.isfinite(value) for value in (west, south, east, north)):
        return []

    south = min(max(south, -90.0), 90.0)
    north = min(max(north, -90.0), 90.0)
    if east - west >= 360.0:
        return [(-180.0, south, 180.0, north)]

    min_lng = _wrap_lng(west)
    max_lng = 180.0 if east == 180.0 else _wrap_lng(east)
    if min_lng > max_lng:
        return [(min_lng, south, 180.0, north), (-180.0, south, max_lng, north)]
    return [(min_lng, south, max_lng, north)]


def query_clusters(index: "StationIndex", bbox: Sequence[float], zoom: float) -> list[QueryResult]:
    """Clusters and stations visible inside ``bbox`` at ``zoom``.

    ``zoom`` is floored and clamped into the index's zoom range. Each feature
    of that level appears at most once, in index order.
    """

    level = index.level(zoom)
    results: list[QueryResult] = []
    for west, south, east, north in split_bbox(bbox):
        positions = level.range(lng_x(west), lat_y(north), lng_x(east), lat_y(south))
        results.extend(to_query_result(level.features[int(position)]) for position in positions)
    return results
