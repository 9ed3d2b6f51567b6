"""Conversion of raw station records into indexable point features."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Iterable

from ...models.domain import StationPoint
from ..geospatial import coerce_coordinate, is_valid_coordinate, lat_y, lng_x

logger = logging.getLogger(__name__)

_FIELD_ALIASES = {
    "latitude": ("latitude", "lat"),
    "longitude": ("longitude", "lng", "lon"),
}


def _read(record: Any, name: str) -> Any:
    names = _FIELD_ALIASES.get(name, (name,))
    if isinstance(record, Mapping):
        for key in names:
            if record.get(key) is not None:
                return record[key]
        return None
    for key in names:
        value = getattr(record, key, None)
        if value is not None:
            return value
    return None


def build_point_features(records: Iterable[Any]) -> tuple[tuple[StationPoint, ...], int]:
    """Validate station records and project them into point features.

    Records may be objects or mappings exposing ``id``, ``latitude`` and
    ``longitude``. Records with missing, non-numeric, non-finite or out of
    range coordinates are dropped. Returns the points in input order together
    with the number of skipped records.
    """

    points: list[StationPoint] = []
    skipped = 0
    for position, record in enumerate(records):
        lat = coerce_coordinate(_read(record, "latitude"))
        lon = coerce_coordinate(_read(record, "longitude"))
        if not is_valid_coordinate(lat, lon):
            skipped += 1
            continue
        station_id = _read(record, "id")
        points.append(
            StationPoint(
                id=station_id if station_id is not None else position,
                latitude=lat,
                longitude=lon,
                x=lng_x(lon),
                y=lat_y(lat),
                station=record,
            )
        )

    if skipped:
        logger.warning(f"Skipped {skipped} station records with missing or invalid coordinates")
    return tuple(points), skipped
