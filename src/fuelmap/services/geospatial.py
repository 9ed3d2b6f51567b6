"""Geospatial helper functions: projection, validation and great-circle distance."""

from __future__ import annotations

import math
from typing import Any

import numpy as np

EARTH_RADIUS_KM = 6371.0


def lng_x(lon: float) -> float:
    """Project a longitude onto the normalized [0, 1] x axis."""

    return lon / 360.0 + 0.5


def lat_y(lat: float) -> float:
    """Project a latitude onto the normalized [0, 1] Web Mercator y axis.

    The y axis grows southwards. Values are clamped so latitudes beyond the
    Mercator limit (about 85.05 degrees) and the poles themselves stay finite.
    """

    sin = math.sin(math.radians(lat))
    if sin >= 1.0:
        return 0.0
    if sin <= -1.0:
        return 1.0
    y = 0.5 - 0.25 * math.log((1 + sin) / (1 - sin)) / math.pi
    return min(max(y, 0.0), 1.0)


def x_lng(x: float) -> float:
    return (x - 0.5) * 360.0


def y_lat(y: float) -> float:
    y2 = math.radians(180.0 - y * 360.0)
    return 360.0 * math.atan(math.exp(y2)) / math.pi - 90.0


def coerce_coordinate(value: Any) -> float | None:
    """Return ``value`` as a float, or None when it is not a usable number."""

    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def is_valid_coordinate(lat: Any, lon: Any) -> bool:
    """True when both values are finite numbers inside the geographic ranges."""

    lat_value = coerce_coordinate(lat)
    lon_value = coerce_coordinate(lon)
    if lat_value is None or lon_value is None:
        return False
    return -90.0 <= lat_value <= 90.0 and -180.0 <= lon_value <= 180.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def haversine_km_array(lat: float, lon: float, lats: np.ndarray, lons: np.ndarray) -> np.ndarray:
    """Vectorised :func:`haversine_km` from one point to many."""

    phi1 = np.radians(lat)
    phi2 = np.radians(lats)
    d_phi = np.radians(lats - lat)
    d_lambda = np.radians(lons - lon)

    a = np.sin(d_phi / 2) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin(d_lambda / 2) ** 2
    # rounding can push ``a`` a hair past 1 for antipodal points
    a = np.clip(a, 0.0, 1.0)
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def bounding_box_km(lat: float, lon: float, radius_km: float) -> tuple[float, float, float, float] | None:
    """Return ``(west, south, east, north)`` enclosing a circle on the sphere.

    Uses the bounding-coordinates method. ``None`` means the circle touches a
    pole, in which case no longitude window encloses it. ``west`` may be
    greater than ``east`` when the box crosses the antimeridian.
    """

    angular = radius_km / EARTH_RADIUS_KM
    if angular >= math.pi:
        return None
    lat_rad = math.radians(lat)
    south = lat_rad - angular
    north = lat_rad + angular
    if south <= -math.pi / 2 or north >= math.pi / 2:
        return None

    delta_lon = math.asin(min(math.sin(angular) / math.cos(lat_rad), 1.0))
    west = math.degrees(math.radians(lon) - delta_lon)
    east = math.degrees(math.radians(lon) + delta_lon)
    if west < -180.0:
        west += 360.0
    if east > 180.0:
        east -= 360.0
    return west, math.degrees(south), east, math.degrees(north)
