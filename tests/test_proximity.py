import math

import numpy as np
import pytest

from fuelmap.models.domain import Station
from fuelmap.services.geoindex import ClusterOptions, build_station_index, nearby, nearest
from fuelmap.services.geospatial import EARTH_RADIUS_KM, haversine_km

ORIGIN = (-37.8136, 144.9631)


def _station(sid: str, lat, lon) -> Station:
    return Station(
        id=sid,
        name=f"Station {sid}",
        brand="7-Eleven",
        address=None,
        suburb=None,
        postcode=None,
        latitude=lat,
        longitude=lon,
        prices={"E10": 1.799},
    )


def _north_of_origin(km: float) -> float:
    return ORIGIN[0] + math.degrees(km / EARTH_RADIUS_KM)


@pytest.fixture(scope="module")
def scattered_index():
    rng = np.random.default_rng(11)
    stations = [
        _station(f"N{i}", float(lat), float(lon))
        for i, (lat, lon) in enumerate(
            zip(ORIGIN[0] + rng.uniform(-0.5, 0.5, 500), ORIGIN[1] + rng.uniform(-0.6, 0.6, 500))
        )
    ]
    return build_station_index(stations, ClusterOptions())


def test_radius_excludes_farther_station():
    stations = [
        _station("FAR", _north_of_origin(1.5), ORIGIN[1]),
        _station("NEAR", _north_of_origin(0.5), ORIGIN[1]),
    ]
    index = build_station_index(stations, ClusterOptions())

    results = nearby(index, *ORIGIN, 1.0)

    assert len(results) == 1
    assert results[0].station.id == "NEAR"
    assert results[0].distance_km == pytest.approx(0.5)
    assert results[0].station.station.prices == {"E10": 1.799}


def test_zero_radius_matches_exact_coordinates():
    index = build_station_index([_station("HERE", *ORIGIN), _station("NEAR", _north_of_origin(0.01), ORIGIN[1])])

    (result,) = index.nearby(*ORIGIN, 0.0)

    assert result.station.id == "HERE"
    assert result.distance_km == 0.0


def test_results_are_sorted_and_within_radius(scattered_index):
    results = scattered_index.nearby(*ORIGIN, 15.0)

    assert results
    distances = [result.distance_km for result in results]
    assert distances == sorted(distances)
    assert all(distance <= 15.0 for distance in distances)
    inside = {
        point.id
        for point in scattered_index.points
        if haversine_km(*ORIGIN, point.latitude, point.longitude) <= 15.0
    }
    assert {result.station.id for result in results} == inside


def test_index_strategy_matches_linear_scan(scattered_index):
    for lat, lon, radius in [(*ORIGIN, 5.0), (*ORIGIN, 25.0), (-38.1, 145.3, 12.5), (-37.5, 144.5, 0.0)]:
        scan = scattered_index.nearby(lat, lon, radius, strategy="scan")
        indexed = scattered_index.nearby(lat, lon, radius, strategy="index")
        assert [(r.station.id, r.distance_km) for r in indexed] == [(r.station.id, r.distance_km) for r in scan]


def test_index_strategy_across_the_antimeridian():
    stations = [_station("E", 0.0, 179.95), _station("W", 0.0, -179.9), _station("X", 0.0, 170.0)]
    index = build_station_index(stations)

    scan = index.nearby(0.0, 180.0, 20.0, strategy="scan")
    indexed = index.nearby(0.0, 180.0, 20.0, strategy="index")

    assert [r.station.id for r in scan] == ["E", "W"]
    assert [r.station.id for r in indexed] == ["E", "W"]


def test_limit_and_nearest(scattered_index):
    everything = scattered_index.nearby(*ORIGIN, 50.0)

    assert scattered_index.nearby(*ORIGIN, 50.0, limit=5) == everything[:5]
    closest = scattered_index.nearest(*ORIGIN, 3)
    assert [r.station.id for r in closest] == [r.station.id for r in everything[:3]]


def test_ties_keep_input_order():
    stations = [_station("B", *ORIGIN), _station("A", *ORIGIN)]
    index = build_station_index(stations)

    assert [r.station.id for r in index.nearby(*ORIGIN, 1.0)] == ["B", "A"]


def test_invalid_records_and_queries_yield_nothing():
    index = build_station_index([_station("BAD", None, 144.9), _station("OK", *ORIGIN)])

    assert [r.station.id for r in index.nearby(*ORIGIN, 100.0)] == ["OK"]
    assert index.nearby(float("nan"), 144.9, 10.0) == []
    assert index.nearby(*ORIGIN, -1.0) == []
    assert index.nearby(*ORIGIN, float("nan")) == []
    assert index.nearby(*ORIGIN, 10.0, limit=0) == []
    assert index.nearest(*ORIGIN, 0) == []
    assert build_station_index([]).nearby(*ORIGIN, 10.0) == []
