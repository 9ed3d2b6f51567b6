import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from fuelmap.models.domain import Station
from fuelmap.services.geoindex import ClusterOptions, StationIndexStore, build_station_index


def _station(sid: str, lat: float, lon: float) -> Station:
    return Station(
        id=sid,
        name=f"Station {sid}",
        brand="Caltex",
        address=None,
        suburb=None,
        postcode=None,
        latitude=lat,
        longitude=lon,
    )


STATIONS = [_station("S1", -37.8136, 144.9631), _station("S2", -37.8140, 144.9635)]


def test_concurrent_first_reads_share_one_build():
    calls = []
    lock = threading.Lock()

    def slow_loader():
        with lock:
            calls.append(1)
        time.sleep(0.05)
        return STATIONS

    store = StationIndexStore(loader=slow_loader, options=ClusterOptions())
    with ThreadPoolExecutor(max_workers=8) as pool:
        handles = list(pool.map(lambda _: store.current, range(16)))

    assert len(calls) == 1
    assert all(handle is handles[0] for handle in handles)
    assert handles[0].station_count == 2


def test_unreadable_snapshot_serves_empty_index(caplog):
    def missing_loader():
        raise FileNotFoundError("Station file not found: stations.geojson")

    store = StationIndexStore(loader=missing_loader, options=ClusterOptions())

    with caplog.at_level(logging.WARNING):
        index = store.current

    assert index.station_count == 0
    assert store.current is index
    assert "Serving an empty station index" in caplog.text


def test_failed_rebuild_keeps_current_index():
    def broken_loader():
        raise ValueError("not a FeatureCollection")

    current = build_station_index(STATIONS, ClusterOptions())
    store = StationIndexStore(current, loader=broken_loader)

    with pytest.raises(ValueError):
        store.rebuild()

    assert store.current is current


def test_rebuild_uses_loader_and_swaps_handle():
    snapshots = [STATIONS, STATIONS[:1]]
    store = StationIndexStore(loader=lambda: snapshots.pop(0), options=ClusterOptions())
    first = store.current

    second = store.rebuild()

    assert first.station_count == 2
    assert second.station_count == 1
    assert store.current is second
    assert store.rebuild(STATIONS).station_count == 2
