import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from fuelmap.config import settings
from fuelmap.data.stations_repository import load_stations, reload_stations
from fuelmap.main import create_app
from fuelmap.models.domain import Station
from fuelmap.services.geoindex import ClusterOptions, StationIndexStore, build_station_index


def _station(sid: str, lat: float, lon: float, brand: str = "BP") -> Station:
    return Station(
        id=sid,
        name=f"Station {sid}",
        brand=brand,
        address=f"{sid} Collins St",
        suburb="Melbourne",
        postcode="3000",
        latitude=lat,
        longitude=lon,
        prices={"Unleaded": 1.899},
    )


STATIONS = [
    _station("S1", -37.8136, 144.9631),
    _station("S2", -37.8140, 144.9635),
    _station("S3", -37.9000, 145.1000),
]


@pytest.fixture(autouse=True)
def clear_station_cache():
    load_stations.cache_clear()
    yield
    load_stations.cache_clear()


@pytest.fixture
def store() -> StationIndexStore:
    return StationIndexStore(build_station_index(STATIONS, ClusterOptions()), loader=reload_stations)


@pytest.fixture
def api_client(store: StationIndexStore) -> TestClient:
    return TestClient(create_app(store))


def test_health(api_client: TestClient):
    response = api_client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_index_stats(api_client: TestClient):
    payload = api_client.get("/api/health/index").json()

    assert payload["stations"] == 3
    assert payload["skipped"] == 0
    assert payload["clusters"] == 2
    assert payload["features_per_zoom"]["14"] == 3


def test_clusters_endpoint_returns_geojson(api_client: TestClient):
    response = api_client.get("/api/clusters", params={"bbox": "144.94,-37.83,144.99,-37.80", "zoom": 10})

    assert response.status_code == 200
    payload = response.json()
    assert payload["type"] == "FeatureCollection"
    (feature,) = payload["features"]
    assert feature["properties"]["cluster"] is True
    assert feature["properties"]["point_count"] == 2
    assert feature["properties"]["point_count_abbreviated"] == 2
    assert feature["properties"]["cluster_id"] == feature["id"]
    lon, lat = feature["geometry"]["coordinates"]
    assert lat == pytest.approx(-37.8138, abs=1e-4)


def test_clusters_endpoint_points_at_max_zoom(api_client: TestClient):
    payload = api_client.get("/api/clusters", params={"bbox": "144.94,-37.83,144.99,-37.80", "zoom": 14}).json()

    ids = [feature["id"] for feature in payload["features"]]
    assert ids == ["S1", "S2"]
    properties = payload["features"][0]["properties"]
    assert properties["cluster"] is False
    assert properties["brand"] == "BP"
    assert properties["prices"] == {"Unleaded": 1.899}
    assert "raw" not in properties


@pytest.mark.parametrize("requested, effective", [("-1", "0"), ("31", "14"), ("10.5", "10"), ("13.99", "13")])
def test_clusters_endpoint_clamps_and_floors_zoom(api_client: TestClient, requested: str, effective: str):
    bbox = "144.0,-38.5,146.0,-37.0"

    response = api_client.get("/api/clusters", params={"bbox": bbox, "zoom": requested})
    expected = api_client.get("/api/clusters", params={"bbox": bbox, "zoom": effective})

    assert response.status_code == 200
    assert response.json() == expected.json()


@pytest.mark.parametrize("bbox", ["1,2,3", "a,b,c,d", "0,0,nan,1"])
def test_clusters_endpoint_rejects_malformed_bbox(api_client: TestClient, bbox: str):
    response = api_client.get("/api/clusters", params={"bbox": bbox, "zoom": 3})

    assert response.status_code == 400


def test_expansion_children_and_leaves(api_client: TestClient, store: StationIndexStore):
    cluster_id = store.current.levels[10].features[0].id

    expansion = api_client.get(f"/api/clusters/{cluster_id}/expansion-zoom").json()
    children = api_client.get(f"/api/clusters/{cluster_id}/children").json()
    leaves = api_client.get(f"/api/clusters/{cluster_id}/leaves", params={"limit": 1}).json()

    assert expansion == {"cluster_id": cluster_id, "expansion_zoom": 14}
    assert [feature["id"] for feature in children["features"]] == ["S1", "S2"]
    assert [feature["id"] for feature in leaves["features"]] == ["S1"]


@pytest.mark.parametrize("suffix", ["expansion-zoom", "children", "leaves"])
def test_unknown_cluster_is_not_found(api_client: TestClient, suffix: str):
    response = api_client.get(f"/api/clusters/9999/{suffix}")

    assert response.status_code == 404


def test_nearby_endpoint(api_client: TestClient):
    response = api_client.get("/api/stations/nearby", params={"lat": -37.8136, "lon": 144.9631, "radius_km": 1})

    assert response.status_code == 200
    payload = response.json()
    assert payload["count"] == 2
    assert payload["radius_km"] == 1
    assert [item["station_id"] for item in payload["items"]] == ["S1", "S2"]
    assert payload["items"][0]["distance_km"] == 0.0
    assert payload["items"][1]["distance_km"] > 0.0
    assert payload["items"][0]["prices"] == {"Unleaded": 1.899}


def test_nearby_endpoint_uses_default_radius(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(settings, "nearby_default_radius_km", 30.0)

    payload = api_client.get("/api/stations/nearby", params={"lat": -37.8136, "lon": 144.9631}).json()

    assert payload["count"] == 3
    assert payload["radius_km"] == 30.0


def test_nearby_endpoint_validates_coordinates(api_client: TestClient):
    response = api_client.get("/api/stations/nearby", params={"lat": 123, "lon": 144.9})

    assert response.status_code == 422


def test_rebuild_swaps_index(api_client: TestClient, store: StationIndexStore, tmp_path: Path, monkeypatch):
    path = tmp_path / "stations.geojson"
    path.write_text(
        json.dumps(
            {
                "type": "FeatureCollection",
                "features": [
                    {
                        "type": "Feature",
                        "properties": {"objectid": 1, "station_name": "Only One"},
                        "geometry": {"type": "Point", "coordinates": [144.96, -37.81]},
                    }
                ],
            }
        ),
        encoding="utf-8",
    )
    monkeypatch.setattr(settings, "station_file", path)
    before = store.current

    response = api_client.post("/api/index/rebuild")

    assert response.status_code == 200
    assert response.json()["stations"] == 1
    assert store.current is not before
    assert before.station_count == 3


def test_rebuild_reports_missing_file(api_client: TestClient, tmp_path: Path, monkeypatch):
    monkeypatch.setattr(settings, "station_file", tmp_path / "missing.geojson")

    response = api_client.post("/api/index/rebuild")

    assert response.status_code == 503


def test_lazy_store_serves_empty_index_without_station_file(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(settings, "station_file", tmp_path / "missing.geojson")
    client = TestClient(create_app())

    payload = client.get("/api/clusters", params={"bbox": "-180,-90,180,90", "zoom": 0}).json()

    assert payload["features"] == []
