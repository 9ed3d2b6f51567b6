"""Data access helpers for loading the station snapshot."""

from __future__ import annotations

import csv
import functools
import json
import logging
from pathlib import Path
from typing import Any, Optional

from ..config import settings
from ..models.domain import Station

_BRAND_ALIASES = (
    (("7-ELEVEN", "7 ELEVEN"), "7-Eleven"),
    (("BP",), "BP"),
    (("SHELL",), "Shell"),
    (("CALTEX",), "Caltex"),
    (("AMPOL",), "Ampol"),
    (("MOBIL",), "Mobil"),
    (("UNITED",), "United"),
)

PRICE_COLUMN_PREFIX = "price_"


def normalize_brand(owner: Optional[str]) -> Optional[str]:
    """Map a registered station owner onto the brand shown in the directory."""

    if not owner:
        return None
    upper = owner.upper()
    for needles, brand in _BRAND_ALIASES:
        if any(needle in upper for needle in needles):
            return brand
    return owner.strip()


def _coerce_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).replace(",", ""))
    except ValueError:
        return None


def _text(*values: Any) -> Optional[str]:
    for value in values:
        if value is not None and str(value).strip():
            return str(value).strip()
    return None


def _parse_prices(values: Any) -> dict[str, float]:
    prices: dict[str, float] = {}
    if not isinstance(values, dict):
        return prices
    for fuel, value in values.items():
        price = _coerce_float(value)
        if price is not None:
            prices[str(fuel)] = price
    return prices


def _station_from_feature(feature: dict, position: int) -> Station:
    props = feature.get("properties") or {}
    coords = (feature.get("geometry") or {}).get("coordinates") or []
    # GeoJSON positions are [lng, lat]
    longitude = _coerce_float(coords[0]) if len(coords) > 0 else None
    latitude = _coerce_float(coords[1]) if len(coords) > 1 else None
    owner = _text(props.get("brand"), props.get("station_owner"))
    return Station(
        id=_text(props.get("id"), props.get("objectid"), feature.get("id")) or str(position + 1),
        name=_text(props.get("name"), props.get("station_name")) or "Unknown Station",
        brand=normalize_brand(owner),
        address=_text(props.get("address"), props.get("station_address"), props.get("gnaf_formatted_address")),
        suburb=_text(props.get("suburb"), props.get("station_suburb"), props.get("gnaf_suburb")),
        postcode=_text(props.get("postcode"), props.get("station_postcode"), props.get("gnaf_postcode")),
        latitude=latitude,
        longitude=longitude,
        prices=_parse_prices(props.get("prices")),
        raw=props,
    )


def _station_from_row(row: dict, position: int) -> Station:
    prices = {
        key[len(PRICE_COLUMN_PREFIX):]: value
        for key, value in row.items()
        if key and key.lower().startswith(PRICE_COLUMN_PREFIX)
    }
    return Station(
        id=_text(row.get("id"), row.get("Id"), row.get("objectid")) or str(position + 1),
        name=_text(row.get("name"), row.get("Name"), row.get("station_name")) or "Unknown Station",
        brand=normalize_brand(_text(row.get("brand"), row.get("Brand"), row.get("station_owner"))),
        address=_text(row.get("address"), row.get("Address")),
        suburb=_text(row.get("suburb"), row.get("Suburb")),
        postcode=_text(row.get("postcode"), row.get("Postcode")),
        latitude=_coerce_float(row.get("latitude") or row.get("Latitude") or row.get("lat")),
        longitude=_coerce_float(row.get("longitude") or row.get("Longitude") or row.get("lng")),
        prices=_parse_prices(prices),
        raw=row,
    )


def _load_geojson(path: Path) -> list[Station]:
    with path.open(mode="r", encoding="utf-8") as handle:
        payload = json.load(handle)
    features = payload.get("features") if isinstance(payload, dict) else None
    if not isinstance(features, list):
        raise ValueError(f"Station file '{path}' is not a GeoJSON FeatureCollection.")
    return [_station_from_feature(feature, position) for position, feature in enumerate(features)]


def _load_csv(path: Path) -> list[Station]:
    with path.open(mode="r", encoding="utf-8-sig", newline="") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            raise ValueError(f"Station file '{path}' is missing a header row.")
        return [_station_from_row(row, position) for position, row in enumerate(reader)]


@functools.lru_cache(maxsize=1)
def load_stations(source: Optional[Path] = None) -> tuple[Station, ...]:
    """Load the station snapshot from the configured GeoJSON or CSV file.

    Records without usable coordinates are kept; the index builder decides
    what to skip and reports the count.
    """

    path = source or settings.station_file
    if not path.exists():
        raise FileNotFoundError(f"Station file not found: {path}")

    if path.suffix.lower() == ".csv":
        stations = _load_csv(path)
    else:
        stations = _load_geojson(path)
    logging.info(f"Loaded {len(stations)} stations from {path.name}")
    return tuple(stations)


def reload_stations(source: Optional[Path] = None) -> tuple[Station, ...]:
    """Drop the cached snapshot and read the station file again."""

    load_stations.cache_clear()
    return load_stations(source)
