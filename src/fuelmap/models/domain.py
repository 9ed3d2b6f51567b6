"""Domain models for stations and the clustered map index."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from ..services.geospatial import x_lng, y_lat


@dataclass(slots=True)
class Station:
    """Represents a fuel retail location with its current price board."""

    id: str
    name: str
    brand: Optional[str]
    address: Optional[str]
    suburb: Optional[str]
    postcode: Optional[str]
    latitude: Optional[float]
    longitude: Optional[float]
    prices: dict[str, float] = field(default_factory=dict)
    raw: dict = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class StationPoint:
    """A validated station position, the leaf of every cluster hierarchy."""

    id: Any
    latitude: float
    longitude: float
    x: float
    y: float
    station: Any = field(compare=False, repr=False)
    is_cluster: bool = field(default=False, init=False)

    @property
    def count(self) -> int:
        return 1


@dataclass(frozen=True, slots=True)
class ClusterNode:
    """Several features of the next finer zoom level merged into one marker.

    ``x``/``y`` are the count-weighted centroid in projected space and
    ``zoom`` is the level the cluster was formed at.
    """

    id: int
    zoom: int
    x: float
    y: float
    count: int
    children: tuple["Feature", ...] = field(repr=False)
    is_cluster: bool = field(default=True, init=False)

    @property
    def latitude(self) -> float:
        return y_lat(self.y)

    @property
    def longitude(self) -> float:
        return x_lng(self.x)

    @property
    def child_ids(self) -> tuple[Any, ...]:
        return tuple(child.id for child in self.children)


Feature = Union[StationPoint, ClusterNode]


@dataclass(frozen=True, slots=True)
class ClusterResult:
    id: int
    latitude: float
    longitude: float
    count: int
    is_cluster: bool = field(default=True, init=False)


@dataclass(frozen=True, slots=True)
class PointResult:
    station: StationPoint
    is_cluster: bool = field(default=False, init=False)


QueryResult = Union[ClusterResult, PointResult]


@dataclass(frozen=True, slots=True)
class NearbyResult:
    station: StationPoint
    distance_km: float


def to_query_result(feature: Feature) -> QueryResult:
    if feature.is_cluster:
        return ClusterResult(
            id=feature.id,
            latitude=feature.latitude,
            longitude=feature.longitude,
            count=feature.count,
        )
    return PointResult(station=feature)
