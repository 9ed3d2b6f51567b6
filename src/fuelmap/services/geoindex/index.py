"""The built station index: an explicit, read-only handle passed to every query."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Sequence

from ...models.domain import ClusterNode, NearbyResult, QueryResult, StationPoint
from .base import ClusterOptions
from .expansion import cluster_children, cluster_leaves, expansion_zoom
from .proximity import ProximitySearch, Strategy
from .query import query_clusters
from .zoom_index import ZoomIndex


@dataclass(frozen=True)
class StationIndex:
    """Result of one build over a station snapshot.

    Cluster ids are only meaningful for the handle that produced them; a
    rebuild yields a new handle with new ids.
    """

    options: ClusterOptions
    levels: Mapping[int, ZoomIndex]
    clusters: Mapping[int, ClusterNode]
    points: tuple[StationPoint, ...]
    skipped: int
    proximity: ProximitySearch = field(repr=False)

    @property
    def station_count(self) -> int:
        return len(self.points)

    def level(self, zoom: float) -> ZoomIndex:
        """The zoom level ``zoom`` falls on, floored and clamped into range."""
        return self.levels[self.options.clamp_zoom(zoom)]

    def query(self, bbox: Sequence[float], zoom: float) -> list[QueryResult]:
        return query_clusters(self, bbox, zoom)

    def expansion_zoom(self, cluster_id: int) -> int | None:
        return expansion_zoom(self, cluster_id)

    def children(self, cluster_id: int) -> list[QueryResult] | None:
        return cluster_children(self, cluster_id)

    def leaves(self, cluster_id: int, limit: int | None = None, offset: int = 0) -> list[StationPoint] | None:
        return cluster_leaves(self, cluster_id, limit=limit, offset=offset)

    def nearby(
        self,
        latitude: float,
        longitude: float,
        radius_km: float,
        limit: int | None = None,
        strategy: Strategy = "scan",
    ) -> list[NearbyResult]:
        return self.proximity.nearby(latitude, longitude, radius_km, limit=limit, strategy=strategy)

    def nearest(self, latitude: float, longitude: float, count: int) -> list[NearbyResult]:
        return self.proximity.nearest(latitude, longitude, count)

    def stats(self) -> dict:
        return {
            "stations": self.station_count,
            "skipped": self.skipped,
            "clusters": len(self.clusters),
            "min_zoom": self.options.min_zoom,
            "max_zoom": self.options.max_zoom,
            "features_per_zoom": {zoom: len(level) for zoom, level in sorted(self.levels.items())},
        }
