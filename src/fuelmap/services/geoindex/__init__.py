"""Multi-zoom station clustering and proximity search."""

from .base import ClusterOptions
from .builder import build_station_index
from .expansion import cluster_children, cluster_leaves, expansion_zoom, iter_leaves
from .features import build_point_features
from .index import StationIndex
from .proximity import ProximitySearch, nearby, nearest
from .query import query_clusters, split_bbox
from .store import StationIndexStore
from .zoom_index import ZoomIndex

__all__ = [
    "ClusterOptions",
    "ProximitySearch",
    "StationIndex",
    "StationIndexStore",
    "ZoomIndex",
    "build_point_features",
    "build_station_index",
    "cluster_children",
    "cluster_leaves",
    "expansion_zoom",
    "iter_leaves",
    "nearby",
    "nearest",
    "query_clusters",
    "split_bbox",
]
