"""Cluster expansion: zoom-in targets, direct children and leaf enumeration."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator

from ...models.domain import ClusterNode, QueryResult, StationPoint, to_query_result

if TYPE_CHECKING:
    from .index import StationIndex


def expansion_zoom(index: "StationIndex", cluster_id: int) -> int | None:
    """Smallest zoom at which the cluster no longer shows as one marker.

    Follows single-child lineage towards finer zooms, so the answer lies in
    ``[cluster.zoom + 1, max_zoom]``. Returns None for unknown ids.
    """

    node = index.clusters.get(cluster_id)
    if node is None:
        return None

    max_zoom = index.options.max_zoom
    while True:
        zoom = node.zoom + 1
        if zoom >= max_zoom:
            return max_zoom
        if len(node.children) != 1 or not node.children[0].is_cluster:
            return zoom
        node = node.children[0]


def cluster_children(index: "StationIndex", cluster_id: int) -> list[QueryResult] | None:
    node = index.clusters.get(cluster_id)
    if node is None:
        return None
    return [to_query_result(child) for child in node.children]


def iter_leaves(node: ClusterNode) -> Iterator[StationPoint]:
    """Yield the stations beneath ``node`` depth first, in child order.

    Uses an explicit stack so hierarchy depth is not bounded by the
    interpreter's recursion limit.
    """

    stack = [node]
    while stack:
        feature = stack.pop()
        if not feature.is_cluster:
            yield feature
            continue
        stack.extend(reversed(feature.children))


def cluster_leaves(
    index: "StationIndex",
    cluster_id: int,
    limit: int | None = None,
    offset: int = 0,
) -> list[StationPoint] | None:
    """Stations beneath a cluster, skipping ``offset`` and returning at most ``limit``."""

    node = index.clusters.get(cluster_id)
    if node is None:
        return None
    if limit is not None and limit <= 0:
        return []

    leaves: list[StationPoint] = []
    skipped = 0
    for leaf in iter_leaves(node):
        if skipped < offset:
            skipped += 1
            continue
        leaves.append(leaf)
        if limit is not None and len(leaves) >= limit:
            break
    return leaves
