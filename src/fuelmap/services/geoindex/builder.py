"""Zoom-level index construction: greedy radius clustering from fine to coarse."""

from __future__ import annotations

import itertools
import logging
from typing import Any, Iterable, Iterator

from ...models.domain import ClusterNode, Feature
from .base import ClusterOptions
from .features import build_point_features
from .index import StationIndex
from .proximity import ProximitySearch
from .zoom_index import ZoomIndex

logger = logging.getLogger(__name__)


def _merge(seed: Feature, members: list[Feature], cluster_id: int, zoom: int) -> ClusterNode:
    """Fold ``members`` into ``seed`` with a running count-weighted centroid."""

    count = seed.count
    x, y = seed.x, seed.y
    for member in members:
        count += member.count
        share = member.count / count
        x += (member.x - x) * share
        y += (member.y - y) * share
    return ClusterNode(
        id=cluster_id,
        zoom=zoom,
        x=x,
        y=y,
        count=count,
        children=(seed, *members),
    )


def cluster_level(
    previous: ZoomIndex,
    zoom: int,
    options: ClusterOptions,
    id_sequence: Iterator[int],
) -> list[Feature]:
    """Produce the features of ``zoom`` from the index one level finer."""

    radius = options.merge_radius(zoom)
    assigned = [False] * len(previous)
    features: list[Feature] = []

    for position, seed in enumerate(previous.features):
        if assigned[position]:
            continue
        assigned[position] = True
        neighbours = [int(index) for index in previous.within(seed.x, seed.y, radius) if not assigned[index]]

        if not neighbours or len(neighbours) + 1 < options.min_points:
            features.append(seed)
            continue

        for index in neighbours:
            assigned[index] = True
        members = [previous.features[index] for index in neighbours]
        features.append(_merge(seed, members, next(id_sequence), zoom))

    return features


def build_station_index(records: Iterable[Any], options: ClusterOptions | None = None) -> StationIndex:
    """Build the full multi-zoom cluster hierarchy for a station snapshot."""

    options = options or ClusterOptions.from_settings()
    points, skipped = build_point_features(records)

    levels: dict[int, ZoomIndex] = {options.max_zoom: ZoomIndex(options.max_zoom, points)}
    clusters: dict[int, ClusterNode] = {}
    id_sequence = itertools.count(1)

    for zoom in range(options.max_zoom - 1, options.min_zoom - 1, -1):
        features = cluster_level(levels[zoom + 1], zoom, options, id_sequence)
        for feature in features:
            if feature.is_cluster and feature.zoom == zoom:
                clusters[feature.id] = feature
        levels[zoom] = ZoomIndex(zoom, features)
        logger.debug(f"Zoom {zoom}: {len(features)} features from {len(levels[zoom + 1])}")

    logger.info(
        f"Built station index: {len(points)} stations, {skipped} skipped, "
        f"{len(clusters)} clusters across zooms {options.min_zoom}-{options.max_zoom}"
    )
    return StationIndex(
        options=options,
        levels=levels,
        clusters=clusters,
        points=points,
        skipped=skipped,
        proximity=ProximitySearch(points, levels[options.max_zoom]),
    )
