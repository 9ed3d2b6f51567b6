"""Static spatial index over the features visible at one zoom level."""

from __future__ import annotations

from typing import Sequence

import numpy as np
from sklearn.neighbors import KDTree

from ...models.domain import Feature


class ZoomIndex:
    """Points and clusters of a single zoom level keyed by projected position.

    The index is built once and never mutated. Range and radius queries return
    feature positions in stored order so callers iterate deterministically.
    """

    def __init__(self, zoom: int, features: Sequence[Feature]) -> None:
        self.zoom = zoom
        self.features: tuple[Feature, ...] = tuple(features)
        coords = np.array([(feature.x, feature.y) for feature in self.features], dtype=float)
        self._coords = coords.reshape(-1, 2)
        self._tree = KDTree(self._coords) if len(self.features) else None

    def __len__(self) -> int:
        return len(self.features)

    def __iter__(self):
        return iter(self.features)

    @property
    def total_count(self) -> int:
        """Number of stations represented by this level."""
        return sum(feature.count for feature in self.features)

    def range(self, min_x: float, min_y: float, max_x: float, max_y: float) -> np.ndarray:
        """Positions of features with ``min_x <= x <= max_x`` and ``min_y <= y <= max_y``."""

        if not self.features:
            return np.empty(0, dtype=np.intp)
        xs = self._coords[:, 0]
        ys = self._coords[:, 1]
        mask = (xs >= min_x) & (xs <= max_x) & (ys >= min_y) & (ys <= max_y)
        return np.flatnonzero(mask)

    def within(self, x: float, y: float, radius: float) -> np.ndarray:
        """Positions of features within ``radius`` of ``(x, y)``, ascending."""

        if self._tree is None:
            return np.empty(0, dtype=np.intp)
        (indices,) = self._tree.query_radius(np.array([[x, y]]), r=radius)
        return np.sort(indices)
