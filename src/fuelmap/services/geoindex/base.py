"""Options shared by the index builder and its queries."""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ...config import Settings, settings


class ClusterOptions(BaseModel):
    """Recognised options of the zoom-level index builder."""

    model_config = ConfigDict(frozen=True)

    radius: float = Field(default=50.0, gt=0.0, description="Merge radius in pixels.")
    max_zoom: int = Field(default=14, ge=0, le=30)
    min_zoom: int = Field(default=0, ge=0, le=30)
    min_points: int = Field(default=2, ge=2)
    tile_size: int = Field(default=256, ge=1)

    @model_validator(mode="after")
    def _check_zoom_range(self) -> "ClusterOptions":
        if self.min_zoom > self.max_zoom:
            raise ValueError("min_zoom must not exceed max_zoom")
        return self

    @classmethod
    def from_settings(cls, source: Settings | None = None) -> "ClusterOptions":
        source = source or settings
        return cls(
            radius=source.cluster_radius,
            max_zoom=source.cluster_max_zoom,
            min_zoom=source.cluster_min_zoom,
            min_points=source.cluster_min_points,
            tile_size=source.cluster_tile_size,
        )

    def merge_radius(self, zoom: int) -> float:
        """Merge radius at ``zoom`` in normalized projected units.

        One world width spans ``tile_size * 2**zoom`` pixels, so the pixel
        radius covers twice as much ground with every zoom level out.
        """
        return self.radius / (self.tile_size * 2**zoom)

    def clamp_zoom(self, zoom: float) -> int:
        if math.isnan(zoom):
            return self.min_zoom
        if math.isinf(zoom):
            return self.max_zoom if zoom > 0 else self.min_zoom
        return max(self.min_zoom, min(int(zoom // 1), self.max_zoom))
