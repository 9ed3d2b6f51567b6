"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Literal

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="FUELMAP_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Fuel Station Map API"
    api_prefix: str = "/api"
    log_level: str = "INFO"
    station_file: Path = Field(
        default=Path("data/stations.geojson"),
        description="Station snapshot (GeoJSON FeatureCollection or CSV).",
    )
    cluster_radius: float = Field(default=50.0, gt=0.0, description="Cluster radius in screen pixels.")
    cluster_max_zoom: int = Field(default=14, ge=0, le=30)
    cluster_min_zoom: int = Field(default=0, ge=0, le=30)
    cluster_min_points: int = Field(default=2, ge=2)
    cluster_tile_size: int = Field(default=256, ge=1, description="Tile edge length in pixels.")
    nearby_default_radius_km: float = Field(default=5.0, ge=0.0)
    nearby_max_radius_km: float = Field(default=100.0, gt=0.0)
    nearby_strategy: Literal["scan", "index"] = Field(
        default="scan",
        description="Linear scan or bounding-box prefilter on the finest zoom index.",
    )
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("station_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
