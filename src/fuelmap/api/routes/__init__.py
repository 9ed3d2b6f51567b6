"""Route group exports."""

from . import clusters, health, stations

__all__ = ["clusters", "health", "stations"]
