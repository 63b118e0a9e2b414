"""Core classes for elevation sampling and path profiling.

This module provides the computational backbone of the package:
- GeoCalculator: Haversine distances, turn angles, micro-degree lattice
- Tile / SrtmTile: Raster tiles with lazy, thread-safe decoding
- ElevationStore: Bilinear elevation surface over a tile grid
- ProfileLifecycle: State machine guarding the profiler call order
- PathProfiler: Profile statistics (import directly from path_profiler module)
"""

from terrain_profiler.core.elevation_store import ElevationStore
from terrain_profiler.core.geo_calculator import GeoCalculator
from terrain_profiler.core.profile_lifecycle import ProfileLifecycle
from terrain_profiler.core.srtm_tile import SrtmTile, download_srtm_tile, srtm_tile_name
from terrain_profiler.core.tile import Tile, TileFactory, TileState

# PathProfiler has circular import with model.path_point
# Import directly: from terrain_profiler.core.path_profiler import PathProfiler

__all__ = [
    # Geo calculator
    "GeoCalculator",
    # Tiles
    "Tile",
    "TileFactory",
    "TileState",
    "SrtmTile",
    "download_srtm_tile",
    "srtm_tile_name",
    # Elevation store
    "ElevationStore",
    # Profiler lifecycle
    "ProfileLifecycle",
]
