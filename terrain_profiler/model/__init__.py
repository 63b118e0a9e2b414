"""Data model classes for elevation sampling and path profiles.

- GeoBoundingBox: Query region of an elevation store
- TileCoordinate: Identity of one raster tile (south-west corner)
- ElevationSample: Store lookup result with in-bounds flag
- PathPoint: Profile vertex (lat, lon, elevation, distance, turn angle)
- ProfileStats: Aggregates produced by an analysis pass
"""

from terrain_profiler.model.elevation_sample import ElevationSample
from terrain_profiler.model.geo_bounding_box import GeoBoundingBox
from terrain_profiler.model.path_point import PathPoint
from terrain_profiler.model.profile_stats import ProfileStats
from terrain_profiler.model.tile_coordinate import TileCoordinate

__all__ = [
    "ElevationSample",
    "GeoBoundingBox",
    "PathPoint",
    "ProfileStats",
    "TileCoordinate",
]
