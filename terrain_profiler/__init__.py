"""Terrain Profiler - Elevation surfaces and path profiles from raster tiles.

Two components, usable independently:
- Elevation sampling over sparse SRTM-style tiles with bilinear interpolation
  and lazy, on-demand tile loading
- Path profiling: distances, turn angles, resampling of long segments and
  ascend/descend statistics including the longest continuous climb

Modules:
    core: Foundation classes (geo calculations, tiles, elevation store, profiler)
    model: Data structures (GeoBoundingBox, TileCoordinate, PathPoint, ProfileStats)

Example:
    from terrain_profiler.core import ElevationStore
    from terrain_profiler.core.path_profiler import PathProfiler
    from terrain_profiler.model import GeoBoundingBox
"""
