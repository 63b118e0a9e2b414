"""Download every SRTM tile covering a region ahead of an offline batch run.

Developer utility: elevation stores fetch missing tiles on open(), which
blocks the first profile computation for minutes per tile. Run this once
to fill the local tile directory instead.

To prefetch a different region:
1. Update the bounding box constants below
2. Run: python scripts/prefetch_srtm_tiles.py
"""

import logging

from terrain_profiler.constants import DEMConfig
from terrain_profiler.core import ElevationStore, TileState
from terrain_profiler.model import GeoBoundingBox

# Alps bounding box in degrees (WGS84)
REGION_WEST_DEG = 4.5
REGION_EAST_DEG = 17.0
REGION_SOUTH_DEG = 42.75
REGION_NORTH_DEG = 48.5


def prefetch_srtm_tiles() -> None:
    """Open a store for the region and report which tiles have coverage."""
    box = GeoBoundingBox(
        from_lat=REGION_SOUTH_DEG,
        from_lon=REGION_WEST_DEG,
        to_lat=REGION_NORTH_DEG,
        to_lon=REGION_EAST_DEG,
    )
    print(f"Region: {box}")
    print(f"Tile directory: {DEMConfig.TILE_DIR}")

    with ElevationStore(bounding_box=box) as store:
        for coordinate in store.tile_coordinates:
            tile = store.tile(coordinate)
            tile.decode()
            status = "ok" if tile.state is TileState.LOADED else "no data"
            print(f"  {coordinate}: {status}")

        print(f"Decoded {store.loaded_tile_count} of {len(store.tile_coordinates)} tiles")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    prefetch_srtm_tiles()
