"""Elevation store: a continuous elevation surface over sparse raster tiles.

Provides interpolated elevation lookups for a rectangular region:
- Tile grid derived from the region (origin snapped to the tile span)
- Tiles registered and fetched on open(), decoded on first touch
- Bilinear blending of the four surrounding raster samples
- Fail-soft contract: out-of-bounds points and coverage gaps yield 0

A store may be shared across threads; each tile serializes its own
first decode, nothing else is mutated after open().
"""

import logging
from functools import partial
from math import floor
from pathlib import Path
from typing import Iterator, Optional

from terrain_profiler.constants import DEMConfig
from terrain_profiler.core.srtm_tile import SrtmTile
from terrain_profiler.core.tile import Tile, TileFactory
from terrain_profiler.model.elevation_sample import ElevationSample
from terrain_profiler.model.geo_bounding_box import GeoBoundingBox
from terrain_profiler.model.tile_coordinate import TileCoordinate

logger = logging.getLogger(__name__)


class ElevationStore:
    """Sampling surface over the tiles covering a bounding box.

    The tile arena is sized once on open() to cover the whole box and never
    grows. Resolution and tile span are fixed per instance.

    Example:
        box = GeoBoundingBox(from_lat=46.9, from_lon=10.2, to_lat=47.1, to_lon=10.4)
        with ElevationStore(bounding_box=box) as store:
            elevation = store.query(lat=46.985, lon=10.295)
    """

    def __init__(
        self,
        bounding_box: GeoBoundingBox,
        tile_factory: Optional[TileFactory] = None,
        tile_dir: Path = DEMConfig.TILE_DIR,
        resolution: int = DEMConfig.RESOLUTION,
        tile_span: int = DEMConfig.TILE_SPAN_DEG,
    ) -> None:
        """Derive the tile grid for a region.

        Args:
            bounding_box: Region that queries are valid for
            tile_factory: Builds a Tile from (coordinate, side); defaults to
                SrtmTile files in tile_dir
            tile_dir: Local tile directory for the default factory (created if missing)
            resolution: Samples per degree
            tile_span: Degrees per tile along each axis
        """
        self.requested_box = bounding_box
        self.bounding_box = bounding_box.expanded(tolerance_deg=DEMConfig.BOUNDS_TOLERANCE_DEG)
        self.resolution = resolution
        self.tile_span = tile_span
        self.tile_resolution = resolution * tile_span
        self.spacing = 1.0 / resolution

        if tile_factory is None:
            tile_dir.mkdir(parents=True, exist_ok=True)
            tile_factory = partial(SrtmTile, tile_dir=tile_dir)
        self._tile_factory = tile_factory

        # Grid origin: south-west corner of the tile holding the box's minimum corner
        self.lon_base = int(floor(bounding_box.from_lon / tile_span) * tile_span)
        self.lat_base = int(floor(bounding_box.from_lat / tile_span) * tile_span)

        # Pixel offset of the minimum corner inside the origin tile
        self.x_base = int((bounding_box.from_lon - self.lon_base) * resolution)
        self.y_base = int((bounding_box.from_lat - self.lat_base) * resolution)

        # Pixel extent of the box, one extra sample so truncation never loses the far edge
        self.x_size = int((self.bounding_box.to_lon - self.bounding_box.from_lon) * resolution) + 1
        self.y_size = int((self.bounding_box.to_lat - self.bounding_box.from_lat) * resolution) + 1

        self._tiles: Optional[dict[TileCoordinate, Tile]] = None

    @property
    def is_open(self) -> bool:
        """Check if open() has registered the tile arena."""
        return self._tiles is not None

    def open(self) -> "ElevationStore":
        """Register every tile covering the box, fetching missing ones.

        Tiles are not decoded here. A failed fetch leaves that tile without
        data rather than raising. Calling open() twice is a no-op.

        Returns:
            self, for chaining.
        """
        if self._tiles is not None:
            return self

        tx_max = (self.x_base + self.x_size) // self.tile_resolution
        ty_max = (self.y_base + self.y_size) // self.tile_resolution
        origin = TileCoordinate(lon_base=self.lon_base, lat_base=self.lat_base)

        tiles: dict[TileCoordinate, Tile] = {}
        for tx in range(tx_max + 1):
            for ty in range(ty_max + 1):
                coordinate = origin.offset(tx=tx, ty=ty, tile_span=self.tile_span)
                tile = self._tile_factory(coordinate, self.tile_resolution)
                if not tile.is_present_locally():
                    tile.fetch()
                tiles[coordinate] = tile

        self._tiles = tiles
        logger.info(f"ElevationStore opened with {len(tiles)} tiles ({tx_max + 1}x{ty_max + 1}) from {origin}")
        return self

    def close(self) -> None:
        """Release all tile buffers. The store can be opened again."""
        if self._tiles is None:
            return
        for tile in self._tiles.values():
            tile.release()
        self._tiles = None

    def __enter__(self) -> "ElevationStore":
        return self.open()

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def tile_coordinates(self) -> list[TileCoordinate]:
        """Coordinates of all registered tiles."""
        return list(self._require_tiles())

    def tile(self, coordinate: TileCoordinate) -> Optional[Tile]:
        """Registered tile at a coordinate, or None."""
        return self._require_tiles().get(coordinate)

    @property
    def loaded_tile_count(self) -> int:
        """Number of tiles decoded so far."""
        return sum(1 for tile in self._iter_tiles() if tile.is_decoded)

    def _iter_tiles(self) -> Iterator[Tile]:
        return iter(self._require_tiles().values())

    def _require_tiles(self) -> dict[TileCoordinate, Tile]:
        if self._tiles is None:
            raise RuntimeError("ElevationStore.open() must be called before accessing tiles")
        return self._tiles

    def sample(self, lat: float, lon: float) -> ElevationSample:
        """Interpolated elevation with an in-bounds flag.

        Blends the four raster samples around the point, weighted by the
        fractional pixel offset along each axis. The blend is kept within the
        range of the four samples and truncated to an integer once, at the end.

        Args:
            lat: Latitude in decimal degrees
            lon: Longitude in decimal degrees

        Returns:
            ElevationSample. Outside the bounding box: elevation 0, in_bounds False.

        Raises:
            RuntimeError: If the store has not been opened.
        """
        self._require_tiles()

        if not self.requested_box.contains(lat=lat, lon=lon):
            logger.warning(f"Point ({lat}, {lon}) is outside of bounds {self.requested_box}")
            return ElevationSample(elevation=DEMConfig.NO_DATA_ELEVATION, in_bounds=False)

        x_index, x_frac = self._split_pixel(lon * self.resolution)
        y_index, y_frac = self._split_pixel(lat * self.resolution)

        corners = (
            self._sample_pixel(x_index=x_index, y_index=y_index),
            self._sample_pixel(x_index=x_index + 1, y_index=y_index),
            self._sample_pixel(x_index=x_index, y_index=y_index + 1),
            self._sample_pixel(x_index=x_index + 1, y_index=y_index + 1),
        )
        blended = (
            corners[0] * (1 - x_frac) * (1 - y_frac)
            + corners[1] * x_frac * (1 - y_frac)
            + corners[2] * (1 - x_frac) * y_frac
            + corners[3] * x_frac * y_frac
        )
        # Weights may sum to slightly less than 1
        blended = min(max(blended, min(corners)), max(corners))
        return ElevationSample(elevation=int(blended), in_bounds=True)

    def query(self, lat: float, lon: float) -> int:
        """Interpolated elevation in meters, 0 outside the bounding box."""
        return self.sample(lat=lat, lon=lon).elevation

    def __call__(self, lat: float, lon: float) -> int:
        return self.query(lat=lat, lon=lon)

    @staticmethod
    def _split_pixel(position: float) -> tuple[int, float]:
        """Global pixel index and fractional offset of a position in sample units.

        Positions within DEMConfig.LATTICE_SNAP of a lattice line snap onto it,
        so 46 + 1/1200 lands on row 55201 instead of just below it.
        """
        index = floor(position)
        frac = position - index
        if frac > 1 - DEMConfig.LATTICE_SNAP:
            return index + 1, 0.0
        if frac < DEMConfig.LATTICE_SNAP:
            return index, 0.0
        return index, frac

    def _sample_pixel(self, x_index: int, y_index: int) -> int:
        """Raw sample at a global pixel index, decoding its tile on first touch."""
        tx, pixel_x = divmod(x_index, self.tile_resolution)
        ty, pixel_y = divmod(y_index, self.tile_resolution)
        coordinate = TileCoordinate(lon_base=tx * self.tile_span, lat_base=ty * self.tile_span)
        tile = self._require_tiles().get(coordinate)
        if tile is None:
            logger.debug(f"No tile registered at {coordinate} for pixel ({x_index}, {y_index})")
            return DEMConfig.NO_DATA_ELEVATION

        tile.decode()
        return tile.sample_at(pixel_x=pixel_x, pixel_y=pixel_y)

    def __repr__(self) -> str:
        state = f"{len(self._tiles)} tiles" if self._tiles is not None else "closed"
        return f"ElevationStore({self.requested_box}, resolution={self.resolution}, {state})"
