"""TileCoordinate - Identity of one raster tile."""

from dataclasses import dataclass
from math import floor


@dataclass(frozen=True)
class TileCoordinate:
    """South-west corner of a tile in whole degrees.

    Both values are multiples of the tile span, so every point inside a
    tile maps to the same coordinate. Hashable, used as the key of a
    store's tile arena.

    Attributes:
        lon_base: Western edge of the tile (degrees)
        lat_base: Southern edge of the tile (degrees)
    """

    lon_base: int
    lat_base: int

    @classmethod
    def containing(cls, lat: float, lon: float, tile_span: int) -> "TileCoordinate":
        """Coordinate of the tile that owns (lat, lon)."""
        return cls(
            lon_base=int(floor(lon / tile_span) * tile_span),
            lat_base=int(floor(lat / tile_span) * tile_span),
        )

    def offset(self, tx: int, ty: int, tile_span: int) -> "TileCoordinate":
        """Coordinate of the tile tx columns east and ty rows north of this one."""
        return TileCoordinate(lon_base=self.lon_base + tx * tile_span, lat_base=self.lat_base + ty * tile_span)

    def __repr__(self) -> str:
        return f"TileCoordinate(lon={self.lon_base}, lat={self.lat_base})"
