"""Shared pytest fixtures for terrain_profiler tests.

Provides MockTile/MockTileSource and reusable test data for all tests.
All fixtures use explicit values with documented rationale.

RASTER LAYOUT:
    Tests use a coarse raster of 4 samples per degree and 5° tiles
    (20×20 samples per tile). Lattice points are multiples of 0.25°, which
    are exact in binary floating point, so corner lookups are exact.

PATH GEOMETRY:
    Test paths run along the prime meridian. Each leg is placed half a meter
    longer than its nominal length, so the truncated Haversine distance
    equals the nominal value exactly.
"""

import io
import zipfile
from math import floor, pi
from pathlib import Path
from typing import Callable, Optional

import numpy as np
import pytest
import rasterio
import requests
from rasterio.transform import from_origin

from terrain_profiler.core.elevation_store import ElevationStore
from terrain_profiler.core.geo_calculator import GeoCalculator
from terrain_profiler.core.tile import Tile
from terrain_profiler.model.geo_bounding_box import GeoBoundingBox
from terrain_profiler.model.tile_coordinate import TileCoordinate

TEST_RESOLUTION = 4
TEST_TILE_SPAN = 5
TEST_TILE_SIDE = TEST_RESOLUTION * TEST_TILE_SPAN

# Full SRTM resolution for lattice precision tests
SRTM_RESOLUTION = 1200

# Haversine along a meridian is exactly R * dlat
METERS_PER_DEGREE = GeoCalculator.EARTH_RADIUS_M * pi / 180


# =============================================================================
# SYNTHETIC ELEVATION FORMULAS
# =============================================================================


def linear_elevation(lat: float, lon: float) -> float:
    """Plane rising 10m per sample row (north) and 3m per sample column (east).

    At lat=47.5, lon=10.25: 1000 + 10 * 190 + 3 * 41 = 3023m.
    Bilinear interpolation reproduces a plane exactly.
    """
    return 1000 + 10 * lat * TEST_RESOLUTION + 3 * lon * TEST_RESOLUTION


def rugged_elevation(lat: float, lon: float) -> float:
    """Non-linear terrain with peaks and pits between lattice points."""
    return 1500 + 700 * np.sin(lat * 7.3) * np.cos(lon * 5.1) + 40 * ((lat * TEST_RESOLUTION) % 3)


# =============================================================================
# MOCK TILES
# =============================================================================


class MockTile(Tile):
    """In-memory tile filled from an elevation formula.

    Samples are evaluated at the tile's lattice points, south row first.
    Counts fetch() and decode reads so tests can check laziness.
    """

    def __init__(
        self,
        coordinate: TileCoordinate,
        side: int,
        formula: Optional[Callable[[float, float], float]],
        present: bool = True,
        fetch_succeeds: bool = True,
    ) -> None:
        super().__init__(coordinate=coordinate, side=side)
        self.formula = formula
        self.present = present
        self.fetch_succeeds = fetch_succeeds
        self.fetch_count = 0
        self.read_count = 0

    def is_present_locally(self) -> bool:
        return self.present

    def fetch(self) -> None:
        self.fetch_count += 1
        if self.fetch_succeeds:
            self.present = True

    def _read_samples(self) -> Optional[np.ndarray]:
        self.read_count += 1
        if not self.present or self.formula is None:
            return None
        resolution = self.side / TEST_TILE_SPAN
        lats = self.coordinate.lat_base + np.arange(self.side) / resolution
        lons = self.coordinate.lon_base + np.arange(self.side) / resolution
        lat_grid, lon_grid = np.meshgrid(lats, lons, indexing="ij")
        return np.rint(self.formula(lat_grid, lon_grid)).astype(np.int32)


class MockTileSource:
    """Tile factory for ElevationStore that builds MockTiles.

    Args:
        formula: Elevation formula for tiles with coverage
        no_coverage: Tiles that decode as EMPTY (e.g. ocean)
        absent: Tiles not present locally (fetch() is called on open)
        unreachable: Absent tiles whose fetch fails
    """

    def __init__(
        self,
        formula: Callable[[float, float], float] = linear_elevation,
        no_coverage: frozenset[TileCoordinate] = frozenset(),
        absent: frozenset[TileCoordinate] = frozenset(),
        unreachable: frozenset[TileCoordinate] = frozenset(),
    ) -> None:
        self.formula = formula
        self.no_coverage = no_coverage
        self.absent = absent | unreachable
        self.unreachable = unreachable
        self.tiles: dict[TileCoordinate, MockTile] = {}

    def __call__(self, coordinate: TileCoordinate, side: int) -> MockTile:
        tile = MockTile(
            coordinate=coordinate,
            side=side,
            formula=None if coordinate in self.no_coverage else self.formula,
            present=coordinate not in self.absent,
            fetch_succeeds=coordinate not in self.unreachable,
        )
        self.tiles[coordinate] = tile
        return tile

    def raw(self, lat: float, lon: float) -> int:
        """Raw sample of the lattice point at or south-west of (lat, lon)."""
        lat0 = floor(lat * TEST_RESOLUTION) / TEST_RESOLUTION
        lon0 = floor(lon * TEST_RESOLUTION) / TEST_RESOLUTION
        coordinate = TileCoordinate.containing(lat=lat0, lon=lon0, tile_span=TEST_TILE_SPAN)
        if coordinate in self.no_coverage:
            return 0
        return int(np.rint(self.formula(lat0, lon0)))


class ArrayTile(Tile):
    """In-memory tile whose samples come from a (side -> array) function.

    Used at full SRTM resolution, where lattice coordinates such as
    46 + 1/1200 are not exact in binary floating point.
    """

    def __init__(self, coordinate: TileCoordinate, side: int, fill: Callable[[int], np.ndarray]) -> None:
        super().__init__(coordinate=coordinate, side=side)
        self.fill = fill

    def is_present_locally(self) -> bool:
        return True

    def fetch(self) -> None:
        pass

    def _read_samples(self) -> Optional[np.ndarray]:
        return self.fill(self.side)


def index_samples(side: int) -> np.ndarray:
    """Every sample distinct: row * side + col."""
    return np.arange(side * side, dtype=np.int32).reshape(side, side)


def array_store(box: GeoBoundingBox, fill: Callable[[int], np.ndarray]) -> ElevationStore:
    """Opened store at 1200 samples per degree over 1° ArrayTiles."""
    return ElevationStore(
        bounding_box=box,
        tile_factory=lambda coordinate, side: ArrayTile(coordinate=coordinate, side=side, fill=fill),
        resolution=SRTM_RESOLUTION,
        tile_span=1,
    ).open()


def make_store(box: GeoBoundingBox, source: MockTileSource) -> ElevationStore:
    """ElevationStore on the coarse test raster."""
    return ElevationStore(
        bounding_box=box,
        tile_factory=source,
        resolution=TEST_RESOLUTION,
        tile_span=TEST_TILE_SPAN,
    )


# =============================================================================
# PATH HELPERS
# =============================================================================


def meridian_path(segments_m: list[int], elevations: list[Optional[int]], lon: float = 0.0) -> list[tuple]:
    """(lat, lon, elevation) tuples along a meridian with exact integer leg lengths.

    Args:
        segments_m: Leg lengths in meters, one fewer than elevations
        elevations: Elevation per point (None to resolve later)
        lon: Meridian to walk along
    """
    assert len(segments_m) == len(elevations) - 1
    points = []
    position_m = 0.0
    for k, elevation in enumerate(elevations):
        if k > 0:
            position_m += segments_m[k - 1] + 0.5
        points.append((position_m / METERS_PER_DEGREE, lon, elevation))
    return points


def grade_resolver(grade_pct: float) -> Callable[[float, float], int]:
    """Elevation resolver for terrain rising grade_pct going north from the equator."""

    def resolve(lat: float, lon: float) -> int:
        return int(lat * METERS_PER_DEGREE * grade_pct / 100)

    return resolve


# =============================================================================
# GEOTIFF HELPERS
# =============================================================================


def write_geotiff(
    path: Path,
    data: np.ndarray,
    coordinate: TileCoordinate,
    resolution: int = TEST_RESOLUTION,
    nodata: Optional[int] = -32768,
) -> Path:
    """Write a single-band int16 GeoTIFF, first row = northern edge (as SRTM ships)."""
    rows, cols = data.shape
    transform = from_origin(
        coordinate.lon_base,
        coordinate.lat_base + rows / resolution,
        1 / resolution,
        1 / resolution,
    )
    with rasterio.open(
        path,
        "w",
        driver="GTiff",
        height=rows,
        width=cols,
        count=1,
        dtype="int16",
        crs="EPSG:4326",
        transform=transform,
        nodata=nodata,
    ) as dst:
        dst.write(data.astype("int16"), 1)
    return path


def zip_bytes(member_name: str, content: bytes) -> bytes:
    """In-memory zip archive holding one file."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr(member_name, content)
    return buffer.getvalue()


class FakeResponse:
    """Minimal stand-in for a streamed requests.Response."""

    def __init__(self, content: bytes, status_code: int = 200) -> None:
        self.content = content
        self.status_code = status_code
        self.headers = {"content-length": str(len(content))}

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")

    def iter_content(self, chunk_size: int):
        for start in range(0, len(self.content), chunk_size):
            yield self.content[start : start + chunk_size]


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def linear_source() -> MockTileSource:
    """Tile source with the linear plane everywhere."""
    return MockTileSource(formula=linear_elevation)


@pytest.fixture
def box_single_tile() -> GeoBoundingBox:
    """Box inside tile (10°E, 45°N): lon 10.0-12.5, lat 46.0-48.5."""
    return GeoBoundingBox(from_lat=46.0, from_lon=10.0, to_lat=48.5, to_lon=12.5)


@pytest.fixture
def box_two_tiles() -> GeoBoundingBox:
    """Box spanning tiles (10°E, 45°N) and (15°E, 45°N): lon 13.0-16.0, lat 46.0-47.0."""
    return GeoBoundingBox(from_lat=46.0, from_lon=13.0, to_lat=47.0, to_lon=16.0)


@pytest.fixture
def linear_store(box_single_tile: GeoBoundingBox, linear_source: MockTileSource) -> ElevationStore:
    """Opened store over the linear plane, single tile."""
    return make_store(box=box_single_tile, source=linear_source).open()


@pytest.fixture
def flat_3_points_1000m() -> list[tuple]:
    """Three points 1000m apart at constant 100m elevation."""
    return meridian_path(segments_m=[1000, 1000], elevations=[100, 100, 100])
