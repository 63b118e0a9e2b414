"""Configuration constants for Terrain Profiler.

All configurable parameters are centralized here for easy tuning.
Every value is also exposed as a constructor default, so callers can
override it per store or profiler without touching this module.

Classes:
    GeoConfig: Earth model and coordinate encoding
    DEMConfig: Raster tile layout, local tile directory and download source
    ProfileConfig: Path profile analysis parameters
"""

from pathlib import Path

# Package root directory (where terrain_profiler/ lives)
PACKAGE_DIR = Path(__file__).parent

# Project root directory (parent of terrain_profiler/)
PROJECT_ROOT = PACKAGE_DIR.parent

# Data directory outside package (downloaded separately, not shipped with package)
DATA_DIR = PROJECT_ROOT / "data"


class GeoConfig:
    """Earth model and coordinate encoding."""

    # WGS84 spherical approximation used for all great-circle distances
    EARTH_RADIUS_M = 6_371_000

    # Coordinates are snapped to an integer micro-degree lattice when a
    # segment is subdivided (1 unit = 1e-6 degrees)
    DEGREE_INT_FACTOR = 1_000_000


class DEMConfig:
    """Raster tile layout and SRTM tile source."""

    # Samples per degree (3 arc-seconds, SRTM 90m)
    RESOLUTION = 1200

    # Degrees covered by one tile along each axis
    TILE_SPAN_DEG = 5

    # Border added around a store's bounding box to absorb rounding of
    # integer-encoded coordinates
    BOUNDS_TOLERANCE_DEG = 0.000001

    # Pixel positions this close to a lattice line are treated as on it
    LATTICE_SNAP = 1e-9

    # Value returned for out-of-bounds queries and tiles without coverage
    NO_DATA_ELEVATION = 0

    # Local tile cache (one GeoTIFF per tile)
    TILE_DIR = DATA_DIR / "srtm"

    # CGIAR-CSI SRTM v4.1, 5x5 degree GeoTIFF archives (srtm_XX_YY.zip)
    SRTM_BASE_URL = "https://srtm.csi.cgiar.org/wp-content/uploads/files/srtm_5x5/TIFF"
    SRTM_TILE_TEMPLATE = "srtm_{x:02d}_{y:02d}"

    # SRTM grid numbering starts at 180°W and 60°N
    SRTM_ORIGIN_LON = -180
    SRTM_ORIGIN_LAT = 60

    # Single blocking attempt per tile, no retries
    DOWNLOAD_TIMEOUT_S = 180
    DOWNLOAD_CHUNK_BYTES = 8192


class ProfileConfig:
    """Path profile analysis parameters."""

    # Aggregate inclines are only computed above this distance (meters),
    # shorter denominators make the percentages meaningless
    MIN_STATS_DISTANCE_M = 20

    # Typical subdivision step for graph edges (meters)
    DEFAULT_RESAMPLE_STEP_M = 100


assert DEMConfig.RESOLUTION > 0, "Resolution must be positive"
assert DEMConfig.TILE_SPAN_DEG > 0, "Tile span must be positive"
assert DEMConfig.BOUNDS_TOLERANCE_DEG < 1.0 / DEMConfig.RESOLUTION, "Tolerance must stay below one sample spacing"
assert ProfileConfig.DEFAULT_RESAMPLE_STEP_M > 0, "Resample step must be positive"
