"""SRTM GeoTIFF tiles backed by a local directory.

Provides file-based tiles for the elevation store:
- CGIAR-CSI SRTM v4.1 naming (srtm_XX_YY.tif, 5°×5°, 6000×6000 samples)
- Download of missing tiles from the CGIAR archive (single attempt)
- GeoTIFF decoding with rasterio, void pixels mapped to 0

Data Source:
    CGIAR-CSI SRTM 90m Digital Elevation Database v4.1
    https://srtm.csi.cgiar.org
"""

import logging
import time
import zipfile
from pathlib import Path
from typing import Callable, Optional

import numpy as np
import rasterio
import requests
from rasterio.errors import RasterioIOError

from terrain_profiler.constants import DEMConfig
from terrain_profiler.core.tile import Tile
from terrain_profiler.model.tile_coordinate import TileCoordinate

logger = logging.getLogger(__name__)


def srtm_tile_name(coordinate: TileCoordinate, tile_span: int = DEMConfig.TILE_SPAN_DEG) -> str:
    """CGIAR file stem for a tile, e.g. "srtm_39_03" for lon 10..15, lat 45..50.

    Columns count east from 180°W, rows count south from 60°N, both 1-based.
    """
    x = (coordinate.lon_base - DEMConfig.SRTM_ORIGIN_LON) // tile_span + 1
    y = (DEMConfig.SRTM_ORIGIN_LAT - (coordinate.lat_base + tile_span)) // tile_span + 1
    return DEMConfig.SRTM_TILE_TEMPLATE.format(x=x, y=y)


def download_srtm_tile(
    coordinate: TileCoordinate,
    tile_dir: Path = DEMConfig.TILE_DIR,
    base_url: str = DEMConfig.SRTM_BASE_URL,
    progress_callback: Optional[Callable[[float], None]] = None,
) -> Path:
    """Download and unpack one SRTM tile if not already present.

    Args:
        coordinate: Tile to download
        tile_dir: Local directory holding srtm_XX_YY.tif files
        base_url: Archive location serving srtm_XX_YY.zip
        progress_callback: Optional callback receiving progress 0.0-1.0.

    Returns:
        Path to the GeoTIFF file.

    Raises:
        requests.RequestException: If the download fails (404 for ocean tiles).
        zipfile.BadZipFile: If the archive is corrupt.
        FileNotFoundError: If the archive holds no matching GeoTIFF.
    """
    name = srtm_tile_name(coordinate=coordinate)
    target_path = tile_dir / f"{name}.tif"
    if target_path.exists():
        logger.info(f"SRTM tile already exists at {target_path}")
        return target_path

    tile_dir.mkdir(parents=True, exist_ok=True)
    archive_path = tile_dir / f"{name}.zip"
    url = f"{base_url}/{name}.zip"
    logger.info(f"Downloading SRTM tile {name} from {url}...")

    try:
        response = requests.get(url, stream=True, timeout=DEMConfig.DOWNLOAD_TIMEOUT_S)
        response.raise_for_status()

        total_size = int(response.headers.get("content-length", 0))
        downloaded = 0

        with open(archive_path, "wb") as f:
            for chunk in response.iter_content(chunk_size=DEMConfig.DOWNLOAD_CHUNK_BYTES):
                f.write(chunk)
                downloaded += len(chunk)
                if progress_callback and total_size > 0:
                    progress_callback(downloaded / total_size)

        with zipfile.ZipFile(archive_path) as archive:
            member = f"{name}.tif"
            if member not in archive.namelist():
                raise FileNotFoundError(f"{archive_path} does not contain {member}")
            with archive.open(member) as src, open(target_path, "wb") as dest:
                dest.write(src.read())
    except Exception:
        # Never leave a half-written GeoTIFF that would look present next time
        target_path.unlink(missing_ok=True)
        raise
    finally:
        archive_path.unlink(missing_ok=True)

    logger.info(f"SRTM tile downloaded to {target_path}")
    return target_path


class SrtmTile(Tile):
    """Tile stored as a CGIAR SRTM GeoTIFF in a local directory.

    GeoTIFF rows run north to south; they are flipped on decode so row 0 is
    the southern edge. CGIAR tiles carry one extra row and column of overlap
    (6001×6001), which is cropped to the tile side.

    Example:
        tile = SrtmTile(coordinate=TileCoordinate(lon_base=10, lat_base=45), side=6000, tile_dir=Path("data/srtm"))
    """

    def __init__(
        self,
        coordinate: TileCoordinate,
        side: int,
        tile_dir: Path = DEMConfig.TILE_DIR,
        base_url: str = DEMConfig.SRTM_BASE_URL,
    ) -> None:
        """Initialize an unresolved SRTM tile.

        Args:
            coordinate: South-west corner of the tile
            side: Samples per axis
            tile_dir: Local directory holding srtm_XX_YY.tif files
            base_url: Archive location used by fetch()
        """
        super().__init__(coordinate=coordinate, side=side)
        self.tile_dir = tile_dir
        self.base_url = base_url
        self.path = tile_dir / f"{srtm_tile_name(coordinate=coordinate)}.tif"

    def is_present_locally(self) -> bool:
        """Check if the GeoTIFF exists in tile_dir."""
        return self.path.exists()

    def fetch(self) -> None:
        """Download the tile; failures are logged and leave the tile without data."""
        try:
            download_srtm_tile(coordinate=self.coordinate, tile_dir=self.tile_dir, base_url=self.base_url)
        except (requests.RequestException, OSError, zipfile.BadZipFile) as e:
            logger.warning(f"Could not fetch {self.path.name} for {self.coordinate}: {e}")

    def _read_samples(self) -> Optional[np.ndarray]:
        """Read band 1, south row first, voids set to NO_DATA_ELEVATION."""
        if not self.is_present_locally():
            return None

        start_time = time.time()
        try:
            with rasterio.open(self.path) as src:
                data = src.read(1)
                nodata = src.nodata
        except RasterioIOError as e:
            logger.warning(f"Unreadable SRTM tile {self.path}: {e}")
            return None

        samples = np.flipud(data)[: self.side, : self.side].astype(np.int32)

        if nodata is not None:
            void = samples == int(nodata)
            if void.all():
                logger.warning(f"SRTM tile {self.path.name} contains only no-data values")
                return None
            samples[void] = DEMConfig.NO_DATA_ELEVATION

        elapsed = time.time() - start_time
        logger.info(f"Decoded {self.path.name} in {elapsed:.2f}s (shape: {samples.shape})")
        return samples
