"""Raster tile contract for the elevation store.

A tile is one fixed-size grid of elevation samples covering
tile_span × tile_span degrees. Its lifecycle is:

    UNRESOLVED --decode()--> LOADED   (samples available)
                         \\-> EMPTY    (no coverage, e.g. ocean)

Fetching only makes the backing data present locally, decoding happens
on first touch so a store can register many tiles cheaply.
"""

import logging
import threading
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Optional

import numpy as np

from terrain_profiler.constants import DEMConfig
from terrain_profiler.model.tile_coordinate import TileCoordinate

logger = logging.getLogger(__name__)


class TileState(Enum):
    """Decode state of a tile."""

    UNRESOLVED = "unresolved"
    LOADED = "loaded"
    EMPTY = "empty"


class Tile(ABC):
    """Abstract raster tile with lazy, thread-safe decoding.

    Subclasses provide storage access (is_present_locally, fetch) and
    _read_samples(). Samples are indexed [pixel_y, pixel_x] with row 0 at
    the tile's southern edge and column 0 at its western edge.

    Example:
        tile = SrtmTile(coordinate=TileCoordinate(lon_base=10, lat_base=45), side=6000)
        if not tile.is_present_locally():
            tile.fetch()
        tile.decode()
        elevation = tile.sample_at(pixel_x=120, pixel_y=2400)
    """

    def __init__(self, coordinate: TileCoordinate, side: int) -> None:
        """Initialize an unresolved tile.

        Args:
            coordinate: South-west corner of the tile
            side: Samples per axis (resolution × tile span)
        """
        self.coordinate = coordinate
        self.side = side
        self._state = TileState.UNRESOLVED
        self._samples: Optional[np.ndarray] = None
        self._decode_lock = threading.Lock()

    @property
    def state(self) -> TileState:
        """Current decode state."""
        return self._state

    @property
    def is_decoded(self) -> bool:
        """True once decode() has run (tile is LOADED or EMPTY)."""
        return self._state is not TileState.UNRESOLVED

    @property
    def is_empty(self) -> bool:
        """True if the tile was decoded and has no usable data."""
        return self._state is TileState.EMPTY

    @abstractmethod
    def is_present_locally(self) -> bool:
        """Check if the backing data is available without a fetch."""

    @abstractmethod
    def fetch(self) -> None:
        """Make the backing data present locally (single attempt, never raises on I/O failure)."""

    @abstractmethod
    def _read_samples(self) -> Optional[np.ndarray]:
        """Read the sample grid, south row first. None means no coverage."""

    def decode(self) -> None:
        """Turn backing data into a sample buffer (idempotent, thread-safe)."""
        # Fast path: already decoded
        if self.is_decoded:
            return

        with self._decode_lock:
            # Double-check after acquiring lock
            if self.is_decoded:
                return

            samples = self._read_samples()
            if samples is None:
                logger.debug(f"{self.coordinate} has no coverage, marking empty")
                self._state = TileState.EMPTY
                return

            if samples.shape != (self.side, self.side):
                logger.warning(f"{self.coordinate} has shape {samples.shape}, expected {self.side}x{self.side}")
            self._samples = samples
            # Set state LAST - this is what is_decoded checks
            self._state = TileState.LOADED

    def sample_at(self, pixel_x: int, pixel_y: int) -> int:
        """Raw sample at a pixel offset inside the tile.

        Args:
            pixel_x: Column, counted east from the western edge
            pixel_y: Row, counted north from the southern edge

        Returns:
            Elevation in meters, NO_DATA_ELEVATION for empty tiles or
            pixels beyond the stored grid.

        Raises:
            RuntimeError: If the tile has not been decoded yet.
        """
        if self._state is TileState.UNRESOLVED:
            raise RuntimeError(f"{self.coordinate} must be decoded before sampling")
        if self._state is TileState.EMPTY:
            return DEMConfig.NO_DATA_ELEVATION

        assert self._samples is not None
        rows, cols = self._samples.shape
        if not (0 <= pixel_y < rows and 0 <= pixel_x < cols):
            return DEMConfig.NO_DATA_ELEVATION
        return int(self._samples[pixel_y, pixel_x])

    def release(self) -> None:
        """Drop the sample buffer and return to UNRESOLVED."""
        with self._decode_lock:
            self._samples = None
            self._state = TileState.UNRESOLVED

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.coordinate}, side={self.side}, state={self._state.value})"


# Builds the tile for a coordinate; the second argument is the side length in samples
TileFactory = Callable[[TileCoordinate, int], Tile]
