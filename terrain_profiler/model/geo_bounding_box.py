"""GeoBoundingBox - Rectangular query region for an elevation store."""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class GeoBoundingBox:
    """Axis-aligned region in decimal degrees (WGS84).

    Attributes:
        from_lat: Southern edge
        from_lon: Western edge
        to_lat: Northern edge
        to_lon: Eastern edge

    Example:
        box = GeoBoundingBox(from_lat=46.9, from_lon=10.2, to_lat=47.1, to_lon=10.4)
        box.contains(lat=47.0, lon=10.3)  # True
    """

    from_lat: float
    from_lon: float
    to_lat: float
    to_lon: float

    def __post_init__(self) -> None:
        """Validate data after initialization."""
        if np.isnan([self.from_lat, self.from_lon, self.to_lat, self.to_lon]).any():
            raise ValueError(f"GeoBoundingBox cannot have NaN edges: {self}")
        if self.from_lat > self.to_lat or self.from_lon > self.to_lon:
            raise ValueError(f"GeoBoundingBox edges are inverted: {self}")

    def expanded(self, tolerance_deg: float) -> "GeoBoundingBox":
        """Return a copy grown by tolerance_deg on every side."""
        return GeoBoundingBox(
            from_lat=self.from_lat - tolerance_deg,
            from_lon=self.from_lon - tolerance_deg,
            to_lat=self.to_lat + tolerance_deg,
            to_lon=self.to_lon + tolerance_deg,
        )

    def contains(self, lat: float, lon: float) -> bool:
        """Check if a point lies inside the box (edges included)."""
        return self.from_lat <= lat <= self.to_lat and self.from_lon <= lon <= self.to_lon

    @classmethod
    def around(cls, points: list[tuple[float, float]]) -> "GeoBoundingBox":
        """Smallest box covering a list of (lat, lon) pairs.

        Raises:
            ValueError: If points is empty.
        """
        if not points:
            raise ValueError("Cannot build a bounding box around zero points")
        lats = [lat for lat, _ in points]
        lons = [lon for _, lon in points]
        return cls(from_lat=min(lats), from_lon=min(lons), to_lat=max(lats), to_lon=max(lons))
