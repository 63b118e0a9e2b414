"""PathPoint - One vertex of an elevation profile.

A PathPoint represents a single GPS coordinate with elevation, plus the
per-vertex measurements the profiler derives from its neighbours.

Used by:
- PathProfiler (owns the ordered list of points)
- ProfileStats consumers that need the resampled geometry
"""

from dataclasses import dataclass

import numpy as np

from terrain_profiler.core.geo_calculator import GeoCalculator


@dataclass
class PathPoint:
    """A point on a path with GPS coordinates, elevation and leg metrics.

    Attributes:
        lat: Latitude in decimal degrees (WGS84)
        lon: Longitude in decimal degrees (WGS84)
        elevation: Elevation in meters (integer)
        distance: Meters from the previous point, 0 for the first point
        turn_angle: Direction change at this point in degrees, 0 where undefined

    Example:
        point = PathPoint(lat=46.985, lon=10.295, elevation=2400)
    """

    lat: float
    lon: float
    elevation: int
    distance: int = 0
    turn_angle: int = 0

    @property
    def lat_lon(self) -> tuple[float, float]:
        """Return (lat, lon) tuple - standard geographic order."""
        return (self.lat, self.lon)

    @property
    def lon_lat(self) -> tuple[float, float]:
        """Return (lon, lat) tuple - GeoJSON order."""
        return (self.lon, self.lat)

    def __post_init__(self) -> None:
        """Validate data after initialization."""
        if np.isnan(self.lat) or np.isnan(self.lon):
            raise ValueError(f"PathPoint cannot have NaN coordinates ({self.lat}, {self.lon})")

    def distance_to(self, other: "PathPoint") -> float:
        """Calculate haversine distance to another point in meters.

        Args:
            other: Another PathPoint to measure distance to

        Returns:
            Distance in meters using great-circle calculation.
        """
        return GeoCalculator.haversine_distance_m(
            lat1=self.lat,
            lon1=self.lon,
            lat2=other.lat,
            lon2=other.lon,
        )

    def __repr__(self) -> str:
        return (
            f"PathPoint(lat={self.lat:.6f}, lon={self.lon:.6f}, elev={self.elevation}m, "
            f"dist={self.distance}m, angle={self.turn_angle}°)"
        )
