"""Geodesic and planar helpers for elevation profiles.

Provides geographic helper functions used by the profiler:
- Distance calculation (Haversine formula)
- Turn angle between two consecutive path legs
- Integer micro-degree encoding and lattice interpolation

All distance calculations use WGS84 spherical Earth approximation (R = 6,371 km).
"""

from math import acos, atan2, cos, degrees, radians, sin, sqrt

from terrain_profiler.constants import GeoConfig

# Earth's radius in meters (WGS84 spherical approximation)
EARTH_RADIUS_M = GeoConfig.EARTH_RADIUS_M


class GeoCalculator:
    """Static methods for geographic calculations.

    Coordinates are in decimal degrees (WGS84).
    Distances are in meters, angles in degrees.
    """

    EARTH_RADIUS_M = EARTH_RADIUS_M

    @staticmethod
    def haversine_distance_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        """Calculate great-circle distance between two points using Haversine formula.

        Args:
            lat1: Latitude of first point (decimal degrees)
            lon1: Longitude of first point (decimal degrees)
            lat2: Latitude of second point (decimal degrees)
            lon2: Longitude of second point (decimal degrees)

        Returns:
            Distance in meters.
        """
        dlat = radians(lat2 - lat1)
        dlon = radians(lon2 - lon1)
        a = sin(dlat / 2) ** 2 + cos(radians(lat1)) * cos(radians(lat2)) * sin(dlon / 2) ** 2
        return EARTH_RADIUS_M * 2 * atan2(sqrt(a), sqrt(1 - a))

    @staticmethod
    def turn_angle_deg(
        prev_lat: float,
        prev_lon: float,
        lat: float,
        lon: float,
        next_lat: float,
        next_lon: float,
    ) -> float:
        """Angle between the incoming and outgoing leg at (lat, lon).

        Legs are treated as plain (lon, lat) vectors, which is accurate
        enough for the short segments of a road or trail geometry.
        0° means straight ahead, 180° a full reversal.

        Args:
            prev_lat, prev_lon: Point before the vertex
            lat, lon: The vertex where the direction changes
            next_lat, next_lon: Point after the vertex

        Returns:
            Angle in degrees (0-180). 0 if either leg has zero length.
        """
        ax = lon - prev_lon
        ay = lat - prev_lat
        bx = next_lon - lon
        by = next_lat - lat

        norm = sqrt(ax * ax + ay * ay) * sqrt(bx * bx + by * by)
        if norm == 0:
            return 0.0

        # Rounding can push the cosine of a straight line slightly past 1
        cosine = max(-1.0, min(1.0, (ax * bx + ay * by) / norm))
        return degrees(acos(cosine))

    @staticmethod
    def degree_to_int(value: float) -> int:
        """Encode decimal degrees on the integer micro-degree lattice."""
        return round(value * GeoConfig.DEGREE_INT_FACTOR)

    @staticmethod
    def int_to_degree(value: int) -> float:
        """Decode a micro-degree lattice value back to decimal degrees."""
        return value / GeoConfig.DEGREE_INT_FACTOR

    @staticmethod
    def lerp_int(base: int, dest: int, index: int, parts: int) -> int:
        """Integer interpolation between two lattice values.

        Returns base + index * (dest - base) / parts with the quotient
        truncated toward zero, so subdivisions of a segment land on the
        same lattice points regardless of direction.

        Args:
            base: Start value
            dest: End value
            index: Subdivision index (0 = base, parts = dest)
            parts: Number of subdivisions

        Returns:
            Interpolated lattice value.
        """
        offset = index * (dest - base)
        quotient = abs(offset) // parts
        return base + (quotient if offset >= 0 else -quotient)
