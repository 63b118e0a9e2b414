"""Elevation profile analysis along an ordered path.

Turns a sequence of geographic points into per-segment measurements and a
statistical summary:
- Segment distances (Haversine) and turn angles at each vertex
- Optional resampling of long segments with elevation-sampled intermediate points
- Single-pass statistics: ascend/descend totals, level distance, average
  inclines and the longest continuous climb and descent

Elevations missing from the input are resolved through an injected
resolver, usually an ElevationStore. All statistics use integer meters
and percentages truncated toward zero.

Usage order is enforced by ProfileLifecycle:
    profiler = PathProfiler(elevation_resolver=store)
    profiler.initialize(points)
    profiler.resample(step_m=100)   # optional
    stats = profiler.analyze()
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Iterable, Optional, Sequence, Union

from terrain_profiler.constants import ProfileConfig
from terrain_profiler.core.geo_calculator import GeoCalculator
from terrain_profiler.core.profile_lifecycle import ProfileLifecycle
from terrain_profiler.model.path_point import PathPoint
from terrain_profiler.model.profile_stats import ProfileStats

logger = logging.getLogger(__name__)

# (lat, lon) -> elevation in meters
ElevationResolver = Callable[[float, float], int]

# PathPoint, (lat, lon) or (lat, lon, elevation) where elevation may be None
PointInput = Union[PathPoint, Sequence[Any]]


def truncated_percent(value: int, distance: int) -> int:
    """100 * value / distance, truncated toward zero."""
    quotient = abs(100 * value) // distance
    return quotient if value >= 0 else -quotient


@dataclass
class _Run:
    """Elevation change and distance of a contiguous climb or descent."""

    elevation: int = 0
    distance: int = 0


class PathProfiler:
    """Computes an elevation profile and its statistics for one path.

    Owns its list of PathPoints; the elevation resolver is only read.

    Example:
        profiler = PathProfiler(elevation_resolver=store)
        profiler.initialize([(47.01, 10.29), (47.02, 10.30), (47.03, 10.30)])
        stats = profiler.analyze()
        print(f"+{stats.ascend}m / {stats.descend}m over {stats.total_distance}m")
    """

    def __init__(self, elevation_resolver: Optional[Union[ElevationResolver, Any]] = None) -> None:
        """Initialize with an optional elevation source.

        Args:
            elevation_resolver: ElevationStore (its query() is used) or any
                callable (lat, lon) -> elevation. Required when input points
                lack elevation or when resample() inserts points.
        """
        self._resolver: Optional[ElevationResolver] = getattr(elevation_resolver, "query", elevation_resolver)
        self._lifecycle = ProfileLifecycle()
        self._points: list[PathPoint] = []
        self._total_distance = 0
        self._max_angle = 0
        self._stats: Optional[ProfileStats] = None

    @property
    def state(self) -> str:
        """Lifecycle state name (Empty, Initialized, Resampled, Analyzed)."""
        return self._lifecycle.get_state_name()

    @property
    def points(self) -> list[PathPoint]:
        """The (possibly resampled) path, in order."""
        return list(self._points)

    @property
    def total_distance(self) -> int:
        """Path length measured by initialize(), before any resampling."""
        return self._total_distance

    @property
    def max_angle(self) -> int:
        """Sharpest turn measured by initialize(), in degrees."""
        return self._max_angle

    @property
    def stats(self) -> ProfileStats:
        """Aggregates of the last analyze() call.

        Raises:
            RuntimeError: If analyze() has not run since the last initialize() or resample().
        """
        if not self._lifecycle.is_analyzed or self._stats is None:
            raise RuntimeError(f"PathProfiler.analyze() must be called before reading statistics (state: {self.state})")
        return self._stats

    def _resolve(self, lat: float, lon: float) -> int:
        if self._resolver is None:
            raise ValueError(f"No elevation for ({lat}, {lon}) and no elevation resolver configured")
        return int(self._resolver(lat, lon))

    def _to_path_point(self, item: PointInput) -> PathPoint:
        """Copy an input item into a fresh PathPoint, resolving missing elevation."""
        if isinstance(item, PathPoint):
            lat, lon, elevation = item.lat, item.lon, item.elevation
        elif len(item) == 2:
            lat, lon = item
            elevation = None
        elif len(item) == 3:
            lat, lon, elevation = item
        else:
            raise ValueError(f"Expected (lat, lon) or (lat, lon, elevation), got {item!r}")

        if elevation is None:
            elevation = self._resolve(lat=lat, lon=lon)
        return PathPoint(lat=float(lat), lon=float(lon), elevation=int(elevation))

    def initialize(self, points: Iterable[PointInput]) -> None:
        """Load a path and measure its segments.

        Distance from the previous point is stored on each point (0 on the
        first). The turn angle between the legs before and after a vertex
        is stored on that vertex, so the first and last points keep 0.

        Args:
            points: Ordered PathPoints or (lat, lon[, elevation]) tuples

        Raises:
            ValueError: If an elevation is missing and no resolver is configured.
        """
        path = [self._to_path_point(item) for item in points]

        total_distance = 0
        max_angle = 0
        for i in range(1, len(path)):
            prev, point = path[i - 1], path[i]
            distance = prev.distance_to(other=point)
            point.distance = int(distance)
            total_distance = int(total_distance + distance)

            if i > 1:
                before = path[i - 2]
                angle = int(
                    GeoCalculator.turn_angle_deg(
                        prev_lat=before.lat,
                        prev_lon=before.lon,
                        lat=prev.lat,
                        lon=prev.lon,
                        next_lat=point.lat,
                        next_lon=point.lon,
                    )
                )
                prev.turn_angle = angle
                max_angle = max(max_angle, abs(angle))

        self._lifecycle.load_points()
        self._points = path
        self._total_distance = total_distance
        self._max_angle = max_angle
        self._stats = None
        logger.debug(f"Profile initialized: {len(path)} points, {total_distance}m, max angle {max_angle}°")

    def resample(self, step_m: int = ProfileConfig.DEFAULT_RESAMPLE_STEP_M) -> None:
        """Subdivide segments longer than step_m.

        A segment is split into parts = distance // step_m pieces when
        parts > 1. Intermediate points are interpolated on the integer
        micro-degree lattice and get their elevation from the resolver.
        Every piece, including the original destination, records
        distance // parts instead of a re-measured distance.

        Args:
            step_m: Maximum step length in meters

        Raises:
            TransitionNotAllowed: If called before initialize().
            ValueError: If step_m is not positive, or a split is needed without a resolver.
        """
        if step_m <= 0:
            raise ValueError(f"step_m must be positive, got {step_m}")

        resampled = self._points[:1]
        inserted = 0
        for prev, point in zip(self._points, self._points[1:]):
            parts = point.distance // step_m
            if parts > 1:
                part = point.distance // parts
                base_lat = GeoCalculator.degree_to_int(prev.lat)
                base_lon = GeoCalculator.degree_to_int(prev.lon)
                dest_lat = GeoCalculator.degree_to_int(point.lat)
                dest_lon = GeoCalculator.degree_to_int(point.lon)

                for j in range(1, parts):
                    lat_int = GeoCalculator.lerp_int(base=base_lat, dest=dest_lat, index=j, parts=parts)
                    lon_int = GeoCalculator.lerp_int(base=base_lon, dest=dest_lon, index=j, parts=parts)
                    lat = GeoCalculator.int_to_degree(lat_int)
                    lon = GeoCalculator.int_to_degree(lon_int)
                    resampled.append(
                        PathPoint(lat=lat, lon=lon, elevation=self._resolve(lat=lat, lon=lon), distance=part)
                    )
                inserted += parts - 1
                point = replace(point, distance=part)
            resampled.append(point)

        # A failed lookup above leaves points and state untouched
        self._lifecycle.resample_points()
        self._points = resampled
        self._stats = None
        logger.debug(f"Profile resampled at {step_m}m: {inserted} points inserted, {len(resampled)} total")

    def analyze(self) -> ProfileStats:
        """Run the statistical pass over the current points.

        Level segments extend both the running climb and the running descent,
        so a flat stretch does not break either run. A climb ends the running
        descent and vice versa; a finished run replaces the best one only if
        it is strictly longer by distance.

        Returns:
            ProfileStats, also available afterwards via the stats property.

        Raises:
            TransitionNotAllowed: If called before initialize().
        """
        self._lifecycle.finish_analysis()

        min_distance = ProfileConfig.MIN_STATS_DISTANCE_M
        total_distance = 0
        ascend = descend = 0
        ascend_distance = descend_distance = level_distance = 0
        ascend_run, descend_run = _Run(), _Run()
        best_ascend, best_descend = _Run(), _Run()

        last_elevation = self._points[0].elevation if self._points else 0
        for point in self._points[1:]:
            distance = point.distance
            total_distance += distance
            if distance > 0:
                delta = point.elevation - last_elevation

                if delta == 0:
                    level_distance += distance
                    ascend_run.distance += distance
                    descend_run.distance += distance
                elif delta > 0:
                    ascend += delta
                    ascend_distance += distance
                    ascend_run.elevation += delta
                    ascend_run.distance += distance

                    # end of continuous descend
                    if descend_run.distance > best_descend.distance:
                        best_descend = descend_run
                    descend_run = _Run()
                else:
                    descend += delta
                    descend_distance += distance
                    descend_run.elevation += delta
                    descend_run.distance += distance

                    # end of continuous ascend
                    if ascend_run.distance > best_ascend.distance:
                        best_ascend = ascend_run
                    ascend_run = _Run()

            last_elevation = point.elevation

        if ascend_run.distance > best_ascend.distance:
            best_ascend = ascend_run
        if descend_run.distance > best_descend.distance:
            best_descend = descend_run

        # Short denominators leave the inclines at 0
        total_incline = average_incline = average_decline = 0
        if total_distance > min_distance:
            total_incline = truncated_percent(value=ascend + descend, distance=total_distance)
        if ascend_distance > min_distance:
            average_incline = truncated_percent(value=ascend, distance=ascend_distance)
        if descend_distance > min_distance:
            average_decline = truncated_percent(value=descend, distance=descend_distance)

        self._stats = ProfileStats(
            ascend=ascend,
            descend=descend,
            total_distance=total_distance,
            level_distance=level_distance,
            ascend_distance=ascend_distance,
            descend_distance=descend_distance,
            total_incline=total_incline,
            average_incline=average_incline,
            average_decline=average_decline,
            continuous_ascend=best_ascend.elevation,
            continuous_ascend_distance=best_ascend.distance,
            continuous_descend=best_descend.elevation,
            continuous_descend_distance=best_descend.distance,
            max_angle=self._max_angle,
        )
        logger.debug(f"Profile analyzed: {self._stats}")
        return self._stats

    def __repr__(self) -> str:
        return f"PathProfiler(state={self.state}, points={len(self._points)})"
