"""ProfileStats - Aggregates of an analyzed elevation profile."""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class ProfileStats:
    """Result of PathProfiler.analyze().

    All values are integers. Distances in meters, elevations in meters,
    inclines in percent (rise/run * 100, truncated toward zero).

    Attributes:
        ascend: Sum of positive elevation deltas
        descend: Sum of negative elevation deltas (<= 0)
        total_distance: Sum of all segment distances
        level_distance: Distance over segments without elevation change
        ascend_distance: Distance over climbing segments
        descend_distance: Distance over descending segments
        total_incline: Net steepness 100 * (ascend + descend) / total_distance
        average_incline: Mean climb steepness 100 * ascend / ascend_distance
        average_decline: Mean descent steepness 100 * descend / descend_distance (<= 0)
        continuous_ascend: Elevation gained on the longest continuous climb
        continuous_ascend_distance: Length of the longest continuous climb
        continuous_descend: Elevation lost on the longest continuous descent (<= 0)
        continuous_descend_distance: Length of the longest continuous descent
        max_angle: Sharpest turn along the path in degrees
    """

    ascend: int = 0
    descend: int = 0
    total_distance: int = 0
    level_distance: int = 0
    ascend_distance: int = 0
    descend_distance: int = 0
    total_incline: int = 0
    average_incline: int = 0
    average_decline: int = 0
    continuous_ascend: int = 0
    continuous_ascend_distance: int = 0
    continuous_descend: int = 0
    continuous_descend_distance: int = 0
    max_angle: int = 0

    @property
    def net_elevation_change(self) -> int:
        """Elevation difference between the last and the first point."""
        return self.ascend + self.descend

    def to_dict(self) -> dict[str, Any]:
        """Plain dictionary, e.g. for annotating graph edges."""
        return asdict(self)
