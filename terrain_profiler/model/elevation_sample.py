"""ElevationSample - Result of an elevation store lookup."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ElevationSample:
    """Interpolated elevation plus whether the query was inside the store.

    Out-of-bounds lookups still carry elevation 0 so numeric callers keep
    working; in_bounds tells a genuine sea-level 0 apart from a miss.

    Attributes:
        elevation: Elevation in meters (integer)
        in_bounds: False if the point was outside the store's bounding box
    """

    elevation: int
    in_bounds: bool = True
