"""Floor footprint geometry built on Shapely.

Floors are modelled as axis-aligned rectangles anchored at the origin, so a
floor fits on top of another exactly when the lower rectangle covers the
upper one.
"""

from __future__ import annotations

from shapely.geometry import Polygon, box


def footprint(width: float, length: float) -> Polygon:
    """Return the origin-anchored ``width`` × ``length`` rectangle."""
    return box(0.0, 0.0, width, length)


def supports(lower: Polygon, upper: Polygon) -> bool:
    """True if the *lower* footprint can carry the *upper* one."""
    return lower.covers(upper)


def overhang(lower: Polygon, upper: Polygon) -> float:
    """Area of *upper* that is not carried by *lower* (0.0 when supported)."""
    return upper.difference(lower).area
