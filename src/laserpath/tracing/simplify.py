"""
Path Simplifier - single-pass point decimation.

A point is kept only when it moves more than ``tolerance`` pixels along x or
y from the last kept point. The first point is always kept and the last point
is always restored, so a path never loses its endpoints. This is a linear,
deterministic pass, not Douglas-Peucker.
"""

from typing import List, Sequence

from laserpath.tracing.geometry import Path, Point


def simplify_points(points: Sequence[Point], tolerance: float = 1.0) -> List[Point]:
    """Decimate ``points``; inputs shorter than 3 points are returned as-is."""
    if len(points) < 3:
        return list(points)

    result = [points[0]]
    prev = points[0]
    for current in points[1:]:
        if abs(current[0] - prev[0]) > tolerance or abs(current[1] - prev[1]) > tolerance:
            result.append(current)
            prev = current

    if result[-1] != points[-1]:
        result.append(points[-1])
    return result


def simplify_path(path: Path, tolerance: float = 1.0) -> Path:
    """Return a new, decimated Path."""
    return Path(points=simplify_points(path.points, tolerance))
