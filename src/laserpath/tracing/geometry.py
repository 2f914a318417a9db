"""
Pixel-space geometry used by the tracing passes.

Points are integer pixel coordinates. A Path is an ordered tool motion; a
Region is an unordered set of dark pixels grown from an interior seed, used
for area fill.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, NamedTuple, Set, Tuple

import numpy as np


class Point(NamedTuple):
    """Integer pixel coordinate."""

    x: int
    y: int


BoundingBox = Tuple[int, int, int, int]


def bounding_box(points: Iterable[Point]) -> BoundingBox:
    """Return (min_x, min_y, max_x, max_y); (0, 0, 0, 0) for no points."""
    points = list(points)
    if not points:
        return (0, 0, 0, 0)
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return (min(xs), min(ys), max(xs), max(ys))


@dataclass
class Path:
    """
    Ordered sequence of pixel points traced along a boundary.

    Attributes:
        points: Points in tool motion order
    """

    points: List[Point] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.points)

    def get_start_point(self) -> Point:
        """Get the first point of the path."""
        if not self.points:
            raise ValueError("Path has no points")
        return self.points[0]

    def get_end_point(self) -> Point:
        """Get the last point of the path."""
        if not self.points:
            raise ValueError("Path has no points")
        return self.points[-1]

    def get_length(self) -> float:
        """Total polyline length in pixels."""
        total = 0.0
        for a, b in zip(self.points, self.points[1:]):
            total += math.hypot(b.x - a.x, b.y - a.y)
        return total


@dataclass
class Region:
    """
    4-connected dark component reached from an interior pixel.

    Attributes:
        points: Member pixels in flood-fill discovery order (no ordering
            guarantee is implied)
    """

    points: List[Point] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.points)

    @property
    def bounds(self) -> BoundingBox:
        return bounding_box(self.points)

    def rows(self) -> Dict[int, Set[int]]:
        """Row membership index: y -> set of member x."""
        index: Dict[int, Set[int]] = {}
        for x, y in self.points:
            index.setdefault(y, set()).add(x)
        return index


class VisitedSet:
    """
    Pixels already assigned during one traversal pass.

    Each pass creates its own instance and drops it when done.
    """

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self._visited = np.zeros((height, width), dtype=bool)

    def __contains__(self, point: Tuple[int, int]) -> bool:
        x, y = point
        return bool(self._visited[y, x])

    def mark(self, x: int, y: int) -> None:
        self._visited[y, x] = True

    def count(self) -> int:
        return int(self._visited.sum())
