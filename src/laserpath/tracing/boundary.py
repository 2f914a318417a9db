"""
Boundary Tracer - outline paths along dark/light borders.

A boundary pixel is dark (intensity below the background cutoff) and touches
a light pixel or the grid edge through one of its 8 neighbors. The grid is
scanned row-major; every unvisited boundary pixel seeds a path that is walked
greedily to the nearest unvisited boundary neighbor until none is left.

The walk never backtracks. At a branch point it follows one arm; the other
arms stay unvisited and are picked up later by the scan as separate, shorter
paths. Paths below ``min_points`` are dropped as noise.
"""

from __future__ import annotations

import logging
import math
from typing import List

from laserpath.raster.grid import ClassificationMask
from laserpath.tracing.geometry import Path, Point, VisitedSet

logger = logging.getLogger(__name__)

# Enumeration order breaks distance ties: left, right, up, down, diagonals
NEIGHBORS_8 = (
    (-1, 0), (1, 0), (0, -1), (0, 1),
    (-1, -1), (-1, 1), (1, -1), (1, 1),
)


def trace_path(
    boundary: List[List[bool]],
    start_x: int,
    start_y: int,
    visited: VisitedSet,
) -> Path:
    """
    Walk a boundary from (start_x, start_y).

    Parameters:
        boundary: Row-major boundary flags, ``boundary[y][x]``.
        start_x, start_y: Seed pixel; must be an unvisited boundary pixel.
        visited: The pass's visited set, updated in place.

    Returns:
        Path in walk order, starting at the seed.
    """
    height = len(boundary)
    width = len(boundary[0]) if height else 0

    path = Path(points=[Point(start_x, start_y)])
    visited.mark(start_x, start_y)

    x, y = start_x, start_y
    while True:
        best = None
        best_distance = math.inf
        for dx, dy in NEIGHBORS_8:
            nx, ny = x + dx, y + dy
            if nx < 0 or ny < 0 or nx >= width or ny >= height:
                continue
            if (nx, ny) in visited or not boundary[ny][nx]:
                continue
            distance = math.hypot(dx, dy)
            if distance < best_distance:
                best_distance = distance
                best = (nx, ny)

        if best is None:
            return path

        x, y = best
        path.points.append(Point(x, y))
        visited.mark(x, y)


class BoundaryTracer:
    """
    Extracts outline paths from a ClassificationMask.

    Usage:
        tracer = BoundaryTracer(background_cutoff=230)
        paths = tracer.trace(mask)
    """

    def __init__(self, background_cutoff: int = 230, min_points: int = 5):
        self.background_cutoff = background_cutoff
        self.min_points = min_points

    def trace(self, mask: ClassificationMask) -> List[Path]:
        """Trace every boundary of ``mask`` into paths, in seed scan order."""
        boundary = mask.boundary_mask(self.background_cutoff).tolist()
        visited = VisitedSet(mask.width, mask.height)

        paths: List[Path] = []
        dropped = 0
        for y in range(mask.height):
            row = boundary[y]
            for x in range(mask.width):
                if not row[x] or (x, y) in visited:
                    continue
                path = trace_path(boundary, x, y, visited)
                if len(path) >= self.min_points:
                    paths.append(path)
                else:
                    dropped += 1

        logger.info(
            "Boundary tracing: %d paths, %d fragments dropped, %d pixels visited",
            len(paths), dropped, visited.count(),
        )
        return paths


def extract_outline_paths(
    mask: ClassificationMask, background_cutoff: int = 230, min_points: int = 5
) -> List[Path]:
    """Trace ``mask`` with a one-off BoundaryTracer."""
    return BoundaryTracer(background_cutoff, min_points).trace(mask)
