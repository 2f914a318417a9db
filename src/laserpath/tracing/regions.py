"""
Region Filler - connected dark areas for scanline fill.

Only an unvisited interior pixel (dark and not a boundary pixel) may seed a
region, so thin strokes with no interior are left to the outline pass. From
the seed a breadth-first 4-connected flood fill collects every unvisited dark
pixel it reaches, boundary pixels included, so a solid block yields one region
covering its full area. Components smaller than ``min_area`` are dropped.

This pass owns its own VisitedSet, independent of the boundary pass.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import List

from laserpath.raster.grid import ClassificationMask
from laserpath.tracing.geometry import Point, Region, VisitedSet

logger = logging.getLogger(__name__)

NEIGHBORS_4 = ((-1, 0), (1, 0), (0, -1), (0, 1))


def flood_fill(
    dark: List[List[bool]],
    start_x: int,
    start_y: int,
    visited: VisitedSet,
) -> Region:
    """
    Collect the 4-connected dark component containing the seed.

    Parameters:
        dark: Row-major dark flags, ``dark[y][x]``.
        start_x, start_y: Seed pixel; must be unvisited.
        visited: The pass's visited set, updated in place.

    Returns:
        Region with points in discovery order.
    """
    height = len(dark)
    width = len(dark[0]) if height else 0

    region = Region(points=[Point(start_x, start_y)])
    visited.mark(start_x, start_y)
    queue = deque([(start_x, start_y)])

    while queue:
        x, y = queue.popleft()
        for dx, dy in NEIGHBORS_4:
            nx, ny = x + dx, y + dy
            if nx < 0 or ny < 0 or nx >= width or ny >= height:
                continue
            if (nx, ny) in visited or not dark[ny][nx]:
                continue
            visited.mark(nx, ny)
            region.points.append(Point(nx, ny))
            queue.append((nx, ny))

    return region


class RegionFiller:
    """
    Groups dark pixels around interior seeds into fillable regions.

    Usage:
        filler = RegionFiller(background_cutoff=230, min_area=200)
        regions = filler.fill(mask)
    """

    def __init__(self, background_cutoff: int = 230, min_area: int = 200):
        self.background_cutoff = background_cutoff
        self.min_area = min_area

    def fill(self, mask: ClassificationMask) -> List[Region]:
        """Return every seeded dark component of at least ``min_area`` pixels."""
        dark = mask.dark_mask(self.background_cutoff).tolist()
        interior = mask.interior_mask(self.background_cutoff).tolist()
        visited = VisitedSet(mask.width, mask.height)

        regions: List[Region] = []
        dropped = 0
        for y in range(mask.height):
            row = interior[y]
            for x in range(mask.width):
                if not row[x] or (x, y) in visited:
                    continue
                region = flood_fill(dark, x, y, visited)
                if len(region) >= self.min_area:
                    regions.append(region)
                else:
                    dropped += 1

        logger.info(
            "Region fill: %d regions, %d small components dropped",
            len(regions), dropped,
        )
        return regions


def extract_fill_regions(
    mask: ClassificationMask, background_cutoff: int = 230, min_area: int = 200
) -> List[Region]:
    """Fill ``mask`` with a one-off RegionFiller."""
    return RegionFiller(background_cutoff, min_area).fill(mask)
