"""
Zig-Zag Fill Planner - boustrophedon scanline coverage of a region.

Scanlines run from the region's top row to its bottom row every
``line_spacing`` pixels. Even scanlines are walked left to right, odd ones
right to left, so the tool finishes each line close to where the next one
starts. Contiguous runs of member pixels become Segments; runs shorter than
``min_segment_length`` are dropped.

Segments are returned in motion order. Each segment is stored with
``start_x <= end_x`` regardless of the direction it was discovered in.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List

import numpy as np

from laserpath.raster.grid import ClassificationMask
from laserpath.tracing.geometry import Region

logger = logging.getLogger(__name__)


class ScanDirection(Enum):
    """Direction a scanline is walked."""

    LEFT_TO_RIGHT = "ltr"
    RIGHT_TO_LEFT = "rtl"


@dataclass(frozen=True)
class Segment:
    """
    One contiguous filled run on a scanline (pixel space).

    Attributes:
        start_x: Leftmost pixel of the run
        end_x: Rightmost pixel of the run
        y: Scanline row
        direction: Direction of the scanline the run belongs to
        intensity: Mean engrave intensity of the run (0 = full engrave)
    """

    start_x: int
    end_x: int
    y: int
    direction: ScanDirection = ScanDirection.LEFT_TO_RIGHT
    intensity: int = 0

    def __post_init__(self) -> None:
        if self.start_x > self.end_x:
            raise ValueError(
                f"Segment start_x {self.start_x} is right of end_x {self.end_x}"
            )

    @property
    def length(self) -> int:
        return self.end_x - self.start_x


def _scan_row(
    members: set,
    min_x: int,
    max_x: int,
    y: int,
    direction: ScanDirection,
) -> List[Segment]:
    """Split one scanline into runs, in walk order."""
    if direction is ScanDirection.LEFT_TO_RIGHT:
        xs = range(min_x, max_x + 1)
    else:
        xs = range(max_x, min_x - 1, -1)

    segments: List[Segment] = []
    run_start = None
    run_end = None
    for x in xs:
        if x in members:
            if run_start is None:
                run_start = x
            run_end = x
        elif run_start is not None:
            segments.append(Segment(min(run_start, run_end), max(run_start, run_end), y, direction))
            run_start = None

    if run_start is not None:
        segments.append(Segment(min(run_start, run_end), max(run_start, run_end), y, direction))
    return segments


def plan_zigzag(
    region: Region,
    line_spacing: int = 3,
    min_segment_length: int = 3,
) -> List[Segment]:
    """
    Plan boustrophedon fill segments for ``region``.

    Parameters:
        region: Region to cover.
        line_spacing: Pixels between scanlines.
        min_segment_length: Runs with ``end_x - start_x`` below this are dropped.

    Returns:
        Segments in motion order.
    """
    if line_spacing < 1:
        raise ValueError(f"line_spacing must be >= 1, got {line_spacing}")
    if not region.points:
        return []

    min_x, min_y, max_x, max_y = region.bounds
    rows = region.rows()

    segments: List[Segment] = []
    for line_index, y in enumerate(range(min_y, max_y + 1, line_spacing)):
        direction = (
            ScanDirection.LEFT_TO_RIGHT if line_index % 2 == 0 else ScanDirection.RIGHT_TO_LEFT
        )
        for segment in _scan_row(rows.get(y, set()), min_x, max_x, y, direction):
            if segment.length >= min_segment_length:
                segments.append(segment)

    logger.debug(
        "Zig-zag fill: %d segments over rows %d..%d", len(segments), min_y, max_y
    )
    return segments


def annotate_intensity(
    segments: List[Segment], mask: ClassificationMask
) -> List[Segment]:
    """Return copies of ``segments`` carrying the mean mask intensity of each run."""
    annotated = []
    for seg in segments:
        run = mask.intensity[seg.y, seg.start_x : seg.end_x + 1]
        mean = int(round(float(np.mean(run)))) if run.size else 0
        annotated.append(
            Segment(seg.start_x, seg.end_x, seg.y, seg.direction, intensity=mean)
        )
    return annotated
