"""
Tracing module - Path and region extraction from classification masks.

- BoundaryTracer: greedy outline walks along dark/light borders
- RegionFiller: 4-connected flood fill of dark pixels from interior seeds
- simplify_path: single-pass decimation that keeps endpoints
- plan_zigzag: boustrophedon scanline segments for area fill
"""

from laserpath.tracing.boundary import BoundaryTracer, extract_outline_paths, trace_path
from laserpath.tracing.geometry import Path, Point, Region, VisitedSet, bounding_box
from laserpath.tracing.regions import RegionFiller, extract_fill_regions, flood_fill
from laserpath.tracing.simplify import simplify_path, simplify_points
from laserpath.tracing.zigzag import ScanDirection, Segment, annotate_intensity, plan_zigzag

__all__ = [
    "BoundaryTracer",
    "Path",
    "Point",
    "Region",
    "RegionFiller",
    "ScanDirection",
    "Segment",
    "VisitedSet",
    "annotate_intensity",
    "bounding_box",
    "extract_fill_regions",
    "extract_outline_paths",
    "flood_fill",
    "plan_zigzag",
    "simplify_path",
    "simplify_points",
    "trace_path",
]
