"""
Tests for boundary tracing.
"""

import numpy as np
import pytest

from laserpath.raster.classifier import classify
from laserpath.raster.grid import ClassificationMask
from laserpath.tracing.boundary import BoundaryTracer, extract_outline_paths, trace_path
from laserpath.tracing.geometry import Path, Point, VisitedSet


def _mask(width, height, dark):
    intensity = np.full((height, width), 255, dtype=np.uint8)
    for x, y in dark:
        intensity[y, x] = 0
    return ClassificationMask(intensity)


class TestTracePath:
    """Tests for the greedy boundary walk."""

    def test_walk_order_on_full_block(self):
        """Test neighbor enumeration order decides ties."""
        boundary = [[True] * 3 for _ in range(3)]
        visited = VisitedSet(3, 3)
        path = trace_path(boundary, 1, 1, visited)
        assert path.points == [
            Point(1, 1), Point(0, 1), Point(0, 0), Point(1, 0), Point(2, 0),
            Point(2, 1), Point(2, 2), Point(1, 2), Point(0, 2),
        ]
        assert visited.count() == 9

    def test_prefers_orthogonal_over_diagonal(self):
        """Test an orthogonal neighbor wins over a diagonal one."""
        boundary = [
            [True, False, False],
            [False, True, True],
            [False, False, False],
        ]
        visited = VisitedSet(3, 3)
        path = trace_path(boundary, 1, 1, visited)
        assert path.points == [Point(1, 1), Point(2, 1)]

    def test_follows_diagonal_when_alone(self):
        """Test diagonal steps are taken when nothing closer is left."""
        boundary = [
            [True, False, False],
            [False, True, False],
            [False, False, True],
        ]
        path = trace_path(boundary, 0, 0, VisitedSet(3, 3))
        assert path.points == [Point(0, 0), Point(1, 1), Point(2, 2)]

    def test_skips_visited(self):
        """Test already visited pixels are never revisited."""
        boundary = [[True, True, True]]
        visited = VisitedSet(3, 1)
        visited.mark(1, 0)
        path = trace_path(boundary, 0, 0, visited)
        assert path.points == [Point(0, 0)]


class TestBoundaryTracer:
    """Tests for full-mask tracing."""

    def test_blank_mask(self, blank_grid):
        """Test a white image yields no paths."""
        assert BoundaryTracer().trace(classify(blank_grid)) == []

    def test_square_outline(self, square_grid):
        """Test a filled square yields one closed-ring path."""
        paths = BoundaryTracer().trace(classify(square_grid))
        assert len(paths) == 1
        path = paths[0]
        assert len(path) == 36
        assert path.get_start_point() == Point(5, 5)
        assert path.points[9] == Point(14, 5)
        assert path.points[18] == Point(14, 14)
        assert path.get_end_point() == Point(5, 6)

    def test_rectangle_outline(self, rect_grid):
        """Test the ring of a 20x20 block."""
        paths = extract_outline_paths(classify(rect_grid))
        assert [len(p) for p in paths] == [76]

    def test_branch_splits_into_paths(self):
        """Test a T junction yields one path per arm."""
        dark = [(x, 5) for x in range(2, 13)] + [(7, y) for y in range(6, 13)]
        paths = BoundaryTracer().trace(_mask(15, 15, dark))
        assert len(paths) == 2
        assert paths[0].get_start_point() == Point(2, 5)
        assert len(paths[0]) == 11
        assert paths[0].get_end_point() == Point(12, 5)
        assert paths[1].get_start_point() == Point(7, 6)
        assert len(paths[1]) == 7

    def test_short_fragments_dropped(self):
        """Test paths below the point minimum are discarded."""
        mask = _mask(10, 10, [(1, 1), (2, 1), (3, 1), (4, 1)])
        assert BoundaryTracer(min_points=5).trace(mask) == []
        assert len(BoundaryTracer(min_points=4).trace(mask)) == 1

    def test_grid_edge_counts_as_light(self):
        """Test a fully dark grid is traced along its border."""
        mask = ClassificationMask(np.zeros((4, 4), dtype=np.uint8))
        paths = BoundaryTracer().trace(mask)
        assert sum(len(p) for p in paths) == 12

    def test_background_cutoff(self):
        """Test pixels at or above the cutoff are light."""
        intensity = np.full((6, 6), 255, dtype=np.uint8)
        intensity[1:5, 1:5] = 230
        mask = ClassificationMask(intensity)
        assert BoundaryTracer(background_cutoff=230).trace(mask) == []
        assert len(BoundaryTracer(background_cutoff=231).trace(mask)) == 1

    def test_pixels_belong_to_one_path(self, rect_grid):
        """Test no pixel appears in two paths."""
        mask = classify(rect_grid)
        paths = BoundaryTracer(min_points=1).trace(mask)
        seen = [p for path in paths for p in path.points]
        assert len(seen) == len(set(seen))


class TestPath:
    """Tests for the Path container."""

    def test_length(self):
        """Test polyline length."""
        path = Path(points=[Point(0, 0), Point(3, 4), Point(3, 6)])
        assert path.get_length() == pytest.approx(7.0)

    def test_empty_path_endpoints(self):
        """Test endpoints of an empty path raise."""
        with pytest.raises(ValueError):
            Path().get_start_point()
        with pytest.raises(ValueError):
            Path().get_end_point()
