"""
Tests for vector render cleanup.
"""

import numpy as np

from conftest import gray_grid
from laserpath.raster.grid import PixelGrid
from laserpath.raster.vector_cleanup import clean_vector_render


def _is_black(grid):
    return (grid.pixels[..., :3] == 0).all(axis=-1)


class TestCleanVectorRender:
    """Tests for re-binarizing rasterized SVG art."""

    def test_output_is_opaque_black_and_white(self, square_grid):
        """Test every output pixel is opaque and pure black or white."""
        out = clean_vector_render(square_grid)
        assert not out.is_grayscale
        assert np.all(out.pixels[..., 3] == 255)
        assert set(np.unique(out.pixels[..., :3]).tolist()) <= {0, 255}

    def test_uniform_gray_is_dropped(self):
        """Test faint fill with no paper edge and no solid ink disappears."""
        grid = PixelGrid.from_gray(np.full((12, 12), 200, dtype=np.uint8))
        out = clean_vector_render(grid)
        assert not _is_black(out).any()

    def test_solid_shape_kept(self, rect_grid):
        """Test a solid black block keeps its edge and its solid core."""
        out = clean_vector_render(rect_grid)
        black = _is_black(out)
        assert black[10, 10:30].all()
        assert black[15:25, 15:25].all()
        assert not black[9, 9]

    def test_thin_band_behind_edge_dropped(self, rect_grid):
        """Test pixels just inside the edge lack both paper and solid support."""
        black = _is_black(clean_vector_render(rect_grid))
        # 11x11 window at (11, 11) sees only 49 solid pixels of 121
        assert not black[11, 11]

    def test_gray_shape_keeps_outline(self):
        """Test a light gray block keeps only its edge pixels."""
        pixels = np.full((40, 40), 255, dtype=np.uint8)
        pixels[10:30, 10:30] = 200
        out = clean_vector_render(PixelGrid.from_gray(pixels))
        black = _is_black(out)
        assert int(black.sum()) == 76
        assert black[10, 10] and black[29, 20]
        assert not black[20, 20]

    def test_antialiased_edge_dropped(self):
        """Test near-white fringe pixels are not ink."""
        grid = gray_grid(20, 20, fill=245)
        out = clean_vector_render(grid)
        assert not _is_black(out).any()

    def test_transparent_reads_as_paper(self):
        """Test transparent pixels count as white neighbors."""
        rgba = np.zeros((5, 5, 4), dtype=np.uint8)
        rgba[2, 2] = (150, 150, 150, 255)
        out = clean_vector_render(PixelGrid.from_rgba(rgba))
        black = _is_black(out)
        assert black[2, 2]
        assert int(black.sum()) == 1
