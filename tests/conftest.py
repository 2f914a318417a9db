"""
Pytest configuration and shared fixtures.
"""

import tempfile
from pathlib import Path

import numpy as np
import pytest

from laserpath.raster.grid import PixelGrid


def gray_grid(width, height, fill=255, dark_boxes=()):
    """Build a grayscale grid with black boxes given as (x0, y0, x1, y1) inclusive."""
    pixels = np.full((height, width), fill, dtype=np.uint8)
    for x0, y0, x1, y1 in dark_boxes:
        pixels[y0 : y1 + 1, x0 : x1 + 1] = 0
    return PixelGrid.from_gray(pixels)


def rgba_grid(width, height, background, boxes=()):
    """Build an opaque RGBA grid with colored boxes given as ((x0, y0, x1, y1), rgb)."""
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[...] = (*background, 255)
    for (x0, y0, x1, y1), rgb in boxes:
        pixels[y0 : y1 + 1, x0 : x1 + 1] = (*rgb, 255)
    return PixelGrid.from_rgba(pixels)


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def blank_grid():
    """A 20x20 all-white grid."""
    return gray_grid(20, 20)


@pytest.fixture
def square_grid():
    """A 10x10 black square (pixels 5..14) on a 20x20 white grid."""
    return gray_grid(20, 20, dark_boxes=[(5, 5, 14, 14)])


@pytest.fixture
def rect_grid():
    """A 20x20 black rectangle (pixels 10..29) on a 40x40 white grid.

    Its 400 pixels are enough for area fill.
    """
    return gray_grid(40, 40, dark_boxes=[(10, 10, 29, 29)])


@pytest.fixture
def sample_config_dir(temp_dir):
    """Create a sample configuration directory with one profile."""
    config_dir = temp_dir / "config"
    (config_dir / "profiles").mkdir(parents=True)

    profile = """
target_width: 50
target_height: 40
offset: 2.5
threshold: 100

trace:
  min_region_area: 50
  line_spacing: 2

emitter:
  laser_power: 800
"""
    (config_dir / "profiles" / "plywood.yaml").write_text(profile)
    return config_dir
