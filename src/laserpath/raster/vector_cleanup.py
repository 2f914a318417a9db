"""
Vector render cleanup - re-binarize rasterized SVG artwork.

Anti-aliased vector renders have soft edges and faint fills that the luma
classifier turns into noise. This pass keeps only pixels that are clearly
part of the drawing:

- a pixel darker than ``ink_level`` on every channel next to a clearly white
  neighbor (the outline of a shape), or
- a pixel darker than ``ink_level`` whose 11x11 neighborhood is mostly solid
  black (the inside of a filled shape).

Kept pixels become opaque black, everything else opaque white.
"""

from __future__ import annotations

import logging

import numpy as np

from laserpath.raster.classifier import unpremultiply
from laserpath.raster.grid import PixelGrid

logger = logging.getLogger(__name__)


def _window_sum(values: np.ndarray, radius: int) -> np.ndarray:
    """Sum of ``values`` over the in-bounds (2r+1)^2 window around each pixel."""
    h, w = values.shape
    integral = np.zeros((h + 1, w + 1), dtype=np.int64)
    integral[1:, 1:] = values.astype(np.int64).cumsum(axis=0).cumsum(axis=1)

    ys = np.arange(h)
    xs = np.arange(w)
    y0 = np.clip(ys - radius, 0, h)[:, None]
    y1 = np.clip(ys + radius + 1, 0, h)[:, None]
    x0 = np.clip(xs - radius, 0, w)[None, :]
    x1 = np.clip(xs + radius + 1, 0, w)[None, :]
    return integral[y1, x1] - integral[y0, x1] - integral[y1, x0] + integral[y0, x0]


def clean_vector_render(
    grid: PixelGrid,
    ink_level: int = 240,
    paper_level: int = 240,
    solid_level: int = 100,
    solid_radius: int = 5,
    solid_fraction: float = 0.75,
) -> PixelGrid:
    """
    Binarize a vector render composited on white.

    Parameters:
        grid: Rasterized vector drawing.
        ink_level: Channels below this mark a candidate ink pixel.
        paper_level: Channels above this mark a white neighbor.
        solid_level: Channels below this count as solid black.
        solid_radius: Half-size of the solid-fill window (5 -> 11x11).
        solid_fraction: Solid-black share of the window needed to keep a pixel.

    Returns:
        New opaque black/white PixelGrid of the same size.
    """
    rgb, _ = unpremultiply(grid.as_rgba())
    ink = (rgb < ink_level).all(axis=-1)
    paper = (rgb > paper_level).all(axis=-1)
    solid = (rgb < solid_level).all(axis=-1)

    # Any white pixel in the 3x3 window; the center itself is never white when inked
    near_paper = _window_sum(paper, 1) > 0

    in_bounds = _window_sum(np.ones_like(solid), solid_radius)
    solid_count = _window_sum(solid, solid_radius)
    solid_fill = solid_count > (in_bounds * solid_fraction).astype(np.int64)

    keep = ink & (near_paper | solid_fill)

    out = np.full((grid.height, grid.width, 4), 255, dtype=np.uint8)
    out[keep, :3] = 0
    logger.debug("Vector cleanup kept %d of %d pixels", int(keep.sum()), keep.size)
    return PixelGrid(out)
