"""
Image loading - decode image files into PixelGrids.

Raster formats are decoded with Pillow. SVG documents are rasterized with
cairosvg at their intrinsic size and composited onto a white background,
matching how the drawing would look on paper.

This module is the only place in laserpath that reads image files; the
pipeline itself works on in-memory grids.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from laserpath.core.exceptions import ImageLoadError
from laserpath.raster.grid import PixelGrid

logger = logging.getLogger(__name__)

RASTER_EXTENSIONS = {".png", ".jpg", ".jpeg"}
VECTOR_EXTENSIONS = {".svg"}
SUPPORTED_EXTENSIONS = RASTER_EXTENSIONS | VECTOR_EXTENSIONS


def is_vector_source(path: Path | str) -> bool:
    """True when ``path`` names a vector document."""
    return Path(path).suffix.lower() in VECTOR_EXTENSIONS


def grid_from_image(image: Image.Image) -> PixelGrid:
    """Convert a Pillow image to a premultiplied RGBA PixelGrid."""
    rgba = np.asarray(image.convert("RGBA"), dtype=np.uint8)
    return PixelGrid.from_rgba(rgba)


def _flatten_on_white(image: Image.Image) -> Image.Image:
    background = Image.new("RGBA", image.size, (255, 255, 255, 255))
    return Image.alpha_composite(background, image.convert("RGBA"))


def _rasterize_svg(data: bytes) -> Image.Image:
    import cairosvg

    png_data = cairosvg.svg2png(bytestring=data)
    return _flatten_on_white(Image.open(io.BytesIO(png_data)))


def load_image(path: Path | str) -> PixelGrid:
    """
    Load an image file into a PixelGrid.

    Args:
        path: PNG, JPEG or SVG file.

    Returns:
        PixelGrid of the decoded (or rasterized) image

    Raises:
        ImageLoadError: If the format is unsupported or decoding fails
    """
    path = Path(path)
    ext = path.suffix.lower()
    if ext not in SUPPORTED_EXTENSIONS:
        raise ImageLoadError(
            f"Unsupported image format: {ext or '(none)'}",
            path=str(path),
            details={"supported": sorted(SUPPORTED_EXTENSIONS)},
        )

    try:
        data = path.read_bytes()
    except OSError as e:
        raise ImageLoadError(f"Cannot read image: {path}", path=str(path), details={"error": str(e)})

    try:
        if ext in VECTOR_EXTENSIONS:
            image = _rasterize_svg(data)
        else:
            image = Image.open(io.BytesIO(data))
            image.load()
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise ImageLoadError(f"Failed to decode image: {path}", path=str(path), details={"error": str(e)})

    grid = grid_from_image(image)
    logger.info("Loaded %s: %dx%d", path.name, grid.width, grid.height)
    return grid
