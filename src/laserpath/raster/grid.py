"""
Pixel grid and classification mask containers.

A PixelGrid is the decoded image handed to the pipeline; a ClassificationMask
is the per-pixel engrave intensity derived from it. Both wrap read-only numpy
arrays indexed ``[y, x]``.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from laserpath.core.exceptions import GridError

#: Intensity of an untouched (background) pixel.
BACKGROUND = 255


def _frozen(array: np.ndarray) -> np.ndarray:
    array = np.array(array, dtype=np.uint8, copy=True)
    array.setflags(write=False)
    return array


@dataclass(frozen=True)
class PixelGrid:
    """
    Decoded image samples.

    Attributes:
        pixels: uint8 array, either (H, W, 4) alpha-premultiplied RGBA or
            (H, W) grayscale
    """

    pixels: np.ndarray

    def __post_init__(self) -> None:
        pixels = np.asarray(self.pixels)
        if pixels.ndim not in (2, 3) or (pixels.ndim == 3 and pixels.shape[2] != 4):
            raise GridError(
                "Pixel grid must be (H, W) grayscale or (H, W, 4) RGBA",
                shape=tuple(pixels.shape),
            )
        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise GridError("Pixel grid has zero width or height", shape=tuple(pixels.shape))
        object.__setattr__(self, "pixels", _frozen(pixels))

    @classmethod
    def from_rgba(cls, rgba: np.ndarray, premultiplied: bool = False) -> "PixelGrid":
        """Build a grid from an (H, W, 4) RGBA array.

        Straight-alpha input (the way Pillow decodes) is premultiplied here.
        """
        rgba = np.asarray(rgba)
        if rgba.ndim != 3 or rgba.shape[-1] != 4:
            raise GridError("RGBA array must have shape (H, W, 4)", shape=tuple(rgba.shape))
        if premultiplied:
            return cls(rgba.astype(np.uint8))
        data = rgba.astype(np.uint32)
        alpha = data[..., 3:4]
        out = data.copy()
        out[..., :3] = data[..., :3] * alpha // 255
        return cls(out.astype(np.uint8))

    @classmethod
    def from_gray(cls, gray: np.ndarray) -> "PixelGrid":
        """Build a grid from an (H, W) intensity array."""
        gray = np.asarray(gray)
        if gray.ndim != 2:
            raise GridError("Grayscale array must have shape (H, W)", shape=tuple(gray.shape))
        return cls(gray.astype(np.uint8))

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def is_grayscale(self) -> bool:
        return self.pixels.ndim == 2

    def as_rgba(self) -> np.ndarray:
        """Premultiplied RGBA view; grayscale grids read as opaque gray."""
        if not self.is_grayscale:
            return self.pixels
        rgba = np.empty((self.height, self.width, 4), dtype=np.uint8)
        rgba[..., :3] = self.pixels[..., None]
        rgba[..., 3] = 255
        return rgba


@dataclass(frozen=True)
class ClassificationMask:
    """
    Per-pixel engrave intensity, 0 = full engrave, 255 = untouched.

    Attributes:
        intensity: (H, W) uint8 array
    """

    intensity: np.ndarray

    def __post_init__(self) -> None:
        intensity = np.asarray(self.intensity)
        if intensity.ndim != 2:
            raise GridError(
                "Classification mask must be two-dimensional",
                shape=tuple(intensity.shape),
            )
        object.__setattr__(self, "intensity", _frozen(intensity))

    @classmethod
    def background(cls, width: int, height: int) -> "ClassificationMask":
        """An all-background mask."""
        return cls(np.full((height, width), BACKGROUND, dtype=np.uint8))

    @property
    def width(self) -> int:
        return int(self.intensity.shape[1])

    @property
    def height(self) -> int:
        return int(self.intensity.shape[0])

    def __getitem__(self, xy: tuple[int, int]) -> int:
        x, y = xy
        return int(self.intensity[y, x])

    def dark_mask(self, cutoff: int) -> np.ndarray:
        """Boolean (H, W) array of pixels below the background cutoff."""
        return self.intensity < cutoff

    def boundary_mask(self, cutoff: int) -> np.ndarray:
        """Boolean (H, W) array of boundary pixels.

        A boundary pixel is dark and has at least one 8-neighbor that is
        light or lies outside the grid.
        """
        dark = self.dark_mask(cutoff)
        # Padding with False makes the grid edge count as a light neighbor
        padded = np.pad(dark, 1, mode="constant", constant_values=False)
        h, w = dark.shape
        all_dark = np.ones_like(dark)
        for dy in (-1, 0, 1):
            for dx in (-1, 0, 1):
                if dx == 0 and dy == 0:
                    continue
                all_dark &= padded[1 + dy : 1 + dy + h, 1 + dx : 1 + dx + w]
        return dark & ~all_dark

    def interior_mask(self, cutoff: int) -> np.ndarray:
        """Boolean (H, W) array of dark pixels that are not boundary pixels."""
        return self.dark_mask(cutoff) & ~self.boundary_mask(cutoff)
