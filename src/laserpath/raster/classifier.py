"""
Pixel Classifier - maps a decoded pixel grid to per-pixel engrave intensity.

Strategies:
1. luma      - Rec.601 luma with a soft threshold (tonal) or a hard cut
2. bands     - Nearest dominant color, one discrete intensity per color group
                (flat-color sources such as rendered logos and icons)
3. inverted  - Bright warm background with a sparse dark foreground: the
                background is engraved and the dark artwork is left untouched

Dominant colors come from a histogram of quantized colors (each channel
truncated to ``quant_bits``). Bucket ranking uses an explicit total order,
count descending then key ascending, so output never depends on histogram
iteration order.

In bands mode the levels (0, then 127) go to the dominant colors in rank
order, skipping any dominant color whose luma is above ``high_cutoff``. Such a
color is the substrate showing through, usually the white page around a logo,
and is left at 255. Otherwise a page that outnumbers the artwork would be
engraved solid.

Intensity convention: 0 = full engrave, 255 = untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Mapping, Optional, Tuple

import numpy as np

from laserpath.core.config import ClassifierSettings
from laserpath.raster.grid import BACKGROUND, ClassificationMask, PixelGrid

logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]


class ClassificationMode(Enum):
    """Strategy picked by the classifier for a grid."""

    EMPTY = "empty"
    LUMA = "luma"
    BANDS = "bands"
    INVERTED = "inverted"


@dataclass(frozen=True)
class ColorBucket:
    """
    One histogram entry.

    Attributes:
        key: Quantized color packed as ``r << 16 | g << 8 | b``
        count: Number of visible pixels in the bucket
    """

    key: int
    count: int

    @property
    def channels(self) -> RGB:
        """Quantized (r, g, b)."""
        return ((self.key >> 16) & 0xFF, (self.key >> 8) & 0xFF, self.key & 0xFF)

    def representative(self, bits: int) -> RGB:
        """8-bit color at the bucket's quantized value."""
        top = (1 << bits) - 1
        r, g, b = self.channels
        return (r * 255 // top, g * 255 // top, b * 255 // top)


@dataclass
class ColorAnalysis:
    """Histogram statistics of the visible pixels of a grid."""

    histogram: dict[int, int] = field(default_factory=dict)
    total: int = 0
    dark: int = 0
    light: int = 0
    dominant: List[ColorBucket] = field(default_factory=list)
    distinct_groups: bool = False
    yellow_dominant: bool = False
    sparse_dark: bool = False

    @property
    def is_empty(self) -> bool:
        return self.total == 0

    @property
    def inverse_engrave(self) -> bool:
        """Yellow background with a sparse dark foreground."""
        return self.yellow_dominant and self.sparse_dark

    @property
    def top_two_coverage(self) -> float:
        if self.total == 0 or len(self.dominant) < 2:
            return 0.0
        return (self.dominant[0].count + self.dominant[1].count) / self.total


# ---------------------------------------------------------------------------
# Pixel math
# ---------------------------------------------------------------------------


def unpremultiply(rgba: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Undo alpha premultiplication.

    Parameters:
        rgba: (H, W, 4) premultiplied uint8 samples.

    Returns:
        (rgb, alpha) as int64 arrays. Fully transparent pixels read as white.
    """
    data = rgba.astype(np.int64)
    alpha = data[..., 3]
    rgb = np.full(data.shape[:2] + (3,), 255, dtype=np.int64)
    visible = alpha > 0
    rgb[visible] = data[..., :3][visible] * 255 // alpha[visible][:, None]
    np.clip(rgb, 0, 255, out=rgb)
    return rgb, alpha


def luma(rgb: np.ndarray) -> np.ndarray:
    """Integer Rec.601 luma, ``(299*R + 587*G + 114*B) // 1000``."""
    rgb = np.asarray(rgb, dtype=np.int64)
    return (299 * rgb[..., 0] + 587 * rgb[..., 1] + 114 * rgb[..., 2]) // 1000


def soft_threshold(gray: np.ndarray, low: int = 50, high: int = 230) -> np.ndarray:
    """
    Map luma to engrave intensity.

    Below ``low`` is full engrave (0), above ``high`` is untouched (255);
    values in between are stretched linearly over [0, 255] and truncated.
    """
    gray = np.asarray(gray, dtype=np.int64)
    span = float(max(high - low, 1))
    ramp = ((gray - low) / span * 255.0).astype(np.int64)
    out = np.where(gray < low, 0, np.where(gray > high, BACKGROUND, ramp))
    return np.clip(out, 0, BACKGROUND)


def quantize_keys(rgb: np.ndarray, bits: int = 4) -> np.ndarray:
    """Pack channels truncated to ``bits`` into ``r << 16 | g << 8 | b`` keys."""
    q = np.asarray(rgb, dtype=np.int64) >> (8 - bits)
    return (q[..., 0] << 16) | (q[..., 1] << 8) | q[..., 2]


# ---------------------------------------------------------------------------
# Histogram analysis
# ---------------------------------------------------------------------------


def rank_buckets(histogram: Mapping[int, int], count: int) -> List[ColorBucket]:
    """
    Return the ``count`` most populated buckets.

    Ordered by pixel count descending; equal counts are ordered by ascending
    key, so the result is the same for any iteration order of ``histogram``.
    """
    ranked = sorted(histogram.items(), key=lambda item: (-item[1], item[0]))
    return [ColorBucket(key=int(k), count=int(c)) for k, c in ranked[:count]]


def has_distinct_color_groups(
    buckets: List[ColorBucket], total: int, coverage: float = 0.7
) -> bool:
    """True when the two leading buckets cover more than ``coverage`` of pixels."""
    if len(buckets) < 2 or total <= 0:
        return False
    return (buckets[0].count + buckets[1].count) / total > coverage


def is_yellow_dominant(
    histogram: Mapping[int, int], total: int, ratio: float = 0.5, bits: int = 4
) -> bool:
    """
    True when warm yellow buckets cover more than ``ratio`` of pixels.

    A bucket is yellow when red and green are both above a floor and both
    more than twice the blue level (quantized values; the floor is 10 at 4
    bits and scales with ``bits``).
    """
    if total <= 0:
        return False
    floor = (10 << bits) // 16
    yellow = 0
    for key, count in histogram.items():
        r = (key >> 16) & 0xFF
        g = (key >> 8) & 0xFF
        b = key & 0xFF
        if r > floor and g > floor and r > b * 2 and g > b * 2:
            yellow += count
    return yellow / total > ratio


# ---------------------------------------------------------------------------
# Classifier
# ---------------------------------------------------------------------------


class PixelClassifier:
    """
    Turns a PixelGrid into a ClassificationMask.

    Usage:
        classifier = PixelClassifier()
        mask = classifier.classify(grid, threshold=128)
    """

    def __init__(self, settings: Optional[ClassifierSettings] = None):
        self.settings = settings or ClassifierSettings()
        self.last_mode: Optional[ClassificationMode] = None

    def analyze(self, grid: PixelGrid) -> ColorAnalysis:
        """Build the quantized color histogram and the heuristics derived from it."""
        s = self.settings
        rgb, alpha = unpremultiply(grid.as_rgba())
        visible = alpha >= s.visibility_cutoff

        keys, counts = np.unique(
            quantize_keys(rgb[visible], s.quant_bits), return_counts=True
        )
        histogram = {int(k): int(c) for k, c in zip(keys, counts)}

        gray = luma(rgb[visible])
        analysis = ColorAnalysis(
            histogram=histogram,
            total=int(visible.sum()),
            dark=int((gray < s.dark_luma).sum()),
            light=int((gray > s.light_luma).sum()),
        )
        analysis.dominant = rank_buckets(histogram, s.dominant_count)
        analysis.distinct_groups = has_distinct_color_groups(
            analysis.dominant, analysis.total, s.distinct_coverage
        )
        analysis.yellow_dominant = is_yellow_dominant(
            histogram, analysis.total, s.yellow_ratio, s.quant_bits
        )
        analysis.sparse_dark = analysis.dark < analysis.total // s.sparse_dark_divisor
        return analysis

    def select_mode(self, analysis: ColorAnalysis, flat_color: bool = False) -> ClassificationMode:
        """Pick the classification strategy for an analyzed grid."""
        if analysis.is_empty:
            return ClassificationMode.EMPTY
        if analysis.distinct_groups and analysis.inverse_engrave:
            return ClassificationMode.INVERTED
        if analysis.distinct_groups and flat_color:
            return ClassificationMode.BANDS
        return ClassificationMode.LUMA

    def classify(
        self,
        grid: PixelGrid,
        threshold: int = 128,
        flat_color: bool = False,
    ) -> ClassificationMask:
        """
        Classify every pixel of ``grid``.

        Parameters:
            grid: Decoded image.
            threshold: Luma cut used when tonal output is disabled.
            flat_color: Source is vector-rendered flat color art.

        Returns:
            ClassificationMask with the grid's dimensions.
        """
        analysis = self.analyze(grid)
        mode = self.select_mode(analysis, flat_color)
        self.last_mode = mode

        logger.info(
            "Classifying %dx%d grid: mode=%s dominant=%d coverage=%.3f",
            grid.width, grid.height, mode.value,
            len(analysis.dominant), analysis.top_two_coverage,
        )

        if mode is ClassificationMode.EMPTY:
            return ClassificationMask.background(grid.width, grid.height)

        rgb, alpha = unpremultiply(grid.as_rgba())
        if mode is ClassificationMode.INVERTED:
            intensity = self._inverted(rgb)
        elif mode is ClassificationMode.BANDS:
            intensity = self._bands(rgb, analysis)
        else:
            intensity = self._luma(rgb, threshold)

        intensity = np.where(alpha == 0, BACKGROUND, intensity)
        return ClassificationMask(intensity.astype(np.uint8))

    def _luma(self, rgb: np.ndarray, threshold: int) -> np.ndarray:
        gray = luma(rgb)
        if not self.settings.tonal:
            return np.where(gray < threshold, 0, BACKGROUND)
        return soft_threshold(gray, self.settings.low_cutoff, self.settings.high_cutoff)

    def _inverted(self, rgb: np.ndarray) -> np.ndarray:
        r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
        yellow = (r > 200) & (g > 180) & (b < 100)
        black = (r < 60) & (g < 60) & (b < 60)
        out = BACKGROUND - luma(rgb)
        out = np.where(black, BACKGROUND, out)
        return np.where(yellow, 0, out)

    def _bands(self, rgb: np.ndarray, analysis: ColorAnalysis) -> np.ndarray:
        s = self.settings
        quantized = np.asarray(rgb, dtype=np.int64) >> (8 - s.quant_bits)
        out = np.full(rgb.shape[:2], BACKGROUND, dtype=np.int64)
        best = np.full(rgb.shape[:2], np.iinfo(np.int64).max, dtype=np.int64)
        levels = iter(s.band_levels)

        for bucket in analysis.dominant:
            # Light dominant colors are the substrate, not artwork
            if int(luma(np.array(bucket.representative(s.quant_bits)))) > s.high_cutoff:
                level = BACKGROUND
            else:
                level = next(levels, BACKGROUND)
            distance = np.abs(quantized - np.array(bucket.channels)).max(axis=-1)
            match = (distance <= s.color_tolerance) & (distance < best)
            out[match] = level
            best[match] = distance[match]
        return out


def classify(
    grid: PixelGrid,
    threshold: int = 128,
    flat_color: bool = False,
    settings: Optional[ClassifierSettings] = None,
) -> ClassificationMask:
    """Classify ``grid`` with a one-off PixelClassifier."""
    return PixelClassifier(settings).classify(grid, threshold, flat_color)


def analyze_colors(
    grid: PixelGrid, settings: Optional[ClassifierSettings] = None
) -> ColorAnalysis:
    """Dominant-color analysis of ``grid`` without classifying it."""
    return PixelClassifier(settings).analyze(grid)
