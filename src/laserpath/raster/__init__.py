"""
Raster module - Pixel grids, classification and image loading.
"""

from laserpath.raster.classifier import (
    ClassificationMode,
    ColorAnalysis,
    ColorBucket,
    PixelClassifier,
    analyze_colors,
    classify,
    rank_buckets,
)
from laserpath.raster.grid import BACKGROUND, ClassificationMask, PixelGrid
from laserpath.raster.loader import is_vector_source, load_image
from laserpath.raster.vector_cleanup import clean_vector_render

__all__ = [
    "BACKGROUND",
    "ClassificationMask",
    "ClassificationMode",
    "ColorAnalysis",
    "ColorBucket",
    "PixelClassifier",
    "PixelGrid",
    "analyze_colors",
    "classify",
    "clean_vector_render",
    "is_vector_source",
    "load_image",
    "rank_buckets",
]
