"""
laserpath - Image to laser engraving toolpath converter

Classifies the pixels of a decoded image, traces outlines and fillable
regions, and emits a G-code program for laser/CNC engravers.
"""

__version__ = "0.1.0"
__author__ = "laserpath Contributors"

from laserpath.core.config import EngraveConfig
from laserpath.pipeline import EngravingPipeline, PipelineResult, convert_to_gcode
from laserpath.raster.grid import ClassificationMask, PixelGrid

__all__ = [
    "__version__",
    "ClassificationMask",
    "EngraveConfig",
    "EngravingPipeline",
    "PipelineResult",
    "PixelGrid",
    "convert_to_gcode",
]
