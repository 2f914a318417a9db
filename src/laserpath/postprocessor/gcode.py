"""
G-code Post Processor - GRBL-style laser engraving programs.

Commands used:
  G21 / G90   metric units, absolute positioning
  G0 X Y      rapid move (laser off)
  G1 X Y      linear cutting move at the configured feed
  M3 Sn       laser on at power n
  M5          laser off

Programs always start with the preamble and end with ``M5`` then a rapid
return to ``X0 Y0``.
"""

from typing import List, Optional

from .base import PostProcessorBase, PostProcessorConfig


class GCodeEmitter(PostProcessorBase):
    """G-code program emitter for laser engravers."""

    def __init__(self, config: Optional[PostProcessorConfig] = None):
        super().__init__(config or PostProcessorConfig())

    def _fmt(self, value: float) -> str:
        return f"{value:.{self.config.precision}f}"

    def _feed(self, value: float) -> str:
        return f"{value:g}"

    def header(self) -> List[str]:
        return [
            "G21",
            "G90",
            "M5",
            f"G0 F{self._feed(self.config.rapid_feed)}",
            f"G1 F{self._feed(self.config.cut_feed)}",
        ]

    def footer(self) -> List[str]:
        return ["M5", "G0 X0 Y0"]

    def rapid_move(self, x: float, y: float) -> List[str]:
        return [f"G0 X{self._fmt(x)} Y{self._fmt(y)}"]

    def linear_move(self, x: float, y: float) -> List[str]:
        return [f"G1 X{self._fmt(x)} Y{self._fmt(y)}"]

    def process_on(self, power: int) -> List[str]:
        return [f"M3 S{power}"]

    def process_off(self) -> List[str]:
        return ["M5"]
