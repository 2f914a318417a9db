"""
laserpath Post Processor Module

Turns pixel-space outline paths and fill segments into machine programs.
GCodeEmitter inherits from PostProcessorBase and supplies the G-code
dialect; event hooks allow custom start/end code.
"""

from .base import EventHooks, MachineTransform, PostProcessorBase, PostProcessorConfig
from .gcode import GCodeEmitter

__all__ = [
    'EventHooks',
    'GCodeEmitter',
    'MachineTransform',
    'PostProcessorBase',
    'PostProcessorConfig',
]
