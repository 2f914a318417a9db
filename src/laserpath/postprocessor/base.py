"""
PostProcessorBase - Abstract base class for program emitters.

Maps pixel-space paths and fill segments to machine coordinates and drives
the emission sequence; subclasses supply the dialect for each command.

Emission sequence:
  header -> program_start hook
  per outline path: process off, rapid to first point, process on,
                    linear moves through the remaining points
  per fill segment: rapid to start, process on, linear move to end,
                    process off
  program_end hook -> footer

Template variables available in event hooks:
  {pathCount}    - number of outline paths emitted
  {segmentCount} - number of fill segments emitted
  {width}, {height} - target size in machine units
"""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from laserpath.core.config import EmitterSettings
from laserpath.tracing.geometry import Path
from laserpath.tracing.zigzag import Segment


@dataclass(frozen=True)
class MachineTransform:
    """
    Pixel-to-machine coordinate mapping.

    Attributes:
        target_width: Engraving width in machine units (mm)
        target_height: Engraving height in machine units (mm)
        offset: Added to both axes after scaling
        pixel_width: Source grid width in pixels
        pixel_height: Source grid height in pixels
    """

    target_width: float
    target_height: float
    offset: float
    pixel_width: int
    pixel_height: int

    def __post_init__(self) -> None:
        if self.pixel_width <= 0 or self.pixel_height <= 0:
            raise ValueError(
                f"Pixel size must be positive, got {self.pixel_width}x{self.pixel_height}"
            )

    @property
    def scale_x(self) -> float:
        return self.target_width / self.pixel_width

    @property
    def scale_y(self) -> float:
        return self.target_height / self.pixel_height

    def to_machine(self, x: float, y: float) -> Tuple[float, float]:
        """Map a pixel coordinate to machine units."""
        return (self.offset + x * self.scale_x, self.offset + y * self.scale_y)


@dataclass
class EventHooks:
    """
    Customizable code snippets injected at event points.
    Each string may contain template variables like {pathCount}.
    """
    program_start: str = ""
    program_end: str = ""

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'EventHooks':
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        return cls(**{k: v for k, v in d.items() if k in valid_fields})


@dataclass
class PostProcessorConfig:
    """Configuration for a post processor instance."""
    line_ending: str = "\n"

    # Motion parameters (mm/min)
    rapid_feed: float = 3000.0
    cut_feed: float = 1500.0

    # Laser
    laser_power: int = 1000
    modulate_power: bool = False   # scale fill power by segment intensity

    # Output
    precision: int = 3

    hooks: EventHooks = field(default_factory=EventHooks)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'PostProcessorConfig':
        d = dict(d)
        hooks_data = d.pop('hooks', {})
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        config = cls(**{k: v for k, v in d.items() if k in valid_fields})
        if hooks_data:
            config.hooks = EventHooks.from_dict(hooks_data)
        return config

    @classmethod
    def from_settings(cls, settings: EmitterSettings) -> 'PostProcessorConfig':
        return cls(
            line_ending=settings.line_ending,
            rapid_feed=settings.rapid_feed,
            cut_feed=settings.cut_feed,
            laser_power=settings.laser_power,
            modulate_power=settings.modulate_power,
            precision=settings.precision,
            hooks=EventHooks(
                program_start=settings.program_start,
                program_end=settings.program_end,
            ),
        )


class PostProcessorBase(ABC):
    """
    Abstract base class for post processors.

    Subclasses implement dialect-specific methods:
    - header() / footer()
    - linear_move() / rapid_move()
    - process_on() / process_off()
    """

    def __init__(self, config: Optional[PostProcessorConfig] = None):
        self.config = config or PostProcessorConfig()
        self._lines: List[str] = []

    # ── Abstract methods (must be implemented by subclasses) ───────────

    @abstractmethod
    def header(self) -> List[str]:
        """Generate program header lines."""
        ...

    @abstractmethod
    def footer(self) -> List[str]:
        """Generate program footer lines."""
        ...

    @abstractmethod
    def linear_move(self, x: float, y: float) -> List[str]:
        """Generate a linear (cutting) move command."""
        ...

    @abstractmethod
    def rapid_move(self, x: float, y: float) -> List[str]:
        """Generate a rapid (travel) move command."""
        ...

    @abstractmethod
    def process_on(self, power: int) -> List[str]:
        """Code to turn the laser on."""
        ...

    @abstractmethod
    def process_off(self) -> List[str]:
        """Code to turn the laser off."""
        ...

    # ── Hook expansion ────────────────────────────────────────────────

    def _expand_hook(self, hook_template: str, template_vars: Dict[str, Any]) -> List[str]:
        """Expand template variables in a hook string."""
        if not hook_template.strip():
            return []
        try:
            expanded = hook_template.format(**template_vars)
        except (KeyError, IndexError):
            expanded = hook_template  # Leave unresolved variables as-is
        return [line for line in expanded.split('\n') if line.strip()]

    def segment_power(self, segment: Segment) -> int:
        """Laser power for a fill segment."""
        power = self.config.laser_power
        if self.config.modulate_power:
            return int(round(power * (255 - segment.intensity) / 255))
        return power

    # ── Main generation pipeline ──────────────────────────────────────

    def emit_path(self, path: Path, transform: MachineTransform) -> List[str]:
        """Commands for one outline path."""
        if not path.points:
            return []
        lines = list(self.process_off())
        first, rest = path.points[0], path.points[1:]
        lines.extend(self.rapid_move(*transform.to_machine(first.x, first.y)))
        lines.extend(self.process_on(self.config.laser_power))
        for point in rest:
            lines.extend(self.linear_move(*transform.to_machine(point.x, point.y)))
        return lines

    def emit_segment(self, segment: Segment, transform: MachineTransform) -> List[str]:
        """Commands for one fill segment, cut as an independent stroke."""
        lines = list(self.rapid_move(*transform.to_machine(segment.start_x, segment.y)))
        lines.extend(self.process_on(self.segment_power(segment)))
        lines.extend(self.linear_move(*transform.to_machine(segment.end_x, segment.y)))
        lines.extend(self.process_off())
        return lines

    def generate(
        self,
        transform: MachineTransform,
        paths: Sequence[Path] = (),
        segments: Sequence[Segment] = (),
    ) -> str:
        """
        Generate the complete program.

        Parameters:
            transform: Pixel-to-machine mapping.
            paths: Outline paths, emitted first, in order.
            segments: Fill segments, emitted after the paths, in order.

        Returns:
            Complete program text ending with a line ending.
        """
        template_vars = {
            'pathCount': len(paths),
            'segmentCount': len(segments),
            'width': f"{transform.target_width:.{self.config.precision}f}",
            'height': f"{transform.target_height:.{self.config.precision}f}",
        }

        self._lines = []
        self._lines.extend(self.header())
        self._lines.extend(self._expand_hook(self.config.hooks.program_start, template_vars))

        for path in paths:
            self._lines.extend(self.emit_path(path, transform))
        for segment in segments:
            self._lines.extend(self.emit_segment(segment, transform))

        self._lines.extend(self._expand_hook(self.config.hooks.program_end, template_vars))
        self._lines.extend(self.footer())

        ending = self.config.line_ending
        return ending.join(self._lines) + ending
