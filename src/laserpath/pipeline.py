"""
Pipeline orchestrator for the image-to-G-code workflow.

Chains: (vector cleanup) -> classify -> trace outlines -> fill regions
        -> simplify -> zig-zag plan -> emit

Each step is a plain function call into the stage modules; the pipeline
adds timing, progress reporting and structured logging around them. All
work happens in memory: loading images and writing programs belong to the
caller (see ``laserpath.cli``).
"""

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from laserpath.core.config import EngraveConfig
from laserpath.core.logging import get_logger
from laserpath.postprocessor import GCodeEmitter, MachineTransform, PostProcessorConfig
from laserpath.raster.classifier import ClassificationMode, PixelClassifier
from laserpath.raster.grid import ClassificationMask, PixelGrid
from laserpath.raster.vector_cleanup import clean_vector_render
from laserpath.tracing.boundary import BoundaryTracer
from laserpath.tracing.geometry import Path, Region
from laserpath.tracing.regions import RegionFiller
from laserpath.tracing.simplify import simplify_path
from laserpath.tracing.zigzag import Segment, annotate_intensity, plan_zigzag

logger = get_logger(__name__)


@dataclass
class StepResult:
    """Timing of a single pipeline step."""

    name: str
    duration_s: float = 0.0


@dataclass
class PipelineResult:
    """Result of a complete pipeline run."""

    program: str = ""
    mask: Optional[ClassificationMask] = None
    mode: Optional[ClassificationMode] = None
    paths: List[Path] = field(default_factory=list)
    regions: List[Region] = field(default_factory=list)
    segments: List[Segment] = field(default_factory=list)
    steps: List[StepResult] = field(default_factory=list)
    timings: Dict[str, float] = field(default_factory=dict)

    @property
    def statistics(self) -> Dict[str, int]:
        return {
            "paths": len(self.paths),
            "pathPoints": sum(len(p) for p in self.paths),
            "regions": len(self.regions),
            "segments": len(self.segments),
            "lines": self.program.count("\n"),
        }


# Type alias for progress callback: (step_name, fraction 0.0-1.0)
ProgressCallback = Callable[[str, float], None]


def _noop_callback(step: str, pct: float) -> None:
    pass


class EngravingPipeline:
    """End-to-end engraving pipeline.

    Usage:
        pipeline = EngravingPipeline(EngraveConfig(target_width=50, target_height=50))
        result = pipeline.execute(grid)
        Path("out.gcode").write_text(result.program)
    """

    def __init__(
        self,
        config: Optional[EngraveConfig] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        self.config = config or EngraveConfig()
        self._progress = progress_callback or _noop_callback

    def execute(self, grid: PixelGrid) -> PipelineResult:
        """Run every stage on ``grid`` and return the program with its geometry."""
        cfg = self.config
        trace = cfg.trace
        result = PipelineResult()

        if cfg.vector_cleanup:
            grid = self._run_step(result, "vector_cleanup", lambda: clean_vector_render(grid))

        classifier = PixelClassifier(cfg.classifier)
        result.mask = self._run_step(
            result,
            "classify",
            lambda: classifier.classify(grid, cfg.threshold, cfg.flat_color),
        )
        result.mode = classifier.last_mode
        mask = result.mask

        tracer = BoundaryTracer(trace.background_cutoff, trace.min_path_points)
        outlines = self._run_step(result, "trace", lambda: tracer.trace(mask))

        filler = RegionFiller(trace.background_cutoff, trace.min_region_area)
        result.regions = self._run_step(result, "fill", lambda: filler.fill(mask))

        result.paths = self._run_step(
            result,
            "simplify",
            lambda: [simplify_path(p, trace.simplify_tolerance) for p in outlines],
        )

        result.segments = self._run_step(
            result, "plan", lambda: self._plan_segments(result.regions, mask)
        )

        transform = MachineTransform(
            target_width=cfg.target_width,
            target_height=cfg.target_height,
            offset=cfg.offset,
            pixel_width=grid.width,
            pixel_height=grid.height,
        )
        emitter = GCodeEmitter(PostProcessorConfig.from_settings(cfg.emitter))
        result.program = self._run_step(
            result,
            "emit",
            lambda: emitter.generate(transform, result.paths, result.segments),
        )

        logger.info("pipeline_complete", **result.statistics)
        return result

    def _plan_segments(self, regions: List[Region], mask: ClassificationMask) -> List[Segment]:
        trace = self.config.trace
        segments: List[Segment] = []
        for region in regions:
            segments.extend(
                plan_zigzag(region, trace.line_spacing, trace.min_segment_length)
            )
        if self.config.emitter.modulate_power:
            segments = annotate_intensity(segments, mask)
        return segments

    def _run_step(self, result: PipelineResult, name: str, fn: Callable[[], Any]) -> Any:
        """Execute a single pipeline step with timing and logging."""
        self._progress(name, 0.0)
        t0 = time.perf_counter()
        try:
            data = fn()
        except Exception as e:
            duration = time.perf_counter() - t0
            logger.error("pipeline_step_failed", step=name, duration_s=round(duration, 3), error=str(e))
            raise
        duration = time.perf_counter() - t0
        self._progress(name, 1.0)
        result.steps.append(StepResult(name=name, duration_s=duration))
        result.timings[name] = duration
        logger.info("pipeline_step_complete", step=name, duration_s=round(duration, 3))
        return data


def convert_to_gcode(
    grid: PixelGrid,
    target_width: Optional[float] = None,
    target_height: Optional[float] = None,
    offset: Optional[float] = None,
    threshold: Optional[int] = None,
    config: Optional[EngraveConfig] = None,
) -> str:
    """
    Convert ``grid`` to a G-code program in one call.

    Arguments that are given override the matching fields of ``config``
    (defaults: 100 x 100 mm, offset 0, threshold 128).
    """
    base = config or EngraveConfig()
    cfg = base.merged(
        target_width=target_width,
        target_height=target_height,
        offset=offset,
        threshold=threshold,
    )
    return EngravingPipeline(cfg).execute(grid).program
