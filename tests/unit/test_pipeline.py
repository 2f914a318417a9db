"""
Tests for the pipeline orchestrator.

Runs the full chain on small synthetic grids and checks step chaining,
progress callbacks, failure propagation and the emitted program.
"""

import numpy as np
import pytest

from conftest import gray_grid
from laserpath.core.config import EngraveConfig
from laserpath.pipeline import EngravingPipeline, PipelineResult, convert_to_gcode
from laserpath.raster.classifier import ClassificationMode
from laserpath.raster.grid import PixelGrid
from laserpath.tracing.geometry import Point

EMPTY_PROGRAM = "G21\nG90\nM5\nG0 F3000\nG1 F1500\nM5\nG0 X0 Y0\n"


class TestPipelineResult:
    """Tests for PipelineResult data structure."""

    def test_default_result(self):
        result = PipelineResult()
        assert result.program == ""
        assert result.paths == []
        assert result.steps == []

    def test_statistics(self):
        result = PipelineResult(program="G21\nM5\n")
        assert result.statistics == {
            "paths": 0,
            "pathPoints": 0,
            "regions": 0,
            "segments": 0,
            "lines": 2,
        }


class TestEngravingPipeline:
    """Tests for the end-to-end run."""

    def test_blank_image(self, blank_grid):
        """Test a white image produces only framing."""
        result = EngravingPipeline().execute(blank_grid)
        assert result.program == EMPTY_PROGRAM
        assert result.paths == []
        assert result.segments == []

    def test_transparent_image(self):
        """Test a transparent image is classified empty."""
        grid = PixelGrid.from_rgba(np.zeros((8, 8, 4), dtype=np.uint8))
        result = EngravingPipeline().execute(grid)
        assert result.mode is ClassificationMode.EMPTY
        assert result.program == EMPTY_PROGRAM

    def test_square_outline_only(self, square_grid):
        """Test a small square is traced but too small to fill."""
        config = EngraveConfig(target_width=50, target_height=50)
        result = EngravingPipeline(config).execute(square_grid)

        assert result.mode is ClassificationMode.LUMA
        assert len(result.paths) == 1
        assert len(result.paths[0]) == 17
        assert result.regions == []

        lines = result.program.splitlines()
        assert lines[5:8] == ["M5", "G0 X12.500 Y12.500", "M3 S1000"]
        assert lines[-3] == "G1 X12.500 Y15.000"
        assert lines[-2:] == ["M5", "G0 X0 Y0"]
        assert lines.count("M3 S1000") == 1
        assert result.statistics["lines"] == len(lines) == 26

    def test_rectangle_outline_and_fill(self, rect_grid):
        """Test a large block gets an outline and seven fill strokes."""
        result = EngravingPipeline().execute(rect_grid)

        assert len(result.regions) == 1
        assert len(result.regions[0]) == 400
        assert [s.y for s in result.segments] == [10, 13, 16, 19, 22, 25, 28]
        assert result.program.count("M3 S1000") == 8
        assert result.paths[0].get_start_point() == Point(10, 10)

        stats = result.statistics
        assert stats["paths"] == 1
        assert stats["segments"] == 7

    def test_outlines_precede_fill(self, rect_grid):
        """Test the outline is cut in full before the first fill rapid."""
        config = EngraveConfig(target_width=40, target_height=40)
        result = EngravingPipeline(config).execute(rect_grid)
        lines = result.program.splitlines()

        outline_on = lines.index("M3 S1000")
        # first fill segment starts at the block corner, pixel (10, 10)
        fill_rapid = lines.index("G0 X10.000 Y10.000", outline_on)
        outline_moves = lines[outline_on + 1 : fill_rapid]
        assert all(line.startswith("G1 ") for line in outline_moves)
        assert len(outline_moves) == len(result.paths[0]) - 1

    def test_small_block_filled_on_full_area(self):
        """Test a 16x16 block reaches the fill minimum counting its outline."""
        grid = gray_grid(30, 30, dark_boxes=[(5, 5, 20, 20)])
        result = EngravingPipeline().execute(grid)
        assert len(result.regions) == 1
        assert len(result.regions[0]) == 256
        assert [s.y for s in result.segments] == [5, 8, 11, 14, 17, 20]

    def test_offset(self, square_grid):
        """Test the offset shifts both axes."""
        config = EngraveConfig(target_width=20, target_height=20, offset=1.5)
        program = EngravingPipeline(config).execute(square_grid).program
        assert "G0 X6.500 Y6.500" in program.splitlines()

    def test_step_order_and_timings(self, rect_grid):
        """Test steps run in order and are timed."""
        result = EngravingPipeline().execute(rect_grid)
        names = [s.name for s in result.steps]
        assert names == ["classify", "trace", "fill", "simplify", "plan", "emit"]
        assert set(result.timings) == set(names)
        assert all(s.duration_s >= 0 for s in result.steps)

    def test_vector_cleanup_step(self, square_grid):
        """Test enabling cleanup adds a leading step."""
        config = EngraveConfig(vector_cleanup=True)
        result = EngravingPipeline(config).execute(square_grid)
        assert result.steps[0].name == "vector_cleanup"

    def test_progress_callback(self, square_grid):
        """Test progress is reported at the start and end of every step."""
        calls = []
        EngravingPipeline(progress_callback=lambda step, pct: calls.append((step, pct))).execute(
            square_grid
        )
        assert calls[:2] == [("classify", 0.0), ("classify", 1.0)]
        assert calls[-1] == ("emit", 1.0)
        assert len(calls) == 12

    def test_step_failure_propagates(self, rect_grid, monkeypatch):
        """Test a failing step raises and stops the run."""
        calls = []

        def boom(self, mask):
            raise RuntimeError("fill exploded")

        monkeypatch.setattr("laserpath.pipeline.RegionFiller.fill", boom)
        pipeline = EngravingPipeline(progress_callback=lambda s, p: calls.append((s, p)))
        with pytest.raises(RuntimeError, match="fill exploded"):
            pipeline.execute(rect_grid)
        assert ("fill", 0.0) in calls
        assert ("fill", 1.0) not in calls
        assert not any(step == "plan" for step, _ in calls)

    def test_program_hooks_from_config(self, square_grid):
        """Test configured hooks frame the motion commands."""
        config = EngraveConfig(
            emitter={"program_start": "; {pathCount} outline(s)", "program_end": "; done"}
        )
        lines = EngravingPipeline(config).execute(square_grid).program.splitlines()
        assert lines[5] == "; 1 outline(s)"
        assert lines[-3] == "; done"

    def test_deterministic(self, rect_grid):
        """Test repeated runs give byte-identical programs."""
        pipeline = EngravingPipeline()
        assert pipeline.execute(rect_grid).program == pipeline.execute(rect_grid).program

    def test_modulated_fill_power(self):
        """Test fill power follows the mask intensity when modulation is on."""
        pixels = np.full((40, 40), 255, dtype=np.uint8)
        pixels[10:30, 10:30] = 140
        config = EngraveConfig()
        config.emitter.modulate_power = True
        result = EngravingPipeline(config).execute(PixelGrid.from_gray(pixels))

        assert {s.intensity for s in result.segments} == {127}
        lines = result.program.splitlines()
        assert lines.count("M3 S502") == 7
        assert lines.count("M3 S1000") == 1

    def test_grid_not_mutated(self, rect_grid):
        """Test the input grid is left as it was."""
        before = rect_grid.pixels.copy()
        EngravingPipeline(EngraveConfig(vector_cleanup=True)).execute(rect_grid)
        assert np.array_equal(before, rect_grid.pixels)


class TestConvertToGcode:
    """Tests for the one-call entry point."""

    def test_defaults(self, blank_grid):
        assert convert_to_gcode(blank_grid) == EMPTY_PROGRAM

    def test_arguments_override(self, square_grid):
        """Test explicit dimensions are applied."""
        program = convert_to_gcode(square_grid, target_width=50, target_height=50)
        assert "G0 X12.500 Y12.500" in program

    def test_config_kept_when_arguments_omitted(self, square_grid):
        """Test a supplied config is not reset to defaults."""
        config = EngraveConfig(target_width=50, target_height=50)
        program = convert_to_gcode(square_grid, config=config)
        assert "G0 X12.500 Y12.500" in program

    def test_threshold_override(self):
        """Test the threshold drives a hard cut when tonal output is off."""
        pixels = np.full((20, 20), 255, dtype=np.uint8)
        pixels[5:15, 5:15] = 100
        config = EngraveConfig()
        config.classifier.tonal = False
        grid = PixelGrid.from_gray(pixels)
        assert convert_to_gcode(grid, threshold=90, config=config) == EMPTY_PROGRAM
        assert "M3 S1000" in convert_to_gcode(grid, threshold=128, config=config)
