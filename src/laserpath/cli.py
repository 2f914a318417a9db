"""
Command-line interface for laserpath.

Provides commands to convert images to G-code and to inspect how an image
will be classified.
"""

from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from laserpath import __version__
from laserpath.core.config import ConfigManager, EngraveConfig, load_config
from laserpath.core.exceptions import LaserPathError
from laserpath.core.logging import bind_job, configure_logging
from laserpath.pipeline import EngravingPipeline
from laserpath.raster.classifier import PixelClassifier
from laserpath.raster.loader import is_vector_source, load_image
from laserpath.raster.vector_cleanup import clean_vector_render

console = Console()


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Minimum log level",
)
@click.option("--json-logs", is_flag=True, help="Emit JSON log lines")
@click.pass_context
def main(ctx: click.Context, log_level: str, json_logs: bool) -> None:
    """laserpath - Image to laser engraving G-code converter."""
    ctx.ensure_object(dict)
    configure_logging(level=log_level, json_output=json_logs)


def _resolve_config(
    config_file: Optional[Path], config_dir: Optional[Path], profile: Optional[str]
) -> EngraveConfig:
    if config_file is not None:
        return load_config(config_file)
    if profile is not None:
        return ConfigManager(config_dir or Path("config")).get_profile(profile)
    return EngraveConfig()


# =============================================================================
# Conversion
# =============================================================================


@main.command("convert")
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default="output.gcode",
    show_default=True,
    help="Output G-code file",
)
@click.option("--width", type=float, default=None, help="Target engraving width (mm)")
@click.option("--height", type=float, default=None, help="Target engraving height (mm)")
@click.option("--offset", type=float, default=None, help="Offset (mm) applied to both X and Y")
@click.option(
    "--threshold",
    type=click.IntRange(0, 255),
    default=None,
    help="Grayscale threshold for engraving (0-255)",
)
@click.option(
    "--config", "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML engraving configuration",
)
@click.option(
    "--config-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Configuration directory holding profiles/",
)
@click.option("--profile", default=None, help="Named profile from the configuration directory")
@click.option(
    "--flat-color/--no-flat-color",
    default=None,
    help="Treat the image as flat-color art (default: on for SVG)",
)
@click.option("--hard-threshold", is_flag=True, help="Binary cut at --threshold instead of tonal output")
@click.option("--modulate-power", is_flag=True, help="Scale fill power by image darkness")
def convert(
    input_path: Path,
    output: Path,
    width: Optional[float],
    height: Optional[float],
    offset: Optional[float],
    threshold: Optional[int],
    config_file: Optional[Path],
    config_dir: Optional[Path],
    profile: Optional[str],
    flat_color: Optional[bool],
    hard_threshold: bool,
    modulate_power: bool,
) -> None:
    """Convert an image (PNG, JPEG, SVG) to engraving G-code."""
    bind_job(source=input_path.name, profile=profile)
    try:
        base = _resolve_config(config_file, config_dir, profile)
        vector = is_vector_source(input_path)
        if flat_color is None:
            flat_color = True if vector else None

        cfg = base.merged(
            target_width=width,
            target_height=height,
            offset=offset,
            threshold=threshold,
            flat_color=flat_color,
            vector_cleanup=True if vector else None,
        )
        if hard_threshold:
            cfg.classifier.tonal = False
        if modulate_power:
            cfg.emitter.modulate_power = True

        grid = load_image(input_path)
        result = EngravingPipeline(cfg).execute(grid)
        output.write_text(result.program)
    except LaserPathError as e:
        console.print(f"[red]✗[/red] {e}")
        raise SystemExit(1)
    except OSError as e:
        console.print(f"[red]✗[/red] Failed to write output: {e}")
        raise SystemExit(1)

    stats = result.statistics
    console.print(f"[green]✓[/green] G-code successfully written to {output}")
    console.print(
        f"  {stats['paths']} outline paths, {stats['regions']} fill regions, "
        f"{stats['segments']} fill segments"
    )


# =============================================================================
# Inspection
# =============================================================================


@main.command("inspect")
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--flat-color/--no-flat-color", default=None, help="Treat the image as flat-color art")
def inspect(input_path: Path, flat_color: Optional[bool]) -> None:
    """Show the dominant colors and the classification strategy for an image."""
    bind_job(source=input_path.name)
    try:
        grid = load_image(input_path)
    except LaserPathError as e:
        console.print(f"[red]✗[/red] {e}")
        raise SystemExit(1)

    vector = is_vector_source(input_path)
    if flat_color is None:
        flat_color = vector
    if vector:
        grid = clean_vector_render(grid)

    classifier = PixelClassifier()
    analysis = classifier.analyze(grid)
    mode = classifier.select_mode(analysis, flat_color)
    bits = classifier.settings.quant_bits

    table = Table(title=f"Dominant colors: {input_path.name}")
    table.add_column("Rank", style="cyan")
    table.add_column("Color")
    table.add_column("Pixels", justify="right")
    table.add_column("Share", justify="right")

    for rank, bucket in enumerate(analysis.dominant, start=1):
        r, g, b = bucket.representative(bits)
        share = bucket.count / analysis.total if analysis.total else 0.0
        table.add_row(str(rank), f"#{r:02x}{g:02x}{b:02x}", str(bucket.count), f"{share:.1%}")

    console.print(table)
    console.print(f"  Size: {grid.width}x{grid.height}, visible pixels: {analysis.total}")
    console.print(f"  Dark pixels: {analysis.dark}, light pixels: {analysis.light}")
    console.print(f"  Top-two coverage: {analysis.top_two_coverage:.1%}")
    console.print(f"  Yellow background: {'yes' if analysis.yellow_dominant else 'no'}")
    console.print(f"  Strategy: [bold]{mode.value}[/bold]")


if __name__ == "__main__":
    main()
