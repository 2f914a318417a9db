"""
Configuration management for laserpath.

Handles loading, validation, and access to engraving configurations.
A configuration is a single YAML document; a configuration directory holds
named engraving profiles (``<dir>/profiles/*.yaml``).
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from laserpath.core.exceptions import ConfigurationError


class ClassifierSettings(BaseModel):
    """Pixel classification constants.

    The defaults are empirical values tuned on sample artwork; change them
    through configuration rather than in code.
    """

    low_cutoff: int = Field(default=50, ge=0, le=255)
    high_cutoff: int = Field(default=230, ge=0, le=255)
    visibility_cutoff: int = Field(default=128, ge=1, le=255)
    quant_bits: int = Field(default=4, ge=1, le=8)
    dominant_count: int = Field(default=3, ge=2)
    distinct_coverage: float = Field(default=0.7, gt=0.0, le=1.0)
    yellow_ratio: float = Field(default=0.5, gt=0.0, le=1.0)
    dark_luma: int = Field(default=64, ge=0, le=255)
    light_luma: int = Field(default=192, ge=0, le=255)
    sparse_dark_divisor: int = Field(default=5, ge=1)
    color_tolerance: int = Field(default=1, ge=0)
    band_levels: list[int] = Field(default_factory=lambda: [0, 127])
    tonal: bool = True


class TraceSettings(BaseModel):
    """Path and region extraction parameters (pixel units)."""

    background_cutoff: int = Field(default=230, ge=1, le=255)
    min_path_points: int = Field(default=5, ge=1)
    simplify_tolerance: float = Field(default=1.0, ge=0.0)
    min_region_area: int = Field(default=200, ge=1)
    line_spacing: int = Field(default=3, ge=1)
    min_segment_length: int = Field(default=3, ge=0)


class EmitterSettings(BaseModel):
    """G-code output parameters."""

    laser_power: int = Field(default=1000, ge=0)
    rapid_feed: float = Field(default=3000.0, gt=0.0)
    cut_feed: float = Field(default=1500.0, gt=0.0)
    precision: int = Field(default=3, ge=0, le=6)
    modulate_power: bool = False
    line_ending: str = "\n"
    program_start: str = ""
    program_end: str = ""


class EngraveConfig(BaseModel):
    """Complete engraving job configuration."""

    target_width: float = Field(default=100.0, gt=0.0)
    target_height: float = Field(default=100.0, gt=0.0)
    offset: float = 0.0
    threshold: int = Field(default=128, ge=0, le=255)
    flat_color: bool = False
    vector_cleanup: bool = False
    classifier: ClassifierSettings = Field(default_factory=ClassifierSettings)
    trace: TraceSettings = Field(default_factory=TraceSettings)
    emitter: EmitterSettings = Field(default_factory=EmitterSettings)

    def merged(self, **overrides: Any) -> "EngraveConfig":
        """Return a copy with every override that is not None applied.

        Top-level fields only; nested sections are replaced as a whole.
        """
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return EngraveConfig(**data)
        except ValidationError as e:
            raise ConfigurationError(
                "Invalid configuration override",
                details={"error": str(e)},
            )


def load_config(path: Path | str) -> EngraveConfig:
    """
    Load an engraving configuration from a YAML file.

    Args:
        path: Path to the YAML document. An empty document yields defaults.

    Returns:
        Validated EngraveConfig

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration must be a mapping: {path}",
                details={"type": type(data).__name__},
            )
        return EngraveConfig(**data)
    except (yaml.YAMLError, ValidationError) as e:
        raise ConfigurationError(
            f"Failed to load config: {path}",
            details={"error": str(e)},
        )


@dataclass
class ConfigManager:
    """
    Named engraving profiles stored in a configuration directory.

    Example:
        >>> config = ConfigManager(config_dir=Path("config"))
        >>> job = config.get_profile("plywood_3mm")
    """

    config_dir: Path
    _profiles: dict[str, EngraveConfig] = field(default_factory=dict, init=False)
    _loaded: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        """Initialize configuration manager."""
        self.config_dir = Path(self.config_dir)
        if not self.config_dir.exists():
            raise ConfigurationError(
                f"Configuration directory not found: {self.config_dir}"
            )

    def load(self) -> None:
        """Load all profiles from disk."""
        profiles_dir = self.config_dir / "profiles"
        if profiles_dir.exists():
            for config_file in sorted(profiles_dir.glob("*.yaml")):
                self._profiles[config_file.stem] = load_config(config_file)
        self._loaded = True

    def get_profile(self, name: str) -> EngraveConfig:
        """
        Get an engraving profile by name.

        Args:
            name: Profile name (without .yaml extension)

        Returns:
            EngraveConfig instance

        Raises:
            ConfigurationError: If profile not found
        """
        if not self._loaded:
            self.load()

        if name not in self._profiles:
            available = list(self._profiles.keys())
            raise ConfigurationError(
                f"Profile not found: {name}",
                details={"available": available},
            )
        return self._profiles[name]

    def list_profiles(self) -> list[str]:
        """List available profiles."""
        if not self._loaded:
            self.load()
        return list(self._profiles.keys())
