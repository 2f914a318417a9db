"""
Core module - Shared configuration, exceptions and logging.
"""

from laserpath.core.config import (
    ClassifierSettings,
    ConfigManager,
    EmitterSettings,
    EngraveConfig,
    TraceSettings,
    load_config,
)
from laserpath.core.exceptions import (
    ConfigurationError,
    GridError,
    ImageLoadError,
    LaserPathError,
)
from laserpath.core.logging import bind_job, configure_logging, get_logger

__all__ = [
    # Config
    "ClassifierSettings",
    "ConfigManager",
    "EmitterSettings",
    "EngraveConfig",
    "TraceSettings",
    "load_config",
    # Exceptions
    "LaserPathError",
    "ConfigurationError",
    "GridError",
    "ImageLoadError",
    # Logging
    "bind_job",
    "configure_logging",
    "get_logger",
]
