"""
Custom exceptions for laserpath.

All laserpath exceptions inherit from LaserPathError for easy catching.
"""

from typing import Any


class LaserPathError(Exception):
    """Base exception for all laserpath errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(LaserPathError):
    """Raised when configuration is invalid or missing."""

    pass


class GridError(LaserPathError):
    """
    Raised when a pixel grid is degenerate or malformed.

    Grids and masks check their array shape on construction, so a zero-sized
    or wrongly shaped image fails here before any tracing pass runs.
    """

    def __init__(
        self,
        message: str,
        shape: tuple[int, ...] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.shape = shape


class ImageLoadError(LaserPathError):
    """Raised when an image file cannot be decoded into a pixel grid."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.path = path
