"""
Settings package for tile-atlas.

This package provides a type-safe configuration management system
using Qt's QSettings for cross-platform storage.

Usage:
    from tile_atlas.settings import AppSettings, ValidationResult

    settings = AppSettings()
    result = settings.validate()
"""

from .core import AppSettings
from .types import ConfigError, ValidationResult
from .atlas import AtlasSettings
from .logging import LoggingSettings

__all__ = [
    "AppSettings",
    "AtlasSettings",
    "ConfigError",
    "LoggingSettings",
    "ValidationResult",
]
