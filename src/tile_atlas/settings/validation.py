"""
Settings validation system for tile-atlas.
"""

import logging
from typing import List, TYPE_CHECKING

from .types import ValidationResult

if TYPE_CHECKING:
    from .core import AppSettings

logger = logging.getLogger(__name__)


class SettingsValidator:
    """Validates configuration settings."""

    def __init__(self, settings: "AppSettings"):
        self.settings = settings

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        errors: List[str] = []
        warnings: List[str] = []
        atlas = self.settings.atlas

        # Page sizes
        if atlas.page_width <= 0 or atlas.page_height <= 0:
            errors.append(
                f"Tile page size must be positive: {atlas.page_width}x{atlas.page_height}"
            )
        if atlas.texture_atlas_size <= 0:
            errors.append(f"Texture atlas size must be positive: {atlas.texture_atlas_size}")

        # Cache root
        cache_root = atlas.cache_root
        if cache_root.exists() and not cache_root.is_dir():
            errors.append(f"Cache root is not a directory: {cache_root}")
        elif not cache_root.exists():
            warnings.append(f"Cache root does not exist yet and will be created: {cache_root}")

        # Texture directory
        if not atlas.texture_dir.is_dir():
            warnings.append(f"Texture directory not found: {atlas.texture_dir}")

        return ValidationResult(
            is_valid=len(errors) == 0, errors=errors, warnings=warnings
        )
