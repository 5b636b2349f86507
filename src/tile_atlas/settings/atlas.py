"""
Atlas packing and cache settings for tile-atlas.
"""

import logging
from pathlib import Path

from ..atlas.config import CACHE_ROOT
from ..atlas.packer import TEXTURE_PAGE_SIZE, TILE_PAGE_SIZE
from ..texture_atlas import TEXTURE_DIR
from .base import SettingsSection

logger = logging.getLogger(__name__)


class AtlasSettings(SettingsSection):
    """Manages page sizes and cache locations."""

    @property
    def cache_root(self) -> Path:
        """Directory holding one cache subdirectory per atlas."""
        return Path(self._get_str("atlas/cache_root", str(CACHE_ROOT)))

    @cache_root.setter
    def cache_root(self, value: Path | str) -> None:
        self._set("atlas/cache_root", str(value))

    @property
    def texture_dir(self) -> Path:
        """Directory of named textures for the flat texture atlas."""
        return Path(self._get_str("atlas/texture_dir", str(TEXTURE_DIR)))

    @texture_dir.setter
    def texture_dir(self, value: Path | str) -> None:
        self._set("atlas/texture_dir", str(value))

    @property
    def page_width(self) -> int:
        """Maximum width of a tile atlas page."""
        return self._get_int("atlas/page_width", TILE_PAGE_SIZE)

    @page_width.setter
    def page_width(self, value: int) -> None:
        self._set_positive("atlas/page_width", value)

    @property
    def page_height(self) -> int:
        """Maximum height of a tile atlas page."""
        return self._get_int("atlas/page_height", TILE_PAGE_SIZE)

    @page_height.setter
    def page_height(self, value: int) -> None:
        self._set_positive("atlas/page_height", value)

    @property
    def texture_atlas_size(self) -> int:
        """Side length of the single flat texture atlas page."""
        return self._get_int("atlas/texture_atlas_size", TEXTURE_PAGE_SIZE)

    @texture_atlas_size.setter
    def texture_atlas_size(self, value: int) -> None:
        self._set_positive("atlas/texture_atlas_size", value)

    @property
    def force_max_dimensions(self) -> bool:
        """Export pages at full size instead of their used extent."""
        return self._get_bool("atlas/force_max_dimensions", False)

    @force_max_dimensions.setter
    def force_max_dimensions(self, value: bool) -> None:
        self._set("atlas/force_max_dimensions", value)

    def _set_positive(self, key: str, value: int) -> None:
        if value > 0:
            self._set(key, value)
        else:
            logger.warning(f"Invalid value for {key}: {value}, keeping current")
