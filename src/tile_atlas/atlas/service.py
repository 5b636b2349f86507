"""
High-level service for loading tile atlases with an on-disk cache.

Responsibilities:
    * Hash the tile definition text and compare it with the cached hash
    * Rebuild: pack the atlas, write `<N>.png` pages and `cache.bin`
    * Reuse: reload pages and metadata without invoking the packer

Cache writes are not atomic. An interrupted rebuild leaves either no
`cache.bin` or one holding the previous hash, so the next run rebuilds.
"""

import hashlib
import logging
from enum import Enum
from pathlib import Path
from typing import Optional, TYPE_CHECKING

from PIL import Image

from .builder import TileAtlasBuilder
from .config import (
    CACHE_FILE_NAME,
    CACHE_ROOT,
    AtlasConfig,
    get_config_cache_path,
    load_atlas_config,
    write_atlas_config,
)
from .definitions import DefinitionSet
from .errors import CacheError
from .packer import TILE_PAGE_SIZE
from .textures import TextureUploader, load_image, make_texture, save_page
from .tile_atlas import TileAtlas

if TYPE_CHECKING:
    from ..settings import AppSettings


def hash_str(text: str) -> str:
    """SHA3-256 hex digest of the definition text."""
    return hashlib.sha3_256(text.encode("utf-8")).hexdigest()


class CacheDecision(Enum):
    """Outcome of the cache check."""
    REUSE = "reuse"
    REBUILD = "rebuild"


class TileAtlasService:
    """Facade deciding between a cached atlas and a fresh build.

    Instantiate with a cache root, or with `AppSettings` to take the cache
    root and page size from configuration. Explicit arguments win.
    """

    def __init__(
        self,
        cache_root: str | Path | None = None,
        settings: Optional["AppSettings"] = None,
        base_path: str | Path | None = None,
        page_width: int | None = None,
        page_height: int | None = None,
        uploader: TextureUploader = make_texture,
    ):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.settings = settings

        if settings is not None:
            atlas_settings = settings.atlas
            default_root = atlas_settings.cache_root
            default_width = atlas_settings.page_width
            default_height = atlas_settings.page_height
            self.force_max_dimensions = atlas_settings.force_max_dimensions
        else:
            default_root = CACHE_ROOT
            default_width = default_height = TILE_PAGE_SIZE
            self.force_max_dimensions = False

        self.cache_root = Path(cache_root) if cache_root is not None else Path(default_root)
        self.base_path = Path(base_path) if base_path is not None else None
        self.page_width = page_width or default_width
        self.page_height = page_height or default_height
        self.uploader = uploader
        self.last_decision: CacheDecision | None = None

    # === CACHE DECISION ===

    def check_cache(self, config_name: str, source_text: str) -> CacheDecision:
        """Decide whether the cached atlas for `config_name` is still valid."""
        return self._check(config_name, hash_str(source_text))[0]

    def _check(
        self, config_name: str, file_hash: str
    ) -> tuple[CacheDecision, AtlasConfig | None]:
        cache_file = get_config_cache_path(config_name, self.cache_root) / CACHE_FILE_NAME
        if not cache_file.exists():
            self.logger.info(f"No cached atlas for '{config_name}'")
            return CacheDecision.REBUILD, None

        try:
            cached = load_atlas_config(config_name, self.cache_root)
        except CacheError as e:
            self.logger.warning(f"Discarding unreadable cache for '{config_name}': {e}")
            return CacheDecision.REBUILD, None

        if cached.file_hash != file_hash:
            self.logger.info(f"Tile definitions of '{config_name}' changed")
            return CacheDecision.REBUILD, None

        return CacheDecision.REUSE, cached

    # === LOADING ===

    def from_config(self, filename: str | Path) -> TileAtlas:
        """Load the atlas described by a definition file.

        The file stem names the cache directory.
        """
        path = Path(filename)
        if not path.exists():
            raise FileNotFoundError(f"Tile definitions not found: {path}")
        source_text = path.read_text(encoding="utf-8")
        return self.load(path.stem, source_text)

    def load(self, config_name: str, source_text: str) -> TileAtlas:
        """Reuse the cached atlas if the definitions are unchanged, else rebuild."""
        file_hash = hash_str(source_text)
        decision, cached = self._check(config_name, file_hash)
        self.last_decision = decision

        if decision is CacheDecision.REUSE and cached is not None:
            return self.reuse(config_name, cached)
        return self.rebuild(config_name, source_text, file_hash)

    def rebuild(
        self, config_name: str, source_text: str, file_hash: str | None = None
    ) -> TileAtlas:
        """Pack the atlas from definitions and write it to the cache."""
        self.logger.info(f"Rebuilding tile atlas '{config_name}'")
        file_hash = file_hash or hash_str(source_text)
        definitions = DefinitionSet.parse(source_text)

        builder = TileAtlasBuilder(
            page_width=self.page_width,
            page_height=self.page_height,
            base_path=self.base_path,
            force_max_dimensions=self.force_max_dimensions,
        )
        for frame in definitions.frames:
            builder.add_frame(frame.file_path, frame.tile_size)
        for index, tile in definitions.indexed_tiles():
            builder.add_tile(tile.atlas, index, tile.to_atlas_tile())

        cache_dir = get_config_cache_path(config_name, self.cache_root)
        cache_dir.mkdir(parents=True, exist_ok=True)

        def write_page(page_index: int, image: Image.Image) -> None:
            save_page(image, cache_dir / f"{page_index}.png")

        atlas = builder.build(page_sink=write_page, uploader=self.uploader)
        self._remove_stale_pages(cache_dir, atlas.passes)
        write_atlas_config(atlas.make_config(file_hash), config_name, self.cache_root)
        return atlas

    def reuse(self, config_name: str, config: AtlasConfig) -> TileAtlas:
        """Restore an atlas from cached pages and metadata.

        Raises:
            CacheError: If a page referenced by the metadata is missing
        """
        cache_dir = get_config_cache_path(config_name, self.cache_root)
        self.logger.info(f"Using cached tile atlas config at {cache_dir / CACHE_FILE_NAME}")

        page_paths = self._page_files(cache_dir)
        indices = [index for index, _ in page_paths]
        if indices != list(range(len(indices))):
            raise CacheError(f"Page files in {cache_dir} are not numbered 0..N-1: {indices}")
        if config.page_count > len(page_paths):
            raise CacheError(
                f"Cached config references {config.page_count} pages, "
                f"found {len(page_paths)} in {cache_dir}"
            )

        textures = []
        page_sizes: list[tuple[int, int]] = []
        for _, path in page_paths:
            image = load_image(path)
            textures.append(self.uploader(image))
            page_sizes.append(image.size)

        return TileAtlas.from_config(config, textures, page_sizes)

    # === HELPERS ===

    @staticmethod
    def _page_files(cache_dir: Path) -> list[tuple[int, Path]]:
        """Numbered page files of a cache directory, in page order."""
        pages: list[tuple[int, Path]] = []
        for path in cache_dir.glob("*.png"):
            if path.stem.isdigit():
                pages.append((int(path.stem), path))
        return sorted(pages)

    def _remove_stale_pages(self, cache_dir: Path, page_count: int) -> None:
        for index, path in self._page_files(cache_dir):
            if index >= page_count:
                path.unlink()
                self.logger.debug(f"Removed stale page {path}")
