"""
Builder packing source images into tile atlas pages.

Frames are placed first-fit over the pages in creation order; a new page is
opened only when no existing page accepts the image. Page order is therefore
deterministic and page indices stay stable between identical builds.
"""

import logging
from pathlib import Path
from typing import Callable

from PIL import Image

from .errors import BuilderStateError, PackingError
from .managers import FrameTable
from .models import AtlasFrame, AtlasTile, TileIndex, TileSize
from .packer import TILE_PAGE_SIZE, PagePacker
from .textures import PageSink, TextureUploader, load_image, make_texture
from .tile_atlas import TileAtlas

ImageLoader = Callable[[str], Image.Image]


class TileAtlasBuilder:
    """Accumulates frames and tiles, then builds an immutable `TileAtlas`.

    Call order matters: a frame must be added before any tile referring to
    it. After `build()` the builder is spent; build again with a new one.
    """

    def __init__(
        self,
        page_width: int = TILE_PAGE_SIZE,
        page_height: int = TILE_PAGE_SIZE,
        base_path: str | Path | None = None,
        force_max_dimensions: bool = False,
        image_loader: ImageLoader | None = None,
    ):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.page_width = page_width
        self.page_height = page_height
        self.base_path = Path(base_path) if base_path is not None else None
        self.force_max_dimensions = force_max_dimensions
        self.image_loader = image_loader or self._load_from_disk

        self.table = FrameTable()
        self.packers: list[PagePacker] = []
        self._built = False

    def _load_from_disk(self, source_key: str) -> Image.Image:
        path = Path(source_key)
        if self.base_path is not None and not path.is_absolute():
            path = self.base_path / path
        return load_image(path)

    def _check_not_built(self) -> None:
        if self._built:
            raise BuilderStateError("Builder already built; create a new one")

    def _add_packer(self) -> PagePacker:
        packer = PagePacker(
            self.page_width, self.page_height, self.force_max_dimensions
        )
        self.packers.append(packer)
        self.logger.debug(
            f"Opened page {len(self.packers) - 1} ({self.page_width}x{self.page_height})"
        )
        return packer

    @property
    def page_count(self) -> int:
        return len(self.packers)

    def add_frame(self, source_key: str, tile_size: TileSize) -> AtlasFrame:
        """Pack a source image and register its frame.

        Adding a key that already has a frame does nothing and returns the
        existing frame.

        Raises:
            FileNotFoundError: If the source image is missing
            PackingError: If the image does not fit even on an empty page
        """
        self._check_not_built()
        if source_key in self.table:
            return self.table.frame_for(source_key)

        image = self.image_loader(source_key)

        for page_index, packer in enumerate(self.packers):
            if packer.can_fit(image):
                rect = packer.place(source_key, image)
                break
        else:
            packer = self._add_packer()
            page_index = len(self.packers) - 1
            if not packer.can_fit(image):
                raise PackingError(
                    f"Source image {source_key} ({image.size[0]}x{image.size[1]}) "
                    f"does not fit on a {self.page_width}x{self.page_height} page"
                )
            rect = packer.place(source_key, image)

        frame = AtlasFrame(tile_size=tile_size, page_index=page_index, rect=rect)
        self.table.add_frame(source_key, frame)
        return frame

    def add_tile(self, source_key: str, index: TileIndex, tile: AtlasTile) -> None:
        """Assign a tile index to a cell of an added frame."""
        self._check_not_built()
        self.table.add_tile(source_key, index, tile)

    def build(
        self,
        page_sink: PageSink | None = None,
        uploader: TextureUploader = make_texture,
    ) -> TileAtlas:
        """Export every page and freeze the table into a `TileAtlas`.

        Args:
            page_sink: Optional callable receiving (page_index, image) for
                each page, e.g. to write it to the cache
            uploader: Turns a page image into a texture handle

        Returns:
            The built atlas
        """
        self._check_not_built()
        self._built = True

        textures = []
        page_sizes: list[tuple[int, int]] = []
        for page_index, packer in enumerate(self.packers):
            image = packer.export()
            if page_sink is not None:
                page_sink(page_index, image)
            textures.append(uploader(image))
            page_sizes.append(image.size)

        self.logger.info(
            f"Built atlas: {len(self.table.frames)} frames, "
            f"{len(self.table.locations)} tiles, {len(textures)} pages"
        )
        return TileAtlas(self.table, textures, page_sizes)
