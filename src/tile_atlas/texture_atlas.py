"""
Single-page texture atlas for named textures.

Unlike the tile atlas there is exactly one page and no tile grid: each
texture is addressed by name and resolves to its packed rect. A texture
that does not fit raises `PackingError`; no second page is opened.
"""

import logging
from pathlib import Path
from typing import Any, Optional, TYPE_CHECKING

from .atlas.errors import UnknownFrameError
from .atlas.models import Rect
from .atlas.packer import TEXTURE_PAGE_SIZE, PagePacker
from .atlas.textures import TextureUploader, load_image, make_texture, save_page

if TYPE_CHECKING:
    from .settings import AppSettings

TEXTURE_DIR = Path("data/texture")


class TextureAtlas:
    """One packed texture and the rect of every named texture on it."""

    def __init__(self, texture: Any, frames: dict[str, Rect]):
        self._texture = texture
        self._frames = dict(frames)

    @property
    def texture(self) -> Any:
        return self._texture

    @property
    def names(self) -> list[str]:
        return list(self._frames)

    def get_texture_area(self, name: str) -> Rect:
        """Return the packed rect of a named texture."""
        rect = self._frames.get(name)
        if rect is None:
            raise UnknownFrameError(f"No texture named {name!r} in atlas")
        return rect


class TextureAtlasBuilder:
    """Packs `<texture_dir>/<name>.png` files onto one page.

    With `AppSettings` the texture directory and page size come from
    configuration. Explicit arguments win.
    """

    def __init__(
        self,
        texture_dir: str | Path | None = None,
        size: int | None = None,
        settings: Optional["AppSettings"] = None,
    ):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

        if settings is not None:
            default_dir = settings.atlas.texture_dir
            default_size = settings.atlas.texture_atlas_size
        else:
            default_dir = TEXTURE_DIR
            default_size = TEXTURE_PAGE_SIZE

        self.texture_dir = Path(texture_dir) if texture_dir is not None else Path(default_dir)
        self.size = size or default_size
        self.packer = PagePacker(self.size, self.size)
        self.frames: dict[str, Rect] = {}

    def add_texture(self, name: str) -> "TextureAtlasBuilder":
        """Load and pack a texture by name.

        Raises:
            FileNotFoundError: If the texture file is missing
            PackingError: If the page is full
        """
        path = self.texture_dir / f"{name}.png"
        image = load_image(path)
        self.frames[name] = self.packer.place(str(path), image)
        return self

    def build(
        self,
        output_path: str | Path | None = None,
        uploader: TextureUploader = make_texture,
    ) -> TextureAtlas:
        """Export the page, optionally save it, and upload it."""
        image = self.packer.export()
        if output_path is not None:
            save_page(image, Path(output_path))
        self.logger.info(f"Built texture atlas with {len(self.frames)} textures")
        return TextureAtlas(uploader(image), self.frames)
