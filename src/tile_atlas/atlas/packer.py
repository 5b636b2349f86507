"""
Page packer built on rectpack's skyline bottom-left algorithm.

Each `PagePacker` owns one fixed-size page. Rectangles are placed exactly
at the size of the source image: no rotation, padding or trimming.
"""

import logging

from PIL import Image
from rectpack.skyline import SkylineBl

from .errors import PackingError
from .models import Rect

TILE_PAGE_SIZE = 2048
TEXTURE_PAGE_SIZE = 4096


class PagePacker:
    """One texture page and the images packed onto it.

    The underlying packing engine only tracks free space; the packer keeps
    the images and their rects so the page can be exported afterwards.
    """

    def __init__(
        self,
        max_width: int = TILE_PAGE_SIZE,
        max_height: int = TILE_PAGE_SIZE,
        force_max_dimensions: bool = False,
    ):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.max_width = max_width
        self.max_height = max_height
        self.force_max_dimensions = force_max_dimensions

        self._bin = SkylineBl(max_width, max_height, rot=False)
        self.frames: dict[str, Rect] = {}
        self._images: dict[str, Image.Image] = {}

    def __len__(self) -> int:
        return len(self.frames)

    def __contains__(self, key: str) -> bool:
        return key in self.frames

    def can_fit(self, image: Image.Image) -> bool:
        """Check whether the image would fit in the remaining free space."""
        width, height = image.size
        if width <= 0 or height <= 0:
            return False
        return self._bin.fitness(width, height) is not None

    def place(self, key: str, image: Image.Image) -> Rect:
        """Pack the image under `key` and return its rect.

        Raises:
            PackingError: If the key is already on this page or the page is full
        """
        if key in self.frames:
            raise PackingError(f"Key already packed on this page: {key}")

        width, height = image.size
        if width <= 0 or height <= 0:
            raise PackingError(f"Cannot pack empty image {key} ({width}x{height})")

        placed = self._bin.add_rect(width, height, rid=key)
        if placed is None:
            raise PackingError(
                f"Image {key} ({width}x{height}) does not fit on page "
                f"{self.max_width}x{self.max_height}"
            )

        rect = Rect(x=placed.x, y=placed.y, w=placed.width, h=placed.height)
        self.frames[key] = rect
        self._images[key] = image
        self.logger.debug(f"Packed {key} at {rect}")
        return rect

    def get_frame(self, key: str) -> Rect | None:
        """Return the rect packed under `key`, if any."""
        return self.frames.get(key)

    @property
    def size(self) -> tuple[int, int]:
        """Page size: the used extent, or the full page when forced."""
        if self.force_max_dimensions:
            return self.max_width, self.max_height
        width = max((rect.right for rect in self.frames.values()), default=1)
        height = max((rect.bottom for rect in self.frames.values()), default=1)
        return width, height

    def export(self) -> Image.Image:
        """Compose every packed image onto a transparent RGBA page."""
        page = Image.new("RGBA", self.size, (0, 0, 0, 0))
        for key, rect in self.frames.items():
            page.paste(self._images[key], (rect.x, rect.y))
        return page
