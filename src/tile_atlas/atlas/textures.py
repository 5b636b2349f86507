"""
Image import and texture upload helpers.

Pages are plain RGBA Pillow images until they are handed to an uploader,
a callable turning a finished page into whatever handle the renderer uses.
"""

import logging
from pathlib import Path
from typing import Any, Callable

from PIL import Image
from PySide6.QtGui import QImage

logger = logging.getLogger(__name__)

TextureUploader = Callable[[Image.Image], Any]
PageSink = Callable[[int, Image.Image], None]


def load_image(path: str | Path) -> Image.Image:
    """Load an image from disk and convert it to RGBA.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Source image not found: {path}")

    with Image.open(path) as image:
        image.load()
        return image.convert("RGBA")


def make_texture(image: Image.Image) -> QImage:
    """Turn a finished RGBA page into a QImage texture handle."""
    image = image.convert("RGBA")
    width, height = image.size
    data = image.tobytes("raw", "RGBA")
    # copy() detaches the QImage from the Python buffer
    return QImage(data, width, height, width * 4, QImage.Format.Format_RGBA8888).copy()


def save_page(image: Image.Image, path: Path) -> None:
    """Write a page image as PNG."""
    image.save(path, format="PNG")
    logger.debug(f"Saved page {image.size[0]}x{image.size[1]} to {path}")
