"""Shared fixtures for tile-atlas tests."""

from pathlib import Path
from typing import Callable

import orjson
import pytest
from PIL import Image


@pytest.fixture
def make_png(tmp_path: Path) -> Callable[..., str]:
    """Factory writing a solid-color PNG under tmp_path and returning its path."""

    def _make(
        name: str, width: int, height: int, color: tuple[int, int, int, int] = (255, 0, 0, 255)
    ) -> str:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new("RGBA", (width, height), color).save(path)
        return str(path)

    return _make


@pytest.fixture
def identity_uploader() -> Callable[[Image.Image], Image.Image]:
    """Uploader returning the page image itself as the texture handle."""
    return lambda image: image


@pytest.fixture
def definitions_text(make_png: Callable[..., str]) -> str:
    """Definition document with a static sheet, an animated strip and an autotile sheet."""
    make_png("ground.png", 48, 48, (0, 255, 0, 255))
    make_png("water.png", 96, 24, (0, 0, 255, 255))
    make_png("walls.png", 96, 96, (128, 128, 128, 255))
    data = {
        "maps": [
            {"file_path": "ground.png", "tile_size": [24, 24]},
            {"file_path": "water.png", "tile_size": [24, 24]},
            {"file_path": "walls.png", "tile_size": [48, 48]},
        ],
        "tiles": [
            {"atlas": "ground.png", "offset": [0, 0]},
            {"atlas": "ground.png", "offset": [1, 1]},
            {"atlas": "water.png", "offset": [0, 0], "animation": {"frames": 4, "delay": 100}},
            {"atlas": "walls.png", "offset": [1, 0], "autotile": True},
        ],
    }
    return orjson.dumps(data).decode("utf-8")
