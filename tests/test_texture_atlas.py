"""Tests for the single-page texture atlas and texture helpers."""

from pathlib import Path
from typing import Callable

import pytest
from PIL import Image
from PySide6.QtGui import QImage

from tile_atlas.atlas import PackingError, UnknownFrameError
from tile_atlas.atlas.textures import load_image, make_texture
from tile_atlas.texture_atlas import TextureAtlasBuilder


class TestTextureAtlas:
    """Test packing named textures onto one page."""

    def test_named_areas(self, make_png: Callable[..., str], tmp_path: Path, identity_uploader) -> None:
        make_png("textures/font.png", 128, 64)
        make_png("textures/cursor.png", 16, 16)

        atlas = (
            TextureAtlasBuilder(tmp_path / "textures", size=256)
            .add_texture("font")
            .add_texture("cursor")
            .build(uploader=identity_uploader)
        )

        font = atlas.get_texture_area("font")
        cursor = atlas.get_texture_area("cursor")
        assert (font.w, font.h) == (128, 64)
        assert (cursor.w, cursor.h) == (16, 16)
        assert sorted(atlas.names) == ["cursor", "font"]
        assert atlas.texture.getpixel((cursor.x, cursor.y)) == (255, 0, 0, 255)

    def test_unknown_name(self, make_png: Callable[..., str], tmp_path: Path, identity_uploader) -> None:
        make_png("textures/a.png", 8, 8)
        atlas = TextureAtlasBuilder(tmp_path / "textures").add_texture("a").build(
            uploader=identity_uploader
        )
        with pytest.raises(UnknownFrameError):
            atlas.get_texture_area("b")

    def test_overflow_does_not_open_new_page(
        self, make_png: Callable[..., str], tmp_path: Path
    ) -> None:
        make_png("textures/a.png", 32, 32)
        make_png("textures/b.png", 32, 32)
        builder = TextureAtlasBuilder(tmp_path / "textures", size=32).add_texture("a")
        with pytest.raises(PackingError):
            builder.add_texture("b")

    def test_missing_texture(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            TextureAtlasBuilder(tmp_path).add_texture("missing")

    def test_saves_page(self, make_png: Callable[..., str], tmp_path: Path, identity_uploader) -> None:
        make_png("textures/a.png", 8, 4)
        output = tmp_path / "atlas.png"
        TextureAtlasBuilder(tmp_path / "textures").add_texture("a").build(
            output_path=output, uploader=identity_uploader
        )
        with Image.open(output) as saved:
            assert saved.size == (8, 4)

    def test_settings_configure_directory_and_size(
        self, make_png: Callable[..., str], tmp_path: Path
    ) -> None:
        """Texture directory and page size are read from settings."""
        from tile_atlas.settings import AppSettings

        make_png("configured/a.png", 32, 32)
        make_png("configured/b.png", 32, 32)
        settings = AppSettings(file_path=tmp_path / "settings.ini")
        settings.atlas.texture_dir = tmp_path / "configured"
        settings.atlas.texture_atlas_size = 32

        builder = TextureAtlasBuilder(settings=settings)
        assert builder.texture_dir == tmp_path / "configured"
        assert builder.size == 32

        builder.add_texture("a")
        with pytest.raises(PackingError):
            builder.add_texture("b")

    def test_explicit_arguments_override_settings(self, tmp_path: Path) -> None:
        from tile_atlas.settings import AppSettings

        settings = AppSettings(file_path=tmp_path / "settings.ini")
        settings.atlas.texture_atlas_size = 32
        builder = TextureAtlasBuilder(tmp_path / "other", size=64, settings=settings)
        assert builder.texture_dir == tmp_path / "other"
        assert builder.size == 64


class TestTextures:
    """Test image import and the default uploader."""

    def test_load_image_converts_to_rgba(self, tmp_path: Path) -> None:
        path = tmp_path / "rgb.png"
        Image.new("RGB", (4, 4), (1, 2, 3)).save(path)
        image = load_image(path)
        assert image.mode == "RGBA"
        assert image.getpixel((0, 0)) == (1, 2, 3, 255)

    def test_make_texture_returns_qimage(self) -> None:
        texture = make_texture(Image.new("RGBA", (5, 3), (10, 20, 30, 255)))
        assert isinstance(texture, QImage)
        assert (texture.width(), texture.height()) == (5, 3)
        color = texture.pixelColor(0, 0)
        assert (color.red(), color.green(), color.blue()) == (10, 20, 30)
