"""Tests for the page packer."""

import pytest
from PIL import Image

from tile_atlas.atlas.errors import PackingError
from tile_atlas.atlas.packer import PagePacker


def solid(width: int, height: int, color=(255, 0, 0, 255)) -> Image.Image:
    return Image.new("RGBA", (width, height), color)


class TestPagePacker:
    """Test placing images on a single page."""

    def test_first_image_at_origin(self) -> None:
        """The first image is placed at the page origin with its own size."""
        packer = PagePacker(64, 64)
        rect = packer.place("a", solid(24, 16))
        assert (rect.x, rect.y, rect.w, rect.h) == (0, 0, 24, 16)
        assert packer.get_frame("a") == rect
        assert "a" in packer

    def test_can_fit_rejects_oversized_image(self) -> None:
        """An image larger than the page never fits."""
        packer = PagePacker(64, 64)
        assert not packer.can_fit(solid(65, 10))
        assert packer.can_fit(solid(64, 64))

    def test_place_duplicate_key_fails(self) -> None:
        """Placing the same key twice on one page fails."""
        packer = PagePacker(64, 64)
        packer.place("a", solid(8, 8))
        with pytest.raises(PackingError):
            packer.place("a", solid(8, 8))

    def test_place_on_full_page_fails(self) -> None:
        """A full page rejects further images."""
        packer = PagePacker(32, 32)
        packer.place("a", solid(32, 32))
        assert not packer.can_fit(solid(1, 1))
        with pytest.raises(PackingError):
            packer.place("b", solid(1, 1))

    def test_rects_do_not_overlap(self) -> None:
        """Packed rects stay inside the page and never overlap."""
        packer = PagePacker(64, 64)
        rects = [packer.place(f"r{i}", solid(16, 16)) for i in range(16)]

        for rect in rects:
            assert rect.x >= 0 and rect.y >= 0
            assert rect.right <= 64 and rect.bottom <= 64
        for i, a in enumerate(rects):
            for b in rects[i + 1:]:
                overlap = a.x < b.right and b.x < a.right and a.y < b.bottom and b.y < a.bottom
                assert not overlap

    def test_export_uses_used_extent(self) -> None:
        """Exported pages are cropped to the packed extent by default."""
        packer = PagePacker(256, 256)
        packer.place("a", solid(40, 20))
        page = packer.export()
        assert page.size == (40, 20)
        assert page.mode == "RGBA"

    def test_export_full_page_when_forced(self) -> None:
        """force_max_dimensions exports the whole page."""
        packer = PagePacker(128, 64, force_max_dimensions=True)
        packer.place("a", solid(10, 10))
        assert packer.export().size == (128, 64)

    def test_export_copies_pixels(self) -> None:
        """Every packed image appears at its rect on the exported page."""
        packer = PagePacker(64, 64)
        red = packer.place("red", solid(8, 8, (255, 0, 0, 255)))
        blue = packer.place("blue", solid(8, 8, (0, 0, 255, 255)))
        page = packer.export()
        assert page.getpixel((red.x, red.y)) == (255, 0, 0, 255)
        assert page.getpixel((blue.x, blue.y)) == (0, 0, 255, 255)
