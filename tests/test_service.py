"""Tests for the cached tile atlas service."""

from pathlib import Path
from typing import Callable

import orjson
import pytest

from tile_atlas.atlas import (
    AtlasConfig,
    CacheDecision,
    CacheError,
    TileAtlasService,
    hash_str,
    load_atlas_config,
    write_atlas_config,
)
from tile_atlas.atlas.packer import PagePacker

TIMES = (0, 99, 150, 250, 1000, 12345)


@pytest.fixture
def service(tmp_path: Path, identity_uploader) -> TileAtlasService:
    return TileAtlasService(
        cache_root=tmp_path / "cache", base_path=tmp_path, uploader=identity_uploader
    )


class TestCacheDecision:
    """Test the rebuild-or-reuse decision."""

    def test_rebuild_without_cache(self, service: TileAtlasService, definitions_text: str) -> None:
        assert service.check_cache("tiles", definitions_text) is CacheDecision.REBUILD

    def test_reuse_after_build(self, service: TileAtlasService, definitions_text: str) -> None:
        service.load("tiles", definitions_text)
        assert service.last_decision is CacheDecision.REBUILD
        assert service.check_cache("tiles", definitions_text) is CacheDecision.REUSE

    def test_hash_mismatch_always_rebuilds(
        self, service: TileAtlasService, definitions_text: str
    ) -> None:
        """A persisted hash different from the current one never yields Reuse."""
        service.load("tiles", definitions_text)
        cached = load_atlas_config("tiles", service.cache_root)
        cached.file_hash = "0" * 64
        write_atlas_config(cached, "tiles", service.cache_root)

        assert service.check_cache("tiles", definitions_text) is CacheDecision.REBUILD
        assert service.check_cache("tiles", definitions_text + " ") is CacheDecision.REBUILD

    def test_unreadable_config_rebuilds(
        self, service: TileAtlasService, definitions_text: str
    ) -> None:
        service.load("tiles", definitions_text)
        (service.cache_root / "tiles" / "cache.bin").write_bytes(b"\x00garbage")
        assert service.check_cache("tiles", definitions_text) is CacheDecision.REBUILD

    def test_hash_is_sha3_hex(self) -> None:
        digest = hash_str("abc")
        assert len(digest) == 64
        assert digest == hash_str("abc")
        assert digest != hash_str("abd")


class TestRebuild:
    """Test building and persisting an atlas."""

    def test_writes_pages_and_config(
        self, service: TileAtlasService, definitions_text: str
    ) -> None:
        atlas = service.load("tiles", definitions_text)
        cache_dir = service.cache_root / "tiles"

        assert (cache_dir / "cache.bin").exists()
        assert [p.name for p in sorted(cache_dir.glob("*.png"))] == ["0.png"]

        cached = load_atlas_config("tiles", service.cache_root)
        assert cached.file_hash == hash_str(definitions_text)
        assert cached.locations == dict(atlas.locations)
        assert sorted(cached.locations) == [0, 1, 2, 3]

    def test_removes_stale_pages(
        self,
        tmp_path: Path,
        make_png: Callable[..., str],
        identity_uploader,
    ) -> None:
        """Pages left over from a larger previous build are deleted."""
        make_png("a.png", 64, 64)
        make_png("b.png", 64, 64)
        service = TileAtlasService(
            cache_root=tmp_path / "cache",
            base_path=tmp_path,
            page_width=64,
            page_height=64,
            uploader=identity_uploader,
        )
        two_pages = {
            "maps": [
                {"file_path": "a.png", "tile_size": [32, 32]},
                {"file_path": "b.png", "tile_size": [32, 32]},
            ],
            "tiles": [{"atlas": "b.png", "offset": [1, 1]}],
        }
        one_page = {
            "maps": [{"file_path": "a.png", "tile_size": [32, 32]}],
            "tiles": [{"atlas": "a.png", "offset": [0, 0]}],
        }

        assert service.load("tiles", orjson.dumps(two_pages).decode()).passes == 2
        assert service.load("tiles", orjson.dumps(one_page).decode()).passes == 1
        cache_dir = tmp_path / "cache" / "tiles"
        assert [p.name for p in cache_dir.glob("*.png")] == ["0.png"]

    def test_from_config_uses_file_stem(
        self, service: TileAtlasService, definitions_text: str, tmp_path: Path
    ) -> None:
        definition_file = tmp_path / "overworld.json"
        definition_file.write_text(definitions_text, encoding="utf-8")

        service.from_config(definition_file)

        assert (service.cache_root / "overworld" / "cache.bin").exists()

    def test_from_config_missing_file(self, service: TileAtlasService, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            service.from_config(tmp_path / "missing.json")


class TestReuse:
    """Test restoring an atlas from the cache."""

    def test_reuse_skips_packer_and_matches_build(
        self,
        service: TileAtlasService,
        definitions_text: str,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Unchanged definitions reload without packing and resolve identically."""
        built = service.load("tiles", definitions_text)

        calls: list[str] = []

        def count_place(self: PagePacker, key: str, image: object) -> None:
            calls.append(key)
            raise AssertionError("packer invoked on reuse")

        def count_fit(self: PagePacker, image: object) -> bool:
            calls.append("can_fit")
            return False

        monkeypatch.setattr(PagePacker, "place", count_place)
        monkeypatch.setattr(PagePacker, "can_fit", count_fit)

        reused = service.load("tiles", definitions_text)

        assert service.last_decision is CacheDecision.REUSE
        assert calls == []
        assert reused.passes == built.passes
        assert reused.page_size(0) == built.page_size(0)
        for index in built.locations:
            assert reused.tile_for(index) == built.tile_for(index)
            for now in TIMES:
                assert reused.texture_offset(index, now) == pytest.approx(
                    built.texture_offset(index, now)
                )

    def test_missing_page_file(self, service: TileAtlasService, definitions_text: str) -> None:
        """A config referencing a page that is gone is an inconsistent cache."""
        service.load("tiles", definitions_text)
        (service.cache_root / "tiles" / "0.png").unlink()

        with pytest.raises(CacheError):
            service.load("tiles", definitions_text)

    def test_pages_loaded_in_numeric_order(
        self,
        tmp_path: Path,
        make_png: Callable[..., str],
        identity_uploader,
    ) -> None:
        """Page 10 sorts after page 2."""
        cache_dir = tmp_path / "cache" / "many"
        for index in range(11):
            make_png(f"cache/many/{index}.png", index + 1, 1)
        config = AtlasConfig(file_hash=hash_str("text"))
        write_atlas_config(config, "many", tmp_path / "cache")
        service = TileAtlasService(cache_root=tmp_path / "cache", uploader=identity_uploader)

        atlas = service.reuse("many", config)

        assert cache_dir.exists()
        assert [atlas.page_size(i)[0] for i in range(atlas.passes)] == list(range(1, 12))
