"""
Built tile atlas and texture-coordinate resolution.

A `TileAtlas` is produced once by `TileAtlasBuilder.build()` or restored from
the cache. It is never mutated afterwards and can be queried from any thread.
"""

from types import MappingProxyType
from typing import Any, Mapping, Sequence

from .config import AtlasConfig
from .managers import FrameTable
from .models import AnimatedKind, AtlasFrame, AtlasTile, Rect, TileIndex, TileSize

DEFAULT_MAP_CELL = (24, 24)


def grid_offset(rect: Rect, tile_size: TileSize) -> tuple[int, int]:
    """Grid cell of a frame's top-left corner, rounded up to whole cells."""
    def ceil_div(a: int, b: int) -> int:
        return (a + b - 1) // b

    return ceil_div(rect.x, tile_size[0]), ceil_div(rect.y, tile_size[1])


class TileAtlas:
    """Packed pages plus the lookup table for every tile index.

    textures holds one uploaded handle per page and page_sizes the pixel
    size of each page, in page order.
    """

    def __init__(
        self,
        table: FrameTable,
        textures: Sequence[Any],
        page_sizes: Sequence[tuple[int, int]],
    ):
        if len(textures) != len(page_sizes):
            raise ValueError(
                f"Got {len(textures)} textures for {len(page_sizes)} pages"
            )
        self._table = table.copy()
        self._textures = tuple(textures)
        self._page_sizes = tuple(page_sizes)

    @classmethod
    def from_config(
        cls,
        config: AtlasConfig,
        textures: Sequence[Any],
        page_sizes: Sequence[tuple[int, int]],
    ) -> "TileAtlas":
        """Rebuild an atlas from persisted metadata and reloaded pages."""
        table = FrameTable(frames=dict(config.frames), locations=dict(config.locations))
        return cls(table, textures, page_sizes)

    # === TABLE ACCESS ===

    @property
    def locations(self) -> Mapping[TileIndex, str]:
        return MappingProxyType(self._table.locations)

    @property
    def frames(self) -> Mapping[str, AtlasFrame]:
        return MappingProxyType(self._table.frames)

    def __contains__(self, index: TileIndex) -> bool:
        return self._table.has_tile(index)

    def frame_for(self, source_key: str) -> AtlasFrame:
        return self._table.frame_for(source_key)

    def tile_for(self, index: TileIndex) -> AtlasTile:
        return self._table.tile_for(index)

    def make_config(self, file_hash: str) -> AtlasConfig:
        """Project this atlas onto its persistable metadata."""
        copied = self._table.copy()
        return AtlasConfig(
            locations=copied.locations,
            frames=copied.frames,
            file_hash=file_hash,
        )

    # === PAGES ===

    @property
    def passes(self) -> int:
        """Number of pages, one render pass each."""
        return len(self._textures)

    def texture(self, page_index: int) -> Any:
        return self._textures[page_index]

    def page_size(self, page_index: int) -> tuple[int, int]:
        return self._page_sizes[page_index]

    # === QUERIES ===

    def tile_page_index(self, index: TileIndex) -> int:
        """Page the tile's frame was packed onto."""
        return self._table.frame_for_tile(index).page_index

    def tile_texture_size(self, index: TileIndex) -> TileSize:
        """Nominal grid cell size of the tile's frame."""
        return self._table.frame_for_tile(index).tile_size

    def sampling_size(self, index: TileIndex) -> TileSize:
        """Cell size the tile is sampled at; halved for autotiles."""
        frame = self._table.frame_for_tile(index)
        width, height = frame.tile_size
        if self._table.tile_for(index).is_autotile:
            width //= 2
            height //= 2
        return width, height

    def sprite_tex_ratio(self, index: TileIndex) -> tuple[float, float]:
        """Texture-space size of one sampling cell of the tile."""
        frame = self._table.frame_for_tile(index)
        cell_width, cell_height = self.sampling_size(index)
        page_width, page_height = self.page_size(frame.page_index)

        cols = max(1, page_width // cell_width)
        rows = max(1, page_height // cell_height)
        return 1.0 / cols, 1.0 / rows

    def tilemap_tex_ratio(
        self, page_index: int, cell_size: TileSize = DEFAULT_MAP_CELL
    ) -> tuple[float, float]:
        """Texture-space size of a fixed map cell on a page."""
        page_width, page_height = self.page_size(page_index)
        cols = max(1, page_width // cell_size[0])
        rows = max(1, page_height // cell_size[1])
        return 1.0 / cols, 1.0 / rows

    def texture_offset(self, index: TileIndex, now_millis: int) -> tuple[float, float]:
        """Normalized offset of the tile's current cell within its page.

        Animated tiles advance one cell to the right every delay. Autotiles
        are addressed in half-size cells and their frames are two cells
        wide, so an autotile frame step moves four half-size cells.

        Args:
            index: Registered tile index
            now_millis: Elapsed time driving animations

        Returns:
            (u, v) offset in 0..1 texture space

        Raises:
            UnknownTileIndexError: If the index was never registered
        """
        frame = self._table.frame_for_tile(index)
        tile = self._table.tile_for(index)
        ratio_x, ratio_y = self.sprite_tex_ratio(index)
        add_x, add_y = grid_offset(frame.rect, frame.tile_size)
        scale = 2 if tile.is_autotile else 1

        advance = 0
        if isinstance(tile.kind, AnimatedKind):
            advance = tile.kind.current_frame(now_millis) * scale

        col = (tile.offset[0] + add_x + advance) * scale
        row = (tile.offset[1] + add_y) * scale
        return col * ratio_x, row * ratio_y
