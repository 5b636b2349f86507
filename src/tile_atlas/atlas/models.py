"""
Data models for tile atlases.

Contains the dataclasses describing packed frames and the tiles they host.
Each model is intentionally lightweight: no file-system or packing logic.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple, cast

from .errors import DefinitionError

TileIndex = int
TileOffset = Tuple[int, int]
TileSize = Tuple[int, int]


# =============================================================================
# Geometry
# =============================================================================

@dataclass(frozen=True)
class Rect:
    """Packed rectangle in page-pixel space."""
    x: int
    y: int
    w: int
    h: int

    @property
    def right(self) -> int:
        return self.x + self.w

    @property
    def bottom(self) -> int:
        return self.y + self.h

    def to_dict(self) -> dict[str, int]:
        return {"x": self.x, "y": self.y, "w": self.w, "h": self.h}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Rect":
        return cls(
            x=int(data["x"]),
            y=int(data["y"]),
            w=int(data["w"]),
            h=int(data["h"]),
        )


# =============================================================================
# Tile Kinds
# =============================================================================

@dataclass(frozen=True)
class StaticKind:
    """Tile that always samples the same cell."""

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "static"}


@dataclass(frozen=True)
class AnimatedKind:
    """Looping animation of `frame_count` cells laid out to the right.

    The sequence advances one cell every `delay_millis` milliseconds and
    wraps around after the last frame.
    """
    frame_count: int
    delay_millis: int

    def __post_init__(self):
        if self.frame_count <= 0:
            raise DefinitionError(
                f"Animated tile needs a positive frame count, got {self.frame_count}"
            )
        if self.delay_millis <= 0:
            raise DefinitionError(
                f"Animated tile needs a positive delay, got {self.delay_millis}"
            )

    def current_frame(self, now_millis: int) -> int:
        """Return the frame shown at `now_millis`."""
        return (now_millis // self.delay_millis) % self.frame_count

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": "animated",
            "frame_count": self.frame_count,
            "delay_millis": self.delay_millis,
        }


TileKind = StaticKind | AnimatedKind

STATIC = StaticKind()


def tile_kind_from_dict(data: dict[str, Any]) -> TileKind:
    """Restore a tile kind written by `to_dict`."""
    kind = data.get("kind", "static")
    if kind == "static":
        return STATIC
    if kind == "animated":
        return AnimatedKind(
            frame_count=int(data["frame_count"]),
            delay_millis=int(data["delay_millis"]),
        )
    raise DefinitionError(f"Unknown tile kind: {kind!r}")


# =============================================================================
# Tiles and Frames
# =============================================================================

@dataclass(frozen=True)
class AtlasTile:
    """One logical tile inside a frame's tile grid.

    offset is the (col, row) cell within the frame. Autotiles store a 2x2
    meta-tile per logical cell, so they are sampled at half the grid size.
    """
    offset: TileOffset = (0, 0)
    is_autotile: bool = False
    kind: TileKind = STATIC

    @property
    def is_animated(self) -> bool:
        return isinstance(self.kind, AnimatedKind)

    def to_dict(self) -> dict[str, Any]:
        return {
            "offset": list(self.offset),
            "is_autotile": self.is_autotile,
            "kind": self.kind.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AtlasTile":
        """Create AtlasTile from a dict written by `to_dict`.

        Args:
            data: Dict with 'offset', 'is_autotile' and 'kind' keys

        Returns:
            AtlasTile instance
        """
        col, row = data.get("offset", (0, 0))
        return cls(
            offset=(int(col), int(row)),
            is_autotile=bool(data.get("is_autotile", False)),
            kind=tile_kind_from_dict(cast(dict[str, Any], data.get("kind", {}))),
        )


@dataclass
class AtlasFrame:
    """Packed placement of one source image (a sprite sheet).

    page_index names the page the image landed on and rect its location
    there. tiles maps every tile index hosted by this sheet to its cell.
    """
    tile_size: TileSize
    page_index: int
    rect: Rect
    tiles: Dict[TileIndex, AtlasTile] = field(default_factory=lambda: {})

    def to_dict(self) -> dict[str, Any]:
        return {
            "tile_size": list(self.tile_size),
            "page_index": self.page_index,
            "rect": self.rect.to_dict(),
            "tiles": {index: tile.to_dict() for index, tile in self.tiles.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AtlasFrame":
        """Create AtlasFrame from a dict written by `to_dict`.

        Tile index keys may come back as strings from JSON and are
        converted to int.
        """
        width, height = data["tile_size"]
        raw_tiles = cast(dict[Any, dict[str, Any]], data.get("tiles", {}))
        return cls(
            tile_size=(int(width), int(height)),
            page_index=int(data["page_index"]),
            rect=Rect.from_dict(data["rect"]),
            tiles={
                int(index): AtlasTile.from_dict(tile)
                for index, tile in raw_tiles.items()
            },
        )
