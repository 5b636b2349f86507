"""
Frame table for tile atlases.

Keeps the two indices an atlas is made of: source key -> frame and tile
index -> source key. No I/O and no packing logic.
"""

import copy
from dataclasses import dataclass, field
from typing import Dict

from .errors import (
    DuplicateFrameError,
    DuplicateTileIndexError,
    MissingFrameError,
    UnknownFrameError,
    UnknownTileIndexError,
)
from .models import AtlasFrame, AtlasTile, TileIndex


@dataclass
class FrameTable:
    """Frames keyed by source image and the tile indices pointing into them.

    - frames[source_key] -> AtlasFrame
    - locations[tile_index] -> source_key
    """

    frames: Dict[str, AtlasFrame] = field(default_factory=lambda: {})
    locations: Dict[TileIndex, str] = field(default_factory=lambda: {})

    def __contains__(self, source_key: str) -> bool:
        return source_key in self.frames

    def add_frame(self, source_key: str, frame: AtlasFrame) -> None:
        """Register the frame of a source image."""
        if source_key in self.frames:
            raise DuplicateFrameError(f"Frame already registered: {source_key}")
        self.frames[source_key] = frame

    def add_tile(self, source_key: str, index: TileIndex, tile: AtlasTile) -> None:
        """Assign a tile index to a cell of an already registered frame."""
        frame = self.frames.get(source_key)
        if frame is None:
            raise MissingFrameError(
                f"Tile {index} refers to {source_key}, which has no frame yet"
            )
        owner = self.locations.get(index)
        if owner is not None or index in frame.tiles:
            raise DuplicateTileIndexError(
                f"Tile index {index} already assigned in {owner or source_key}"
            )
        frame.tiles[index] = tile
        self.locations[index] = source_key

    def has_tile(self, index: TileIndex) -> bool:
        return index in self.locations

    def frame_for(self, source_key: str) -> AtlasFrame:
        """Return the frame of a source image."""
        frame = self.frames.get(source_key)
        if frame is None:
            raise UnknownFrameError(f"No frame for source: {source_key}")
        return frame

    def frame_for_tile(self, index: TileIndex) -> AtlasFrame:
        """Return the frame hosting a tile index."""
        source_key = self.locations.get(index)
        if source_key is None:
            raise UnknownTileIndexError(f"Unknown tile index: {index}")
        return self.frame_for(source_key)

    def tile_for(self, index: TileIndex) -> AtlasTile:
        """Return the tile data registered for an index."""
        frame = self.frame_for_tile(index)
        tile = frame.tiles.get(index)
        if tile is None:
            raise UnknownTileIndexError(
                f"Tile index {index} missing from frame {self.locations[index]}"
            )
        return tile

    def copy(self) -> "FrameTable":
        """Deep copy, detached from further mutation of this table."""
        return FrameTable(
            frames=copy.deepcopy(self.frames),
            locations=dict(self.locations),
        )
