"""
Tile definition records.

A definition document lists the source images ("maps") with their grid
cell size and the tiles cut from them. Tile indices are assigned in record
order starting at 0.

    {
        "maps": [{"file_path": "tiles/ground.png", "tile_size": [24, 24]}],
        "tiles": [
            {"atlas": "tiles/ground.png", "offset": [0, 0]},
            {"atlas": "tiles/water.png", "offset": [0, 0], "autotile": true,
             "animation": {"frames": 4, "delay": 250}}
        ]
    }
"""

from dataclasses import dataclass, field
from typing import Any, List, Sequence, cast

import orjson

from .errors import DefinitionError
from .models import STATIC, AnimatedKind, AtlasTile, TileIndex, TileKind


def _expect(data: dict[str, Any], key: str, where: str) -> Any:
    if key not in data:
        raise DefinitionError(f"Missing '{key}' in {where}")
    return data[key]


def _int(value: Any, key: str, where: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise DefinitionError(f"'{key}' in {where} must be an integer: {e}") from e


def _pair(value: Any, key: str, where: str) -> tuple[int, int]:
    if not isinstance(value, list) or len(cast(list[Any], value)) != 2:
        raise DefinitionError(f"'{key}' in {where} must be a list of two integers")
    first, second = cast(list[Any], value)
    return _int(first, key, where), _int(second, key, where)


def _records(data: dict[str, Any], key: str) -> list[dict[str, Any]]:
    values = _expect(data, key, "definitions")
    if not isinstance(values, list):
        raise DefinitionError(f"'{key}' must be an array")
    records: list[dict[str, Any]] = []
    for i, record in enumerate(cast(Sequence[Any], values)):
        if not isinstance(record, dict):
            raise DefinitionError(f"{key}[{i}] must be a table")
        records.append(cast(dict[str, Any], record))
    return records


@dataclass
class FrameDefinition:
    """Source image and its tile grid cell size."""
    file_path: str
    tile_size: tuple[int, int]

    @classmethod
    def from_dict(cls, data: dict[str, Any], position: int = 0) -> "FrameDefinition":
        where = f"maps[{position}]"
        tile_size = _pair(_expect(data, "tile_size", where), "tile_size", where)
        if tile_size[0] <= 0 or tile_size[1] <= 0:
            raise DefinitionError(f"'tile_size' in {where} must be positive")
        return cls(
            file_path=str(_expect(data, "file_path", where)),
            tile_size=tile_size,
        )


@dataclass
class TileDefinition:
    """One tile: the source image it lives in and its cell there."""
    atlas: str
    offset: tuple[int, int]
    is_autotile: bool = False
    kind: TileKind = STATIC

    @classmethod
    def from_dict(cls, data: dict[str, Any], position: int = 0) -> "TileDefinition":
        """Create TileDefinition from a record.

        Optional keys: 'autotile' (bool) and 'animation' with 'frames' and
        'delay' (milliseconds).
        """
        where = f"tiles[{position}]"
        kind: TileKind = STATIC
        animation = data.get("animation")
        if animation is not None:
            if not isinstance(animation, dict):
                raise DefinitionError(f"'animation' in {where} must be a table")
            animation = cast(dict[str, Any], animation)
            anim_where = f"{where}.animation"
            kind = AnimatedKind(
                frame_count=_int(_expect(animation, "frames", anim_where), "frames", anim_where),
                delay_millis=_int(_expect(animation, "delay", anim_where), "delay", anim_where),
            )

        return cls(
            atlas=str(_expect(data, "atlas", where)),
            offset=_pair(_expect(data, "offset", where), "offset", where),
            is_autotile=bool(data.get("autotile", False)),
            kind=kind,
        )

    def to_atlas_tile(self) -> AtlasTile:
        return AtlasTile(offset=self.offset, is_autotile=self.is_autotile, kind=self.kind)


@dataclass
class DefinitionSet:
    """All frame and tile records of one definition document."""
    frames: List[FrameDefinition] = field(default_factory=lambda: [])
    tiles: List[TileDefinition] = field(default_factory=lambda: [])

    def indexed_tiles(self) -> list[tuple[TileIndex, TileDefinition]]:
        """Tiles paired with their sequential index."""
        return list(enumerate(self.tiles))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DefinitionSet":
        maps = _records(data, "maps")
        tiles = _records(data, "tiles")
        return cls(
            frames=[FrameDefinition.from_dict(record, i) for i, record in enumerate(maps)],
            tiles=[TileDefinition.from_dict(record, i) for i, record in enumerate(tiles)],
        )

    @classmethod
    def parse(cls, text: str) -> "DefinitionSet":
        """Parse a JSON definition document.

        Raises:
            DefinitionError: If the text is not valid JSON or misses records
        """
        try:
            data = orjson.loads(text)
        except orjson.JSONDecodeError as e:
            raise DefinitionError(f"Failed to parse tile definitions: {e}") from e
        if not isinstance(data, dict):
            raise DefinitionError("Tile definitions must be a JSON object")
        return cls.from_dict(cast(dict[str, Any], data))
