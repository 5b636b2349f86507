"""
Persistable atlas metadata and the cache directory layout.

`AtlasConfig` is the pixel-free projection of a built atlas. It is stored as
orjson bytes in `<cache_root>/<config_name>/cache.bin`, next to one
`<N>.png` per page. The blob carries no version field: a format change
simply stops old caches from decoding and forces a rebuild.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, cast

import orjson

from .errors import CacheError
from .models import AtlasFrame, TileIndex

CACHE_ROOT = Path("data/.packed")
CACHE_FILE_NAME = "cache.bin"

logger = logging.getLogger(__name__)


@dataclass
class AtlasConfig:
    """Locations, frames and the hash of the definitions they came from."""
    locations: Dict[TileIndex, str] = field(default_factory=lambda: {})
    frames: Dict[str, AtlasFrame] = field(default_factory=lambda: {})
    file_hash: str = ""

    @property
    def page_count(self) -> int:
        """Pages referenced by the frames."""
        return max((frame.page_index + 1 for frame in self.frames.values()), default=0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "locations": dict(self.locations),
            "frames": {key: frame.to_dict() for key, frame in self.frames.items()},
            "file_hash": self.file_hash,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AtlasConfig":
        """Create AtlasConfig from a decoded blob.

        JSON object keys are strings, so tile indices are converted back
        to int here.
        """
        raw_locations = cast(dict[Any, Any], data.get("locations", {}))
        raw_frames = cast(dict[str, dict[str, Any]], data.get("frames", {}))
        return cls(
            locations={int(index): str(key) for index, key in raw_locations.items()},
            frames={key: AtlasFrame.from_dict(frame) for key, frame in raw_frames.items()},
            file_hash=str(data.get("file_hash", "")),
        )

    def serialize(self) -> bytes:
        """Encode to the compact binary blob."""
        return orjson.dumps(self.to_dict(), option=orjson.OPT_NON_STR_KEYS)

    @classmethod
    def deserialize(cls, blob: bytes) -> "AtlasConfig":
        """Decode a blob produced by `serialize`.

        Raises:
            CacheError: If the blob cannot be decoded
        """
        try:
            data = orjson.loads(blob)
            return cls.from_dict(cast(dict[str, Any], data))
        except (orjson.JSONDecodeError, AttributeError, KeyError, TypeError, ValueError) as e:
            raise CacheError(f"Cannot decode atlas config: {e}") from e


def get_config_cache_path(config_name: str, cache_root: Path | str = CACHE_ROOT) -> Path:
    """Directory holding the cached pages and metadata of one atlas."""
    return Path(cache_root) / config_name


def load_atlas_config(config_name: str, cache_root: Path | str = CACHE_ROOT) -> AtlasConfig:
    """Read `cache.bin` for an atlas.

    Raises:
        FileNotFoundError: If the atlas has no cached config
        CacheError: If the config cannot be decoded
    """
    path = get_config_cache_path(config_name, cache_root) / CACHE_FILE_NAME
    if not path.exists():
        raise FileNotFoundError(f"Atlas config not found: {path}")
    return AtlasConfig.deserialize(path.read_bytes())


def write_atlas_config(
    config: AtlasConfig, config_name: str, cache_root: Path | str = CACHE_ROOT
) -> Path:
    """Write `cache.bin` for an atlas, creating its directory if needed."""
    cache_dir = get_config_cache_path(config_name, cache_root)
    cache_dir.mkdir(parents=True, exist_ok=True)
    path = cache_dir / CACHE_FILE_NAME
    path.write_bytes(config.serialize())
    logger.debug(f"Wrote atlas config ({len(config.locations)} tiles) to {path}")
    return path
