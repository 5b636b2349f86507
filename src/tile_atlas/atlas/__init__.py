"""
Tile atlas package.

Provides packing of sprite sheets into texture pages, texture-coordinate
lookup for static, animated and autotile tiles, and a hash-keyed on-disk
cache that skips repacking when the definitions are unchanged.
"""

from .builder import TileAtlasBuilder
from .config import AtlasConfig, get_config_cache_path, load_atlas_config, write_atlas_config
from .definitions import DefinitionSet, FrameDefinition, TileDefinition
from .errors import (
    AtlasError,
    AtlasPreconditionError,
    BuilderStateError,
    CacheError,
    DefinitionError,
    DuplicateFrameError,
    DuplicateTileIndexError,
    MissingFrameError,
    PackingError,
    UnknownFrameError,
    UnknownTileIndexError,
)
from .managers import FrameTable
from .models import STATIC, AnimatedKind, AtlasFrame, AtlasTile, Rect, StaticKind, TileKind
from .packer import PagePacker
from .service import CacheDecision, TileAtlasService, hash_str
from .tile_atlas import TileAtlas

# Public classes intended for external use
__all__ = [
    # Main service
    'TileAtlasService',
    'CacheDecision',
    'hash_str',

    # Building and querying
    'TileAtlasBuilder',
    'TileAtlas',
    'FrameTable',
    'PagePacker',

    # Data models
    'AnimatedKind',
    'AtlasConfig',
    'AtlasFrame',
    'AtlasTile',
    'Rect',
    'STATIC',
    'StaticKind',
    'TileKind',

    # Definitions
    'DefinitionSet',
    'FrameDefinition',
    'TileDefinition',

    # Cache files
    'get_config_cache_path',
    'load_atlas_config',
    'write_atlas_config',

    # Errors
    'AtlasError',
    'AtlasPreconditionError',
    'BuilderStateError',
    'CacheError',
    'DefinitionError',
    'DuplicateFrameError',
    'DuplicateTileIndexError',
    'MissingFrameError',
    'PackingError',
    'UnknownFrameError',
    'UnknownTileIndexError',
]
