"""
tile-atlas: texture atlas packing for 2D tile renderers

Packs sprite sheets into texture pages and resolves per-tile texture
coordinates, with a content-hash cache that skips repacking.
"""

__version__ = "0.1.0"
__author__ = "tile-atlas Contributors"

# Core service imports
from .atlas import TileAtlasService, TileAtlasBuilder, TileAtlas
from .texture_atlas import TextureAtlas, TextureAtlasBuilder
from .utils.logging_config import setup_logging

# Main data models
from .atlas.models import (
    Rect, AtlasTile, AtlasFrame, AnimatedKind, StaticKind, STATIC
)

__all__ = [
    # Services
    'TileAtlasService',
    'TileAtlasBuilder',
    'TileAtlas',
    'TextureAtlasBuilder',
    'TextureAtlas',

    # Logging
    'setup_logging',

    # Data models
    'Rect',
    'AtlasTile',
    'AtlasFrame',
    'AnimatedKind',
    'StaticKind',
    'STATIC',
]
