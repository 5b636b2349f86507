"""
Exception types raised by the atlas package.

Precondition errors are programmer mistakes (wrong call order, duplicate
registration, querying an index that was never registered). They derive from
AssertionError so they are never mistaken for recoverable runtime failures.
"""


class AtlasError(Exception):
    """Base class for all atlas errors."""
    pass


class AtlasPreconditionError(AtlasError, AssertionError):
    """Raised when an atlas operation is called in a state that forbids it."""
    pass


class DuplicateFrameError(AtlasPreconditionError):
    """Raised when a frame is registered twice for the same source key."""
    pass


class MissingFrameError(AtlasPreconditionError):
    """Raised when a tile is added for a source key with no frame yet."""
    pass


class DuplicateTileIndexError(AtlasPreconditionError):
    """Raised when a tile index is assigned twice within one frame."""
    pass


class UnknownTileIndexError(AtlasPreconditionError):
    """Raised when a tile index was never registered."""
    pass


class UnknownFrameError(AtlasPreconditionError):
    """Raised when a source key has no frame."""
    pass


class BuilderStateError(AtlasPreconditionError):
    """Raised when a builder is used after build() has been called."""
    pass


class PackingError(AtlasError):
    """Raised when an image cannot be placed on a page."""
    pass


class CacheError(AtlasError):
    """Raised when the cache directory holds unreadable or inconsistent data."""
    pass


class DefinitionError(AtlasError, ValueError):
    """Raised when tile definitions are malformed."""
    pass
