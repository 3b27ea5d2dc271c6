"""Application services.

Pure block operations (registry, copy, statistics) and the BlockService
that applies them to stored buildings.
"""
from __future__ import annotations

# Re-export services for convenient imports
# These will be available as:
#   from building_blocks.application.services import BlockService

__all__ = [
    "BlockService",
    "BlockStatistics",
    "BuildingLocks",
    "BuildingStatistics",
    "block_statistics",
    "building_statistics",
    "copy_block",
]


def __getattr__(name: str):
    """Lazy imports for services."""
    if name in ("BlockService", "BuildingLocks"):
        from building_blocks.application.services import block_service
        return getattr(block_service, name)
    elif name in ("BlockStatistics", "BuildingStatistics", "block_statistics", "building_statistics"):
        from building_blocks.application.services import statistics
        return getattr(statistics, name)
    elif name == "copy_block":
        from building_blocks.application.services.block_copy import copy_block
        return copy_block
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
