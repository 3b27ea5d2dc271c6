"""Domain Models.

Core domain entities: buildings and their structural blocks.
"""
from __future__ import annotations

from building_blocks.domain.models.block import (
    Block,
    BlockBase,
    BlockUpdate,
    ConcreteBlock,
    ConcreteBlockUpdate,
    MasonryBlock,
    MasonryBlockUpdate,
    ModelingType,
    apply_update,
    block_class,
    create_block,
    variant_of,
)
from building_blocks.domain.models.building import (
    Building,
    BuildingType,
)
from building_blocks.domain.models.projections import (
    BlockSummary,
    BlockView,
    to_summary,
    to_view,
)

__all__ = [
    # Block
    "Block",
    "BlockBase",
    "ConcreteBlock",
    "MasonryBlock",
    "ModelingType",
    "BlockUpdate",
    "ConcreteBlockUpdate",
    "MasonryBlockUpdate",
    "apply_update",
    "block_class",
    "create_block",
    "variant_of",
    # Building
    "Building",
    "BuildingType",
    # Projections
    "BlockView",
    "BlockSummary",
    "to_view",
    "to_summary",
]
