"""Variant-independent read views of blocks.

Callers that list or summarize blocks work with these views; the field
set is defined here once instead of being inherited from either variant.
"""
from __future__ import annotations

from dataclasses import dataclass

from building_blocks.domain.models.block import Block, ModelingType, variant_of


@dataclass(frozen=True)
class BlockView:
    """Common view of a block with its derived geometry."""

    id: str
    name: str
    modeling_type: ModelingType
    x_axis_length: float
    y_axis_length: float
    storey_heights: tuple[float, ...]
    long_length: float
    short_length: float
    total_height: float


@dataclass(frozen=True)
class BlockSummary:
    """Compact block listing entry."""

    id: str
    name: str
    modeling_type: ModelingType
    storey_count: int
    total_height: float


def to_view(block: Block) -> BlockView:
    """Project a block of either variant onto the common view."""
    return BlockView(
        id=block.id,
        name=block.name,
        modeling_type=variant_of(block),
        x_axis_length=block.x_axis_length,
        y_axis_length=block.y_axis_length,
        storey_heights=block.storey_heights,
        long_length=block.long_length,
        short_length=block.short_length,
        total_height=block.total_height,
    )


def to_summary(block: Block) -> BlockSummary:
    return BlockSummary(
        id=block.id,
        name=block.name,
        modeling_type=variant_of(block),
        storey_count=block.storey_count,
        total_height=block.total_height,
    )
