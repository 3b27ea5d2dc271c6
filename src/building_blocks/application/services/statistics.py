"""Block Statistics.

Derived engineering metrics for single blocks and whole buildings.
All functions are pure: they read the current block geometry and never
cache or write anything back.
"""
from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from building_blocks.domain import (
    Block,
    Building,
    DivisionUndefined,
    EmptyCollectionError,
    ModelingType,
    UnsupportedVariantError,
    variant_of,
)


@dataclass(frozen=True)
class BlockStatistics:
    """Derived metrics of a single block."""

    block_id: str
    modeling_type: ModelingType
    area: float              # m²
    height: float            # m
    storey_count: int
    aspect_ratio: float
    volume_estimate: float   # m³


@dataclass(frozen=True)
class BuildingStatistics:
    """Aggregate metrics over all blocks of a building."""

    building_id: UUID
    block_count: int
    concrete_block_count: int
    masonry_block_count: int
    total_area: float
    max_height: float
    code: int
    bks: int


def block_area(block: Block) -> float:
    """Plan area of a block in square meters."""
    return block.x_axis_length * block.y_axis_length


def aspect_ratio(block: Block) -> float:
    """Ratio of long to short plan dimension.

    Raises:
        DivisionUndefined: If the short dimension is zero
    """
    short = block.short_length
    if short == 0:
        raise DivisionUndefined(
            f"Aspect ratio undefined for block {block.id}: short length is 0",
            {"block_id": block.id},
        )
    return block.long_length / short


def block_statistics(block: Block) -> BlockStatistics:
    """Compute derived metrics for a block.

    Args:
        block: Block of either variant

    Returns:
        BlockStatistics

    Raises:
        DivisionUndefined: If the aspect ratio is undefined
        UnsupportedVariantError: If block is not a known variant
    """
    area = block_area(block)
    height = block.total_height
    return BlockStatistics(
        block_id=block.id,
        modeling_type=variant_of(block),
        area=area,
        height=height,
        storey_count=block.storey_count,
        aspect_ratio=aspect_ratio(block),
        volume_estimate=area * height,
    )


def building_statistics(building: Building) -> BuildingStatistics:
    """Compute aggregate metrics for a building.

    Args:
        building: Building with its blocks loaded

    Returns:
        BuildingStatistics

    Raises:
        EmptyCollectionError: If the building has no blocks
        UnsupportedVariantError: If a block is not a known variant
    """
    if not building.blocks:
        raise EmptyCollectionError(
            f"Building {building.id} has no blocks; max height is undefined",
            {"building_id": str(building.id)},
        )

    concrete = 0
    masonry = 0
    for block in building.blocks:
        kind = variant_of(block)
        if kind is ModelingType.CONCRETE:
            concrete += 1
        elif kind is ModelingType.MASONRY:
            masonry += 1
        else:
            raise UnsupportedVariantError(kind)

    return BuildingStatistics(
        building_id=building.id,
        block_count=len(building.blocks),
        concrete_block_count=concrete,
        masonry_block_count=masonry,
        total_area=sum(block_area(b) for b in building.blocks),
        max_height=max(b.total_height for b in building.blocks),
        code=building.code,
        bks=building.bks,
    )
