"""Block Copy.

Creates a new block in the same building, seeded from an existing one.
The copy is built through the regular validated constructor of its
variant and added through the registry, so it gets the same checks as a
freshly created block.
"""
from __future__ import annotations

from building_blocks.application.services import block_registry
from building_blocks.domain import (
    Block,
    Building,
    ConcreteBlock,
    MasonryBlock,
    UnsupportedVariantError,
)

COPY_NAME_SUFFIX = " (Copy)"


def copy_block(
    building: Building,
    source_id: str,
    new_id: str,
    new_name: str | None = None,
) -> Block:
    """Copy a block under a new id.

    Args:
        building: Building owning the source block
        source_id: Id of the block to copy
        new_id: Id for the copy
        new_name: Name for the copy, defaults to "<source name> (Copy)"

    Returns:
        The new block, already added to the building

    Raises:
        NotFoundError: If source_id is not in the building
        DuplicateIdError: If new_id is already in the building
        UnsupportedVariantError: If the source is of an unknown variant
        ValidationError: If the copy fails validation (e.g. name too long)
    """
    source = block_registry.get(building, source_id)
    name = new_name if new_name is not None else f"{source.name}{COPY_NAME_SUFFIX}"

    if isinstance(source, ConcreteBlock):
        clone: Block = ConcreteBlock(
            id=new_id,
            name=name,
            x_axis_length=source.x_axis_length,
            y_axis_length=source.y_axis_length,
            storey_heights=source.storey_heights,
            compressive_strength_of_concrete=source.compressive_strength_of_concrete,
            yield_strength_of_steel=source.yield_strength_of_steel,
            transverse_reinforcement_spacing=source.transverse_reinforcement_spacing,
            reinforcement_ratio=source.reinforcement_ratio,
            hook_exists=source.hook_exists,
            is_strengthened=source.is_strengthened,
        )
    elif isinstance(source, MasonryBlock):
        clone = MasonryBlock(
            id=new_id,
            name=name,
            x_axis_length=source.x_axis_length,
            y_axis_length=source.y_axis_length,
            storey_heights=source.storey_heights,
            unit_types=source.unit_types,
        )
    else:
        raise UnsupportedVariantError(type(source).__name__)

    return block_registry.add(building, clone)
