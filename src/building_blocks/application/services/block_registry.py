"""Block Registry.

Operations on the ordered, id-keyed block collection of one building.
These functions only touch the in-memory aggregate; loading, locking and
saving the building is the caller's job (see BlockService).
"""
from __future__ import annotations

from collections.abc import Iterable, Iterator

from building_blocks.domain import (
    Block,
    Building,
    ConcreteBlockUpdate,
    DuplicateIdError,
    MasonryBlockUpdate,
    ModelingType,
    NotFoundError,
    apply_update,
    variant_of,
)


def _index_of(building: Building, block_id: str) -> int:
    for index, block in enumerate(building.blocks):
        if block.id == block_id:
            return index
    raise NotFoundError("Block", block_id, {"building_id": str(building.id)})


def contains(building: Building, block_id: str) -> bool:
    return any(block.id == block_id for block in building.blocks)


def add(building: Building, block: Block) -> Block:
    """Append a block to the building.

    Args:
        building: Owning building
        block: New block

    Returns:
        The added block

    Raises:
        DuplicateIdError: If a block with the same id exists; the
            registry is left unchanged
    """
    variant_of(block)
    if contains(building, block.id):
        raise DuplicateIdError("Block", block.id, {"building_id": str(building.id)})
    building.blocks.append(block)
    return block


def get(building: Building, block_id: str) -> Block:
    """Get a block by id.

    Raises:
        NotFoundError: If the building has no such block
    """
    return building.blocks[_index_of(building, block_id)]


def remove(building: Building, block_id: str) -> Block:
    """Remove a block by id and return it.

    Raises:
        NotFoundError: If the building has no such block
    """
    return building.blocks.pop(_index_of(building, block_id))


def list_blocks(building: Building) -> list[Block]:
    """Get all blocks in registry order."""
    return list(building.blocks)


class _VariantView(Iterable[Block]):
    """Re-iterable filtered view; each iteration reads the current blocks."""

    def __init__(self, building: Building, kind: ModelingType) -> None:
        self._building = building
        self._kind = kind

    def __iter__(self) -> Iterator[Block]:
        return (b for b in self._building.blocks if variant_of(b) is self._kind)


def list_by_variant(building: Building, kind: ModelingType | str) -> Iterable[Block]:
    """Lazily list blocks of one modeling type, in registry order.

    Args:
        building: Owning building
        kind: Modeling type to keep

    Returns:
        Iterable that can be iterated any number of times

    Raises:
        ValidationError: If kind is not a modeling type
    """
    return _VariantView(building, ModelingType.from_string(kind))


def update(
    building: Building,
    block_id: str,
    mutation: ConcreteBlockUpdate | MasonryBlockUpdate,
) -> Block:
    """Apply a variant-specific partial update to a block.

    Either every supplied field is applied or, on any error, none is.

    Raises:
        NotFoundError: If the building has no such block
        TypeMismatchError: If mutation targets the other variant
        ValidationError: If a supplied value is invalid
    """
    return apply_update(get(building, block_id), mutation)
