"""Block Service.

Runs block registry, copy and statistics operations against stored
buildings. Every mutation of a building runs load -> change -> save ->
commit while holding that building's lock, so the duplicate-id check
and the write cannot interleave with another mutation of the same
building. Any failure along the way rolls the transaction back.
Different buildings do not share a lock.
"""
from __future__ import annotations

import asyncio
from typing import Any, Callable, Mapping, TypeVar
from uuid import UUID
from weakref import WeakValueDictionary

from building_blocks.application.services import block_registry
from building_blocks.application.services.block_copy import copy_block
from building_blocks.application.services.statistics import (
    BlockStatistics,
    BuildingStatistics,
    block_statistics,
    building_statistics,
)
from building_blocks.domain import (
    Block,
    BlockSummary,
    Building,
    ConcreteBlock,
    ConcreteBlockUpdate,
    IUnitOfWork,
    MasonryBlock,
    MasonryBlockUpdate,
    ModelingType,
    create_block,
    to_summary,
    variant_of,
)
from building_blocks.shared.logging import building_context, get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class BuildingLocks:
    """Per-building asyncio locks.

    Locks are held weakly and disappear once no task uses them.
    """

    def __init__(self) -> None:
        self._locks: WeakValueDictionary[UUID, asyncio.Lock] = WeakValueDictionary()

    def for_building(self, building_id: UUID) -> asyncio.Lock:
        """Get the lock serializing mutations of one building."""
        lock = self._locks.get(building_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[building_id] = lock
        return lock


_default_locks = BuildingLocks()


class BlockService:
    """Service for managing the blocks of a building."""

    def __init__(self, uow: IUnitOfWork, locks: BuildingLocks | None = None) -> None:
        """Initialize service.

        Args:
            uow: Entered unit of work
            locks: Lock table; services of one process should share it
        """
        self._uow = uow
        self._locks = locks or _default_locks

    # =========================================================================
    # Internals
    # =========================================================================

    async def _mutate(self, building_id: UUID, change: Callable[[Building], T]) -> T:
        async with self._locks.for_building(building_id):
            try:
                building = await self._uow.buildings.load(building_id)
                result = change(building)
                await self._uow.buildings.save(building)
                await self._uow.commit()
            except Exception as e:
                await self._uow.rollback()
                logger.warning(
                    "Block mutation rolled back",
                    error_type=type(e).__name__,
                    error=str(e),
                )
                raise
        return result

    async def _load(self, building_id: UUID) -> Building:
        return await self._uow.buildings.load(building_id)

    # =========================================================================
    # Create
    # =========================================================================

    async def create_block(
        self,
        building_id: UUID,
        kind: ModelingType | str,
        data: Mapping[str, Any],
    ) -> Block:
        """Create a block of the given kind in a building.

        Args:
            building_id: Building UUID
            kind: "Concrete" or "Masonry"
            data: Block fields

        Returns:
            The stored block

        Raises:
            NotFoundError: If the building does not exist
            ValidationError: If kind or a field is invalid
            DuplicateIdError: If the block id is taken in this building
        """
        block = create_block(kind, data)
        with building_context(building_id):
            stored = await self._mutate(building_id, lambda b: block_registry.add(b, block))
            logger.info(
                "Block created",
                block_id=stored.id,
                modeling_type=variant_of(stored).value,
            )
        return stored

    async def create_concrete_block(self, building_id: UUID, data: Mapping[str, Any]) -> ConcreteBlock:
        block = await self.create_block(building_id, ModelingType.CONCRETE, data)
        return block.as_concrete()

    async def create_masonry_block(self, building_id: UUID, data: Mapping[str, Any]) -> MasonryBlock:
        block = await self.create_block(building_id, ModelingType.MASONRY, data)
        return block.as_masonry()

    # =========================================================================
    # Read
    # =========================================================================

    async def get_block(self, building_id: UUID, block_id: str) -> Block:
        building = await self._load(building_id)
        return block_registry.get(building, block_id)

    async def list_blocks(self, building_id: UUID) -> list[Block]:
        """Get all blocks of a building in registry order."""
        building = await self._load(building_id)
        return block_registry.list_blocks(building)

    async def list_concrete_blocks(self, building_id: UUID) -> list[ConcreteBlock]:
        building = await self._load(building_id)
        return [
            b.as_concrete()
            for b in block_registry.list_by_variant(building, ModelingType.CONCRETE)
        ]

    async def list_masonry_blocks(self, building_id: UUID) -> list[MasonryBlock]:
        building = await self._load(building_id)
        return [
            b.as_masonry()
            for b in block_registry.list_by_variant(building, ModelingType.MASONRY)
        ]

    async def get_block_summary(self, building_id: UUID, block_id: str) -> BlockSummary:
        return to_summary(await self.get_block(building_id, block_id))

    async def get_block_statistics(self, building_id: UUID, block_id: str) -> BlockStatistics:
        """Get derived metrics of one block.

        Raises:
            NotFoundError: If the building or block does not exist
            DivisionUndefined: If the aspect ratio is undefined
        """
        return block_statistics(await self.get_block(building_id, block_id))

    async def get_building_statistics(self, building_id: UUID) -> BuildingStatistics:
        """Get aggregate metrics of a building.

        Raises:
            NotFoundError: If the building does not exist
            EmptyCollectionError: If the building has no blocks
        """
        return building_statistics(await self._load(building_id))

    # =========================================================================
    # Update / Delete / Copy
    # =========================================================================

    async def update_block(
        self,
        building_id: UUID,
        block_id: str,
        mutation: ConcreteBlockUpdate | MasonryBlockUpdate,
    ) -> Block:
        """Apply a partial, variant-specific update to a block.

        Raises:
            NotFoundError: If the building or block does not exist
            TypeMismatchError: If mutation targets the other variant
            ValidationError: If a supplied value is invalid
        """
        with building_context(building_id):
            block = await self._mutate(
                building_id, lambda b: block_registry.update(b, block_id, mutation)
            )
            logger.info("Block updated", block_id=block_id, fields=sorted(mutation.changes()))
        return block

    async def delete_block(self, building_id: UUID, block_id: str) -> Block:
        """Remove a block from its building.

        Raises:
            NotFoundError: If the building or block does not exist
        """
        with building_context(building_id):
            removed = await self._mutate(
                building_id, lambda b: block_registry.remove(b, block_id)
            )
            logger.info("Block deleted", block_id=block_id)
        return removed

    async def copy_block(
        self,
        building_id: UUID,
        source_id: str,
        new_id: str,
        new_name: str | None = None,
    ) -> Block:
        """Copy a block within its building under a new id.

        Raises:
            NotFoundError: If the building or source block does not exist
            DuplicateIdError: If new_id is taken in this building
        """
        with building_context(building_id):
            clone = await self._mutate(
                building_id, lambda b: copy_block(b, source_id, new_id, new_name)
            )
            logger.info("Block copied", source_id=source_id, block_id=clone.id)
        return clone
