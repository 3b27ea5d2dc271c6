"""Tests for BlockService against a SQLite database."""
from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable
from uuid import UUID, uuid4

import pytest

from building_blocks.application.services import BlockService, BuildingLocks
from building_blocks.domain import (
    Building,
    ConcreteBlock,
    ConcreteBlockUpdate,
    ConcurrencyError,
    DuplicateIdError,
    EmptyCollectionError,
    MasonryBlock,
    MasonryBlockUpdate,
    ModelingType,
    NotFoundError,
    StorageError,
    TypeMismatchError,
    ValidationError,
)
from building_blocks.infrastructure.repositories import UnitOfWork


async def _stored_ids(building_id: UUID) -> list[str]:
    async with UnitOfWork() as uow:
        return [b.id for b in await BlockService(uow).list_blocks(building_id)]


class TestCreateAndRead:
    """Tests for creating and reading blocks."""

    async def test_create_then_get(self, building_id: UUID, concrete_data: dict[str, Any]) -> None:
        async with UnitOfWork() as uow:
            created = await BlockService(uow).create_concrete_block(building_id, concrete_data)

        async with UnitOfWork() as uow:
            block = await BlockService(uow).get_block(building_id, "B1")

        assert isinstance(block, ConcreteBlock)
        assert block == created
        assert block.modeling_type is ModelingType.CONCRETE
        assert block.total_height == 9.0

    async def test_list_by_variant(
        self,
        building_id: UUID,
        concrete_data: dict[str, Any],
        masonry_data: dict[str, Any],
    ) -> None:
        async with UnitOfWork() as uow:
            service = BlockService(uow)
            await service.create_block(building_id, "Concrete", concrete_data)
            await service.create_masonry_block(building_id, masonry_data)
            await service.create_block(building_id, "Concrete", {**concrete_data, "id": "B2"})

            concrete = await service.list_concrete_blocks(building_id)
            masonry = await service.list_masonry_blocks(building_id)

        assert [b.id for b in concrete] == ["B1", "B2"]
        assert [b.id for b in masonry] == ["M1"]
        assert isinstance(masonry[0], MasonryBlock)
        assert await _stored_ids(building_id) == ["B1", "M1", "B2"]

    async def test_duplicate_id(self, building_id: UUID, concrete_data: dict[str, Any]) -> None:
        async with UnitOfWork() as uow:
            service = BlockService(uow)
            await service.create_concrete_block(building_id, concrete_data)
            with pytest.raises(DuplicateIdError):
                await service.create_concrete_block(building_id, {**concrete_data, "name": "Other"})

        assert await _stored_ids(building_id) == ["B1"]

    async def test_invalid_input(self, building_id: UUID, concrete_data: dict[str, Any]) -> None:
        async with UnitOfWork() as uow:
            with pytest.raises(ValidationError):
                await BlockService(uow).create_block(building_id, "Steel", concrete_data)

        assert await _stored_ids(building_id) == []

    async def test_missing_building(self, database: None, concrete_data: dict[str, Any]) -> None:
        async with UnitOfWork() as uow:
            with pytest.raises(NotFoundError):
                await BlockService(uow).create_concrete_block(uuid4(), concrete_data)

    async def test_summary(self, building_id: UUID, masonry_data: dict[str, Any]) -> None:
        async with UnitOfWork() as uow:
            service = BlockService(uow)
            await service.create_masonry_block(building_id, masonry_data)
            summary = await service.get_block_summary(building_id, "M1")

        assert summary.name == "Guard house"
        assert summary.storey_count == 2


class TestUpdateDeleteCopy:
    """Tests for mutating blocks through the service."""

    async def test_update_persists(self, building_id: UUID, concrete_data: dict[str, Any]) -> None:
        async with UnitOfWork() as uow:
            service = BlockService(uow)
            await service.create_concrete_block(building_id, concrete_data)
            await service.update_block(
                building_id,
                "B1",
                ConcreteBlockUpdate(storey_heights=[4.0, 4.0], is_strengthened=True),
            )

        async with UnitOfWork() as uow:
            block = (await BlockService(uow).get_block(building_id, "B1")).as_concrete()

        assert block.total_height == 8.0
        assert block.is_strengthened is True
        assert block.compressive_strength_of_concrete == 25.0

    async def test_update_wrong_variant(self, building_id: UUID, masonry_data: dict[str, Any]) -> None:
        async with UnitOfWork() as uow:
            service = BlockService(uow)
            await service.create_masonry_block(building_id, masonry_data)
            with pytest.raises(TypeMismatchError):
                await service.update_block(building_id, "M1", ConcreteBlockUpdate(name="X"))
            with pytest.raises(ValidationError):
                await service.update_block(building_id, "M1", MasonryBlockUpdate(name="X", x_axis_length=0.0))

        async with UnitOfWork() as uow:
            block = await BlockService(uow).get_block(building_id, "M1")
        assert block.name == "Guard house"
        assert block.x_axis_length == 6.0

    async def test_delete(self, building_id: UUID, concrete_data: dict[str, Any]) -> None:
        async with UnitOfWork() as uow:
            service = BlockService(uow)
            await service.create_concrete_block(building_id, concrete_data)
            removed = await service.delete_block(building_id, "B1")
            assert removed.id == "B1"

            with pytest.raises(NotFoundError):
                await service.get_block(building_id, "B1")
            with pytest.raises(NotFoundError):
                await service.delete_block(building_id, "B1")

    async def test_copy(self, building_id: UUID, masonry_data: dict[str, Any]) -> None:
        async with UnitOfWork() as uow:
            service = BlockService(uow)
            await service.create_masonry_block(building_id, masonry_data)
            await service.copy_block(building_id, "M1", "M2")

        async with UnitOfWork() as uow:
            service = BlockService(uow)
            source = (await service.get_block(building_id, "M1")).as_masonry()
            clone = (await service.get_block(building_id, "M2")).as_masonry()

        assert clone.name == "Guard house (Copy)"
        assert clone.unit_types == source.unit_types
        assert source.name == "Guard house"


class TestStatistics:
    """Tests for statistics read through the service."""

    async def test_block_and_building(
        self,
        building_id: UUID,
        concrete_data: dict[str, Any],
        masonry_data: dict[str, Any],
    ) -> None:
        async with UnitOfWork() as uow:
            service = BlockService(uow)
            await service.create_concrete_block(building_id, concrete_data)
            await service.create_masonry_block(building_id, masonry_data)

            block_stats = await service.get_block_statistics(building_id, "B1")
            building_stats = await service.get_building_statistics(building_id)

        assert block_stats.area == 40.0
        assert block_stats.volume_estimate == 360.0
        assert building_stats.block_count == 2
        assert building_stats.concrete_block_count == 1
        assert building_stats.masonry_block_count == 1
        assert building_stats.max_height == 9.0

    async def test_empty_building(self, building_id: UUID) -> None:
        async with UnitOfWork() as uow:
            with pytest.raises(EmptyCollectionError):
                await BlockService(uow).get_building_statistics(building_id)


class TestConcurrency:
    """Tests for serialized mutations of one building."""

    async def test_concurrent_create_same_id(
        self,
        building_id: UUID,
        concrete_data: dict[str, Any],
    ) -> None:
        """Test that only one of two racing creates with one id wins."""
        locks = BuildingLocks()

        async def create(name: str) -> ConcreteBlock:
            async with UnitOfWork() as uow:
                service = BlockService(uow, locks)
                return await service.create_concrete_block(
                    building_id, {**concrete_data, "name": name}
                )

        results = await asyncio.gather(
            create("first"),
            create("second"),
            return_exceptions=True,
        )

        created = [r for r in results if isinstance(r, ConcreteBlock)]
        failed = [r for r in results if isinstance(r, DuplicateIdError)]
        assert len(created) == 1
        assert len(failed) == 1
        assert await _stored_ids(building_id) == ["B1"]

    async def test_concurrent_creates_distinct_ids(
        self,
        building_id: UUID,
        concrete_data: dict[str, Any],
    ) -> None:
        async def create(block_id: str) -> ConcreteBlock:
            async with UnitOfWork() as uow:
                return await BlockService(uow).create_concrete_block(
                    building_id, {**concrete_data, "id": block_id}
                )

        await asyncio.gather(*(create(f"B{i}") for i in range(5)))

        assert sorted(await _stored_ids(building_id)) == [f"B{i}" for i in range(5)]


class _ConcurrentWriterUnitOfWork:
    """Unit of work whose loads are followed by another writer's commit."""

    def __init__(self, uow: UnitOfWork, other_writer: Callable[[], Awaitable[object]]) -> None:
        self._uow = uow
        self._other_writer = other_writer
        self.buildings = self

    async def load(self, building_id: UUID) -> Building:
        building = await self._uow.buildings.load(building_id)
        await self._other_writer()
        return building

    async def save(self, building: Building) -> None:
        await self._uow.buildings.save(building)

    async def commit(self) -> None:
        await self._uow.commit()

    async def rollback(self) -> None:
        await self._uow.rollback()


class TestCrossProcessWrites:
    """Tests for writers that do not share a lock table."""

    async def test_stale_writer_gets_concurrency_error(
        self,
        building_id: UUID,
        concrete_data: dict[str, Any],
    ) -> None:
        """Test that a write between load and save makes the slower save fail."""

        async def other_writer() -> ConcreteBlock:
            async with UnitOfWork() as uow:
                return await BlockService(uow, BuildingLocks()).create_concrete_block(
                    building_id, {**concrete_data, "id": "B2", "name": "other"}
                )

        async with UnitOfWork() as uow:
            service = BlockService(_ConcurrentWriterUnitOfWork(uow, other_writer), BuildingLocks())
            with pytest.raises(ConcurrencyError):
                await service.create_concrete_block(building_id, concrete_data)

        assert await _stored_ids(building_id) == ["B2"]

    async def test_same_id_with_separate_locks(
        self,
        building_id: UUID,
        concrete_data: dict[str, Any],
    ) -> None:
        """Test that only one block with a given id is stored without a shared lock."""

        async def create(name: str) -> ConcreteBlock:
            async with UnitOfWork() as uow:
                return await BlockService(uow, BuildingLocks()).create_concrete_block(
                    building_id, {**concrete_data, "name": name}
                )

        results = await asyncio.gather(create("first"), create("second"), return_exceptions=True)

        created = [r for r in results if isinstance(r, ConcreteBlock)]
        rejected = [r for r in results if isinstance(r, (StorageError, DuplicateIdError))]
        assert len(created) == 1
        assert len(rejected) == 1

        async with UnitOfWork() as uow:
            stored = await BlockService(uow).list_blocks(building_id)
        assert [(b.id, b.name) for b in stored] == [("B1", created[0].name)]


class TestRollback:
    """Tests for transaction cleanup after failed mutations."""

    async def test_domain_error_ends_transaction(
        self,
        building_id: UUID,
        concrete_data: dict[str, Any],
    ) -> None:
        async with UnitOfWork() as uow:
            service = BlockService(uow)
            await service.create_concrete_block(building_id, concrete_data)

            with pytest.raises(DuplicateIdError):
                await service.create_concrete_block(building_id, concrete_data)
            assert not uow.session.in_transaction()

            with pytest.raises(TypeMismatchError):
                await service.update_block(building_id, "B1", MasonryBlockUpdate(name="X"))
            assert not uow.session.in_transaction()

    async def test_missing_building_ends_transaction(
        self,
        building_id: UUID,
        concrete_data: dict[str, Any],
    ) -> None:
        async with UnitOfWork() as uow:
            with pytest.raises(NotFoundError):
                await BlockService(uow).delete_block(uuid4(), "B1")
            assert not uow.session.in_transaction()
