"""Building Repository Implementation.

SQLAlchemy-based implementation of IBuildingRepository.

The building row carries a version counter; save() is a conditional
update on that counter, so two writers that loaded the same version
cannot both commit.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from building_blocks.domain import (
    Block,
    Building,
    BuildingType,
    ConcreteBlock,
    ConcurrencyError,
    DuplicateIdError,
    MasonryBlock,
    ModelingType,
    NotFoundError,
    StorageError,
    UnsupportedVariantError,
)
from building_blocks.infrastructure.database.models import BlockORM, BuildingORM


class BuildingRepository:
    """SQLAlchemy implementation of building repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with session.

        Args:
            session: AsyncSession instance
        """
        self._session = session

    # =========================================================================
    # Read Operations
    # =========================================================================

    async def get_by_id(self, building_id: UUID) -> Building | None:
        """Get building by ID with its blocks loaded in registry order.

        Args:
            building_id: Building UUID

        Returns:
            Building or None
        """
        try:
            result = await self._session.execute(
                select(BuildingORM)
                .where(BuildingORM.id == building_id)
                .execution_options(populate_existing=True)
            )
            orm = result.scalar_one_or_none()
            if orm is None:
                return None

            blocks = await self._session.execute(
                select(BlockORM)
                .where(BlockORM.building_id == building_id)
                .order_by(BlockORM.position.asc())
                .execution_options(populate_existing=True)
            )
            block_rows = blocks.scalars().all()
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to load building {building_id}", {"reason": str(exc)}) from exc

        building = self._to_domain(orm)
        building.blocks = [self._block_to_domain(row) for row in block_rows]
        return building

    async def load(self, building_id: UUID) -> Building:
        """Get building by ID.

        Raises:
            NotFoundError: If the building does not exist
            StorageError: On database failure
        """
        building = await self.get_by_id(building_id)
        if building is None:
            raise NotFoundError("Building", building_id)
        return building

    # =========================================================================
    # Write Operations
    # =========================================================================

    async def add(self, building: Building) -> Building:
        """Add a new building together with its blocks.

        Args:
            building: Building to add

        Returns:
            Added building
        """
        try:
            self._session.add(self._to_orm(building))
            await self._session.flush()
            await self._insert_blocks(building)
        except IntegrityError as exc:
            raise DuplicateIdError("Building", str(building.id), {"reason": str(exc.orig)}) from exc
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to add building {building.id}", {"reason": str(exc)}) from exc
        return building

    async def save(self, building: Building) -> None:
        """Persist the building and replace its stored blocks.

        On success building.version is incremented.

        Args:
            building: Building as loaded (and mutated) by the caller

        Raises:
            NotFoundError: If the building does not exist
            ConcurrencyError: If the stored version moved since load
            DuplicateIdError: If a block id violates the unique constraint
            StorageError: On any other database failure
        """
        now = datetime.utcnow()
        try:
            result = await self._session.execute(
                update(BuildingORM)
                .where(
                    BuildingORM.id == building.id,
                    BuildingORM.version == building.version,
                )
                .values(
                    name=building.name,
                    building_type=building.building_type.value,
                    version=building.version + 1,
                    updated_at=now,
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                exists = await self._session.scalar(
                    select(BuildingORM.id).where(BuildingORM.id == building.id)
                )
                if exists is None:
                    raise NotFoundError("Building", building.id)
                raise ConcurrencyError("Building", building.id)

            await self._session.execute(
                delete(BlockORM)
                .where(BlockORM.building_id == building.id)
                .execution_options(synchronize_session=False)
            )
            await self._insert_blocks(building)
        except IntegrityError as exc:
            repeated = _repeated_block_id(building)
            if repeated is None:
                raise StorageError(
                    f"Failed to save building {building.id}", {"reason": str(exc.orig)}
                ) from exc
            raise DuplicateIdError(
                "Block",
                repeated,
                {"building_id": str(building.id), "reason": str(exc.orig)},
            ) from exc
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to save building {building.id}", {"reason": str(exc)}) from exc

        building.version += 1
        building.updated_at = now

    async def delete(self, building_id: UUID) -> bool:
        """Delete a building and all of its blocks.

        Args:
            building_id: Building UUID

        Returns:
            True if deleted
        """
        try:
            await self._session.execute(
                delete(BlockORM).where(BlockORM.building_id == building_id)
            )
            result = await self._session.execute(
                delete(BuildingORM).where(BuildingORM.id == building_id)
            )
            await self._session.flush()
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to delete building {building_id}", {"reason": str(exc)}) from exc
        return result.rowcount > 0

    async def _insert_blocks(self, building: Building) -> None:
        rows = [
            self._block_to_row(building.id, position, block)
            for position, block in enumerate(building.blocks)
        ]
        if rows:
            await self._session.execute(insert(BlockORM), rows)

    # =========================================================================
    # Mapping
    # =========================================================================

    def _to_domain(self, orm: BuildingORM) -> Building:
        """Map ORM to domain model (without blocks)."""
        return Building(
            id=orm.id,
            name=orm.name,
            building_type=BuildingType(orm.building_type),
            version=orm.version,
            created_at=orm.created_at,
            updated_at=orm.updated_at,
        )

    def _to_orm(self, building: Building) -> BuildingORM:
        """Map domain model to ORM (without blocks)."""
        return BuildingORM(
            id=building.id,
            name=building.name,
            building_type=building.building_type.value,
            version=building.version,
            created_at=building.created_at,
            updated_at=building.updated_at,
        )

    def _block_to_domain(self, orm: BlockORM) -> Block:
        """Map a block row to its variant entity.

        Raises:
            UnsupportedVariantError: If the stored modeling type is unknown
        """
        try:
            kind = ModelingType(orm.modeling_type)
        except ValueError:
            raise UnsupportedVariantError(orm.modeling_type) from None

        common: dict[str, Any] = {
            "id": orm.block_id,
            "name": orm.name,
            "x_axis_length": orm.x_axis_length,
            "y_axis_length": orm.y_axis_length,
            "storey_heights": tuple(orm.storey_heights),
        }
        if kind is ModelingType.CONCRETE:
            return ConcreteBlock(
                **common,
                compressive_strength_of_concrete=orm.compressive_strength_of_concrete,
                yield_strength_of_steel=orm.yield_strength_of_steel,
                transverse_reinforcement_spacing=orm.transverse_reinforcement_spacing,
                reinforcement_ratio=orm.reinforcement_ratio,
                hook_exists=bool(orm.hook_exists),
                is_strengthened=bool(orm.is_strengthened),
            )
        if kind is ModelingType.MASONRY:
            return MasonryBlock(**common, unit_types=orm.unit_types or ())
        raise UnsupportedVariantError(kind)

    def _block_to_row(self, building_id: UUID, position: int, block: Block) -> dict[str, Any]:
        """Map a block entity to an insertable row."""
        row: dict[str, Any] = {
            "id": uuid4(),
            "building_id": building_id,
            "block_id": block.id,
            "position": position,
            "name": block.name,
            "x_axis_length": block.x_axis_length,
            "y_axis_length": block.y_axis_length,
            "storey_heights": list(block.storey_heights),
        }
        if isinstance(block, ConcreteBlock):
            row.update(
                modeling_type=ModelingType.CONCRETE.value,
                compressive_strength_of_concrete=block.compressive_strength_of_concrete,
                yield_strength_of_steel=block.yield_strength_of_steel,
                transverse_reinforcement_spacing=block.transverse_reinforcement_spacing,
                reinforcement_ratio=block.reinforcement_ratio,
                hook_exists=block.hook_exists,
                is_strengthened=block.is_strengthened,
                unit_types=None,
            )
        elif isinstance(block, MasonryBlock):
            row.update(
                modeling_type=ModelingType.MASONRY.value,
                compressive_strength_of_concrete=None,
                yield_strength_of_steel=None,
                transverse_reinforcement_spacing=None,
                reinforcement_ratio=None,
                hook_exists=None,
                is_strengthened=None,
                unit_types=[unit.to_dict() for unit in block.unit_types],
            )
        else:
            raise UnsupportedVariantError(type(block).__name__)
        return row


def _repeated_block_id(building: Building) -> str | None:
    seen: set[str] = set()
    for block in building.blocks:
        if block.id in seen:
            return block.id
        seen.add(block.id)
    return None
