"""Unit of Work.

Scopes one AsyncSession, and therefore one transaction, around the
building repository.
"""
from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from building_blocks.infrastructure.database.connection import get_session_factory
from building_blocks.infrastructure.repositories.building_repository import BuildingRepository


class UnitOfWork:
    """Transaction scope for building persistence.

    Usage:
        async with UnitOfWork() as uow:
            building = await uow.buildings.load(building_id)
            block_registry.add(building, block)
            await uow.buildings.save(building)
            await uow.commit()

    Leaving the block with an exception rolls back whatever was not
    committed. A session created on entry is closed on exit; a session
    passed in by the caller is left open.
    """

    def __init__(self, session: AsyncSession | None = None) -> None:
        self._session = session
        self._owns_session = session is None
        self._buildings: BuildingRepository | None = None

    async def __aenter__(self) -> UnitOfWork:
        if self._owns_session:
            self._session = get_session_factory()()
        self._buildings = BuildingRepository(self.session)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        try:
            if exc_type is not None:
                await self.rollback()
        finally:
            self._buildings = None
            if self._owns_session and self._session is not None:
                await self._session.close()
                self._session = None

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("UnitOfWork not entered. Use 'async with UnitOfWork() as uow:'")
        return self._session

    @property
    def buildings(self) -> BuildingRepository:
        """Building repository bound to this unit's session."""
        if self._buildings is None:
            raise RuntimeError("UnitOfWork not entered. Use 'async with UnitOfWork() as uow:'")
        return self._buildings

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
