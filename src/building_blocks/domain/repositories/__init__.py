"""Repository Interfaces (Protocols).

Defines the contracts for data access without implementation details.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable
from uuid import UUID

from building_blocks.domain.models import Building


@runtime_checkable
class IBuildingRepository(Protocol):
    """Repository interface for the Building aggregate and its blocks."""

    async def get_by_id(self, building_id: UUID) -> Building | None: ...
    async def load(self, building_id: UUID) -> Building: ...
    async def add(self, building: Building) -> Building: ...
    async def save(self, building: Building) -> None: ...
    async def delete(self, building_id: UUID) -> bool: ...


@runtime_checkable
class IUnitOfWork(Protocol):
    """Unit of Work pattern for transaction management."""

    buildings: IBuildingRepository

    async def __aenter__(self) -> "IUnitOfWork": ...
    async def __aexit__(
        self, exc_type: type[BaseException] | None,
        exc_val: BaseException | None, exc_tb: object,
    ) -> None: ...
    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...
