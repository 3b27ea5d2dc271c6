"""Repository Implementations.

SQLAlchemy-based implementations of domain repository interfaces.
"""
from __future__ import annotations

from building_blocks.infrastructure.repositories.building_repository import BuildingRepository
from building_blocks.infrastructure.repositories.unit_of_work import UnitOfWork

__all__ = [
    "BuildingRepository",
    "UnitOfWork",
]
