"""Database Infrastructure.

SQLAlchemy ORM models and connection management.
"""
from __future__ import annotations

from building_blocks.infrastructure.database.connection import (
    close_database,
    create_tables,
    drop_tables,
    get_engine,
    get_session_factory,
)
from building_blocks.infrastructure.database.models import Base, BlockORM, BuildingORM

__all__ = [
    "Base",
    "BlockORM",
    "BuildingORM",
    "close_database",
    "create_tables",
    "drop_tables",
    "get_engine",
    "get_session_factory",
]
