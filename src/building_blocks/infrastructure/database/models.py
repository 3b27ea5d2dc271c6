"""SQLAlchemy ORM Models.

Maps the building aggregate and its blocks to database tables.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
)
from sqlalchemy.sql import func


# =============================================================================
# Base Class
# =============================================================================


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""

    pass


# =============================================================================
# Buildings
# =============================================================================


class BuildingORM(Base):
    """Building table."""

    __tablename__ = "buildings"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    building_type: Mapped[str] = mapped_column(String(20), nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )


# =============================================================================
# Blocks
# =============================================================================


class BlockORM(Base):
    """Structural block table.

    One row per block; variant-specific columns are NULL for the other
    variant. The (building_id, block_id) constraint enforces unique block
    ids per building at the storage level.
    """

    __tablename__ = "blocks"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    building_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("buildings.id", ondelete="CASCADE"),
        nullable=False,
    )
    block_id: Mapped[str] = mapped_column(String(50), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    modeling_type: Mapped[str] = mapped_column(String(20), nullable=False)

    # Geometry
    x_axis_length: Mapped[float] = mapped_column(Float, nullable=False)
    y_axis_length: Mapped[float] = mapped_column(Float, nullable=False)
    storey_heights: Mapped[list[float]] = mapped_column(JSON, nullable=False)

    # Concrete
    compressive_strength_of_concrete: Mapped[float | None] = mapped_column(Float)
    yield_strength_of_steel: Mapped[float | None] = mapped_column(Float)
    transverse_reinforcement_spacing: Mapped[float | None] = mapped_column(Float)
    reinforcement_ratio: Mapped[float | None] = mapped_column(Float)
    hook_exists: Mapped[bool | None] = mapped_column(Boolean)
    is_strengthened: Mapped[bool | None] = mapped_column(Boolean)

    # Masonry
    unit_types: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON)

    __table_args__ = (
        UniqueConstraint("building_id", "block_id", name="blocks_uk_block_id"),
        Index("idx_blocks_building", "building_id", "position"),
        Index("idx_blocks_modeling_type", "building_id", "modeling_type"),
    )
