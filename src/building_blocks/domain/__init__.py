"""Domain Layer.

Contains the block variant model, the building aggregate, value objects,
and repository interfaces.
This layer has NO external dependencies (no SQLAlchemy, no frameworks).
"""
from __future__ import annotations

from building_blocks.domain.exceptions import (
    ConcurrencyError,
    DivisionUndefined,
    DomainError,
    DuplicateIdError,
    EmptyCollectionError,
    NotFoundError,
    StorageError,
    TypeMismatchError,
    UnsupportedVariantError,
    ValidationError,
)
from building_blocks.domain.models import (
    Block,
    BlockBase,
    BlockSummary,
    BlockUpdate,
    BlockView,
    Building,
    BuildingType,
    ConcreteBlock,
    ConcreteBlockUpdate,
    MasonryBlock,
    MasonryBlockUpdate,
    ModelingType,
    apply_update,
    block_class,
    create_block,
    to_summary,
    to_view,
    variant_of,
)
from building_blocks.domain.repositories import (
    IBuildingRepository,
    IUnitOfWork,
)
from building_blocks.domain.value_objects import MasonryUnitType

__all__ = [
    # Exceptions
    "DomainError",
    "NotFoundError",
    "DuplicateIdError",
    "ValidationError",
    "TypeMismatchError",
    "UnsupportedVariantError",
    "EmptyCollectionError",
    "DivisionUndefined",
    "StorageError",
    "ConcurrencyError",
    # Models
    "Block",
    "BlockBase",
    "ConcreteBlock",
    "MasonryBlock",
    "ModelingType",
    "BlockUpdate",
    "ConcreteBlockUpdate",
    "MasonryBlockUpdate",
    "apply_update",
    "block_class",
    "create_block",
    "variant_of",
    "Building",
    "BuildingType",
    "BlockView",
    "BlockSummary",
    "to_view",
    "to_summary",
    # Value Objects
    "MasonryUnitType",
    # Repositories
    "IBuildingRepository",
    "IUnitOfWork",
]
