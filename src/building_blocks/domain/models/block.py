"""Structural Block Domain Entities.

A block is a structurally independent part of a building. It is modeled
either as reinforced concrete or as masonry; the two variants share the
plan geometry and storey heights and differ in their material inputs.
"""
from __future__ import annotations

from dataclasses import MISSING, dataclass, field, fields, replace
from enum import Enum
from typing import Any, ClassVar, Mapping, Sequence

from building_blocks.domain.exceptions import (
    TypeMismatchError,
    UnsupportedVariantError,
    ValidationError,
)
from building_blocks.domain.validation import require_bool, require_positive, require_text
from building_blocks.domain.value_objects import MasonryUnitType


BLOCK_ID_MAX_LENGTH = 50
BLOCK_NAME_MAX_LENGTH = 200


class ModelingType(str, Enum):
    """Block modeling type (variant discriminant)."""

    CONCRETE = "Concrete"
    MASONRY = "Masonry"

    @classmethod
    def from_string(cls, value: ModelingType | str) -> ModelingType:
        """Parse modeling type from its exact name.

        Args:
            value: Modeling type or its name ("Concrete" or "Masonry")

        Returns:
            Matching ModelingType

        Raises:
            ValidationError: If value names no known modeling type
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if member.value == value:
                    return member
        raise ValidationError(
            field="modeling_type",
            message=f"Must be one of {[m.value for m in cls]}",
            value=value,
        )


def _storey_heights(value: Any) -> tuple[float, ...]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise ValidationError(
            field="storey_heights",
            message="Must be a sequence of heights",
            value=value,
        )
    if not value:
        raise ValidationError(
            field="storey_heights",
            message="At least one storey height is required",
            value=value,
        )
    return tuple(
        require_positive(f"storey_heights[{i}]", height)
        for i, height in enumerate(value)
    )


@dataclass
class BlockBase:
    """Fields and derived geometry shared by all block variants.

    Attributes:
        id: Identifier, unique within the owning building
        name: Display label
        x_axis_length: Plan dimension along X in meters
        y_axis_length: Plan dimension along Y in meters
        storey_heights: Storey heights in meters, bottom to top
    """

    id: str
    name: str
    x_axis_length: float
    y_axis_length: float
    storey_heights: tuple[float, ...]

    modeling_type: ClassVar[ModelingType]

    def __setattr__(self, name: str, value: Any) -> None:
        """Validate every field assignment, in __init__ and afterwards.

        Raises:
            AttributeError: For modeling_type, and for id once it is set
            ValidationError: If the value is invalid for the field
        """
        if name == "modeling_type" or (name == "id" and "id" in self.__dict__):
            raise AttributeError(f"Block.{name} cannot be changed")
        super().__setattr__(name, self._checked(name, value))

    def _checked(self, name: str, value: Any) -> Any:
        if name == "id":
            return require_text("id", value, BLOCK_ID_MAX_LENGTH)
        if name == "name":
            return require_text("name", value, BLOCK_NAME_MAX_LENGTH)
        if name in ("x_axis_length", "y_axis_length"):
            return require_positive(name, value)
        if name == "storey_heights":
            return _storey_heights(value)
        return value

    @property
    def total_height(self) -> float:
        """Total height as the sum of storey heights."""
        return sum(self.storey_heights)

    @property
    def storey_count(self) -> int:
        return len(self.storey_heights)

    @property
    def long_length(self) -> float:
        """Longer of the two plan dimensions."""
        return max(self.x_axis_length, self.y_axis_length)

    @property
    def short_length(self) -> float:
        """Shorter of the two plan dimensions."""
        return min(self.x_axis_length, self.y_axis_length)

    def as_concrete(self) -> ConcreteBlock:
        """Access this block as a concrete block.

        Raises:
            TypeMismatchError: If the block is not a concrete block
        """
        if isinstance(self, ConcreteBlock):
            return self
        raise TypeMismatchError(self.id, ModelingType.CONCRETE.value, self.modeling_type.value)

    def as_masonry(self) -> MasonryBlock:
        """Access this block as a masonry block.

        Raises:
            TypeMismatchError: If the block is not a masonry block
        """
        if isinstance(self, MasonryBlock):
            return self
        raise TypeMismatchError(self.id, ModelingType.MASONRY.value, self.modeling_type.value)


_CONCRETE_STRENGTHS = (
    "compressive_strength_of_concrete",
    "yield_strength_of_steel",
    "transverse_reinforcement_spacing",
)


@dataclass
class ConcreteBlock(BlockBase):
    """Reinforced concrete block.

    Attributes:
        compressive_strength_of_concrete: f_c in MPa
        yield_strength_of_steel: f_y in MPa
        transverse_reinforcement_spacing: Stirrup spacing in meters
        reinforcement_ratio: Longitudinal reinforcement ratio, in (0, 1]
        hook_exists: Whether stirrups have seismic hooks
        is_strengthened: Whether the block has been retrofitted
    """

    compressive_strength_of_concrete: float
    yield_strength_of_steel: float
    transverse_reinforcement_spacing: float
    reinforcement_ratio: float
    hook_exists: bool = False
    is_strengthened: bool = False

    modeling_type: ClassVar[ModelingType] = ModelingType.CONCRETE

    def _checked(self, name: str, value: Any) -> Any:
        if name in _CONCRETE_STRENGTHS:
            return require_positive(name, value)
        if name == "reinforcement_ratio":
            ratio = require_positive(name, value)
            if ratio > 1:
                raise ValidationError(field=name, message="Must not exceed 1", value=value)
            return ratio
        if name in ("hook_exists", "is_strengthened"):
            return require_bool(name, value)
        return super()._checked(name, value)


@dataclass
class MasonryBlock(BlockBase):
    """Unreinforced masonry block.

    Attributes:
        unit_types: Masonry units used in the block, may be empty
    """

    unit_types: tuple[MasonryUnitType, ...] = field(default_factory=tuple)

    modeling_type: ClassVar[ModelingType] = ModelingType.MASONRY

    def _checked(self, name: str, value: Any) -> Any:
        if name != "unit_types":
            return super()._checked(name, value)
        if value is None:
            return ()
        if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Sequence):
            raise ValidationError(
                field="unit_types",
                message="Must be a sequence of masonry unit descriptors",
                value=value,
            )
        return tuple(MasonryUnitType.from_mapping(u) for u in value)


Block = ConcreteBlock | MasonryBlock


def block_class(modeling_type: ModelingType) -> type[ConcreteBlock] | type[MasonryBlock]:
    """Get the entity class for a modeling type.

    Raises:
        UnsupportedVariantError: If no class models the given type
    """
    if modeling_type is ModelingType.CONCRETE:
        return ConcreteBlock
    if modeling_type is ModelingType.MASONRY:
        return MasonryBlock
    raise UnsupportedVariantError(modeling_type)


def variant_of(block: object) -> ModelingType:
    """Get the modeling type of a block instance.

    Raises:
        UnsupportedVariantError: If the object is neither variant
    """
    if isinstance(block, ConcreteBlock):
        return ModelingType.CONCRETE
    if isinstance(block, MasonryBlock):
        return ModelingType.MASONRY
    raise UnsupportedVariantError(type(block).__name__)


def create_block(kind: ModelingType | str, data: Mapping[str, Any]) -> Block:
    """Create a validated block of the requested kind.

    Only fields declared by the variant are read from data; keys belonging
    to the other variant are ignored.

    Args:
        kind: "Concrete" or "Masonry"
        data: Field values keyed by attribute name

    Returns:
        New ConcreteBlock or MasonryBlock

    Raises:
        ValidationError: Unknown kind, missing or invalid field
    """
    cls = block_class(ModelingType.from_string(kind))
    kwargs: dict[str, Any] = {}
    for f in fields(cls):
        if f.name in data:
            kwargs[f.name] = data[f.name]
        elif f.default is MISSING and f.default_factory is MISSING:
            raise ValidationError(field=f.name, message="Field is required")
    return cls(**kwargs)


# =============================================================================
# Updates
# =============================================================================


@dataclass(frozen=True)
class BlockUpdate:
    """Partial update of the mutable fields shared by all variants.

    Fields left as None keep their current value.
    """

    name: str | None = None
    x_axis_length: float | None = None
    y_axis_length: float | None = None
    storey_heights: Sequence[float] | None = None

    modeling_type: ClassVar[ModelingType]

    def changes(self) -> dict[str, Any]:
        """Get the supplied (non-None) fields."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


@dataclass(frozen=True)
class ConcreteBlockUpdate(BlockUpdate):
    compressive_strength_of_concrete: float | None = None
    yield_strength_of_steel: float | None = None
    transverse_reinforcement_spacing: float | None = None
    reinforcement_ratio: float | None = None
    hook_exists: bool | None = None
    is_strengthened: bool | None = None

    modeling_type: ClassVar[ModelingType] = ModelingType.CONCRETE


@dataclass(frozen=True)
class MasonryBlockUpdate(BlockUpdate):
    unit_types: Sequence[MasonryUnitType | Mapping[str, Any]] | None = None

    modeling_type: ClassVar[ModelingType] = ModelingType.MASONRY


def apply_update(block: Block, update: ConcreteBlockUpdate | MasonryBlockUpdate) -> Block:
    """Apply a partial update to a block in place, all or nothing.

    The updated state is fully validated on a candidate copy before any
    field of the block is touched.

    Args:
        block: Block to update
        update: Variant-specific update

    Returns:
        The same block instance

    Raises:
        TypeMismatchError: If the update targets the other variant
        ValidationError: If any supplied value is invalid
    """
    actual = variant_of(block)
    if update.modeling_type is not actual:
        raise TypeMismatchError(block.id, update.modeling_type.value, actual.value)

    changes = update.changes()
    candidate = replace(block, **changes)
    for name in changes:
        setattr(block, name, getattr(candidate, name))
    return block
