"""Masonry Unit Value Object.

Describes one kind of masonry unit (brick, block, stone) used in a
masonry block, with its nominal dimensions in meters.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from building_blocks.domain.exceptions import ValidationError
from building_blocks.domain.validation import require_positive


@dataclass(frozen=True, slots=True)
class MasonryUnitType:
    """Value Object for a masonry unit descriptor.

    Attributes:
        unit_type: Material/type label (e.g. "Solid brick", "AAC block")
        length: Unit length in meters
        width: Unit width in meters
        height: Unit height in meters

    Example:
        >>> unit = MasonryUnitType("Solid brick", 0.19, 0.09, 0.05)
        >>> unit.volume
        0.000855
    """

    unit_type: str
    length: float
    width: float
    height: float

    def __post_init__(self) -> None:
        """Validate descriptor fields."""
        if not isinstance(self.unit_type, str) or not self.unit_type.strip():
            raise ValidationError(
                field="unit_type",
                message="Masonry unit type cannot be empty",
                value=self.unit_type,
            )
        for name in ("length", "width", "height"):
            object.__setattr__(self, name, require_positive(name, getattr(self, name)))

    @property
    def volume(self) -> float:
        """Gross volume of a single unit in cubic meters."""
        return round(self.length * self.width * self.height, 9)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | MasonryUnitType) -> MasonryUnitType:
        """Create descriptor from a mapping (or pass an instance through).

        Args:
            data: Mapping with unit_type, length, width, height

        Returns:
            MasonryUnitType instance
        """
        if isinstance(data, MasonryUnitType):
            return data
        if not isinstance(data, Mapping):
            raise ValidationError(
                field="unit_types",
                message="Masonry unit descriptor must be a mapping",
                value=data,
            )
        return cls(
            unit_type=data.get("unit_type"),
            length=data.get("length"),
            width=data.get("width"),
            height=data.get("height"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dictionary."""
        return {
            "unit_type": self.unit_type,
            "length": self.length,
            "width": self.width,
            "height": self.height,
        }
