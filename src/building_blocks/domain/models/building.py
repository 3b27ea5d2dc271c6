"""Building Domain Entity.

Aggregate root that owns the structural blocks of one building.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from building_blocks.domain.models.block import Block


class BuildingType(str, Enum):
    """Building usage type within a transmission facility."""

    CONTROL = "Control"
    SECURITY = "Security"
    SWITCHYARD = "Switchyard"


# Classification codes per building type
_CODES: dict[BuildingType, int] = {
    BuildingType.CONTROL: 1,
    BuildingType.SWITCHYARD: 2,
    BuildingType.SECURITY: 10,
}


@dataclass
class Building:
    """Building Aggregate Root.

    Blocks are reachable only through their building; a block never moves
    to another building. Block-level rules (unique ids, variant checks)
    are enforced by the block registry operating on this aggregate.

    Attributes:
        id: Unique identifier
        name: Building name
        building_type: Usage type, drives code and bks
        version: Optimistic concurrency counter, bumped on every save
        blocks: Owned blocks in registry order
    """

    id: UUID
    name: str
    building_type: BuildingType = BuildingType.CONTROL
    version: int = 0
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    blocks: list[Block] = field(default_factory=list, repr=False)

    @classmethod
    def create(
        cls,
        name: str,
        building_type: BuildingType | str = BuildingType.CONTROL,
    ) -> Building:
        """Factory method to create a new, empty Building.

        Args:
            name: Building name
            building_type: Usage type

        Returns:
            New Building instance
        """
        return cls(
            id=uuid4(),
            name=name,
            building_type=BuildingType(building_type),
        )

    @property
    def code(self) -> int:
        """Building code derived from the building type."""
        return _CODES.get(self.building_type, 1)

    @property
    def bks(self) -> int:
        """BKS classification code."""
        if self.building_type is BuildingType.CONTROL:
            return 3
        return 1

    @property
    def block_count(self) -> int:
        return len(self.blocks)

    def touch(self) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = datetime.utcnow()
