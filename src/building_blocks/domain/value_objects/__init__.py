"""Domain Value Objects.

Immutable objects that represent domain concepts without identity.
"""
from __future__ import annotations

from building_blocks.domain.value_objects.masonry_unit import MasonryUnitType

__all__ = [
    "MasonryUnitType",
]
