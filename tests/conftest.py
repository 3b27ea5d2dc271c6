"""Pytest configuration and fixtures."""
from __future__ import annotations

from pathlib import Path
from typing import Any, AsyncGenerator
from uuid import UUID

import pytest
import pytest_asyncio

from building_blocks.domain import Building, BuildingType, ConcreteBlock, MasonryBlock, create_block
from building_blocks.infrastructure.database import connection
from building_blocks.infrastructure.repositories import UnitOfWork
from building_blocks.shared.config import Settings


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Test settings with a throwaway SQLite database."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'blocks.db'}",
        database_echo=False,
        log_level="DEBUG",
    )


# =============================================================================
# Domain fixtures
# =============================================================================


@pytest.fixture
def concrete_data() -> dict[str, Any]:
    """Concrete block input: 10 x 4 m, three 3 m storeys."""
    return {
        "id": "B1",
        "name": "Control block",
        "x_axis_length": 10.0,
        "y_axis_length": 4.0,
        "storey_heights": [3.0, 3.0, 3.0],
        "compressive_strength_of_concrete": 25.0,
        "yield_strength_of_steel": 420.0,
        "transverse_reinforcement_spacing": 0.2,
        "reinforcement_ratio": 0.01,
        "hook_exists": True,
        "is_strengthened": False,
    }


@pytest.fixture
def masonry_data() -> dict[str, Any]:
    """Masonry block input: 6 x 5 m, two 3 m storeys."""
    return {
        "id": "M1",
        "name": "Guard house",
        "x_axis_length": 6.0,
        "y_axis_length": 5.0,
        "storey_heights": [3.0, 3.0],
        "unit_types": [
            {"unit_type": "Solid brick", "length": 0.19, "width": 0.09, "height": 0.05},
            {"unit_type": "AAC block", "length": 0.6, "width": 0.2, "height": 0.25},
        ],
    }


@pytest.fixture
def concrete_block(concrete_data: dict[str, Any]) -> ConcreteBlock:
    return create_block("Concrete", concrete_data).as_concrete()


@pytest.fixture
def masonry_block(masonry_data: dict[str, Any]) -> MasonryBlock:
    return create_block("Masonry", masonry_data).as_masonry()


@pytest.fixture
def building() -> Building:
    """Empty control building."""
    return Building.create("Control building", BuildingType.CONTROL)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest_asyncio.fixture
async def database(
    test_settings: Settings,
    monkeypatch: pytest.MonkeyPatch,
) -> AsyncGenerator[None, None]:
    """Point the connection module at a fresh SQLite file with tables."""
    monkeypatch.setattr(connection, "settings", test_settings)
    await connection.close_database()
    await connection.create_tables()
    yield
    await connection.drop_tables()
    await connection.close_database()


@pytest_asyncio.fixture
async def building_id(database: None) -> UUID:
    """Id of a stored, empty building."""
    building = Building.create("Control building", BuildingType.CONTROL)
    async with UnitOfWork() as uow:
        await uow.buildings.add(building)
        await uow.commit()
    return building.id
