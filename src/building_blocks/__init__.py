"""Building Blocks.

Structural block records for buildings: concrete and masonry block
variants, per-building block registry, block copy and derived
engineering statistics, with SQLAlchemy persistence.
"""
from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
