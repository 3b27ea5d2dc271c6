"""Shared module.

Cross-cutting concerns: configuration and logging.
"""
from building_blocks.shared.config import Settings, get_settings, settings

__all__ = [
    "Settings",
    "get_settings",
    "settings",
]
