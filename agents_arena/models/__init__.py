"""Database models for the Agents Arena application.

Import models from this module to ensure proper dependency resolution.
"""

from agents_arena.models.base import Base
from agents_arena.models.module_data import ModuleData
from agents_arena.models.module_data import module_data_key
from agents_arena.models.module_data import parse_module_data_key

__all__ = [
    "Base",
    "ModuleData",
    "module_data_key",
    "parse_module_data_key",
]
