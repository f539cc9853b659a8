"""
Save editor core for Shroud of the Avatar character saves.

Loads a save file, exposes gold, adventurer/producer levels, skill levels and
the backpack inventory for editing, and writes the edits back while leaving
every other byte of the file untouched.

UI layers (desktop, CLI, etc.) should import and compose these services.
"""
from .config import GameTables, SkillCategory, SkillGroup, SkillInfo, load_game_tables
from .errors import (
    ConfigError,
    ContractViolation,
    LoadError,
    RecordDecodeError,
    RecordNotFoundError,
    SaveError,
    StoreError,
)
from .persistence import Durability, Item, SaveDocument
from .progression import ExperienceTable

__version__ = "0.1.0"

__all__ = [
    "GameTables",
    "SkillCategory",
    "SkillGroup",
    "SkillInfo",
    "load_game_tables",
    "ConfigError",
    "ContractViolation",
    "LoadError",
    "RecordDecodeError",
    "RecordNotFoundError",
    "SaveError",
    "StoreError",
    "Durability",
    "Item",
    "SaveDocument",
    "ExperienceTable",
]
