"""Experience tables and skill catalog consumed by the save editor.

The tables are static game data supplied as a YAML file::

    level_exp: [0, 800, 1600, ...]      # 200 adventurer/producer thresholds
    skill_exp: [0, 150, 350, ...]       # 200 skill thresholds
    skill_groups:
      - name: Blades
        category: adventurer
        skills:
          - {name: Blades Mastery, multiplier: 1.0, id: 1000}

They are injected into SaveDocument rather than compiled in, so tests and
callers can substitute their own.
"""
from __future__ import annotations

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Iterator, List, Optional, Union

import yaml
from platformdirs import PlatformDirs
from pydantic import BaseModel, Field, PrivateAttr, ValidationError, field_validator

from .errors import ConfigError
from .progression.experience import ExperienceTable

logger = logging.getLogger(__name__)

APP_NAME = "sotasave"
TABLES_FILE_NAME = "tables.yaml"
ENV_TABLES_PATH = "SOTASAVE_TABLES"

# Number of levels in the game's tables.
LEVEL_COUNT = 200


class SkillCategory(str, Enum):
    ADVENTURER = "adventurer"
    PRODUCER = "producer"


class SkillInfo(BaseModel):
    """Catalog entry for one skill."""

    name: str = Field(..., description="Display name")
    multiplier: float = Field(..., gt=0, description="Experience scale relative to the skill table")
    id: int = Field(..., ge=0, description="Skill id, stored as a decimal-string key in the save")


class SkillGroup(BaseModel):
    name: str = Field(..., description="Group name shown to the user")
    category: SkillCategory = Field(..., description="Adventurer or producer skill tree")
    skills: List[SkillInfo] = Field(default_factory=list)


class GameTables(BaseModel):
    """Level thresholds plus the skill catalog."""

    level_exp: List[int] = Field(..., description="Adventurer/producer level thresholds")
    skill_exp: List[int] = Field(..., description="Skill level thresholds (multiplier 1)")
    skill_groups: List[SkillGroup] = Field(default_factory=list)

    _level_table: ExperienceTable = PrivateAttr()
    _skill_table: ExperienceTable = PrivateAttr()

    @field_validator("level_exp")
    @classmethod
    def level_exp_ascending(cls, v: List[int]) -> List[int]:
        # ExperienceTable raises ValueError, which pydantic reports as a ValidationError.
        ExperienceTable(v)
        return v

    @field_validator("skill_exp")
    @classmethod
    def skill_exp_ascending(cls, v: List[int]) -> List[int]:
        ExperienceTable(v)
        return v

    def model_post_init(self, __context: Any) -> None:
        self._level_table = ExperienceTable(self.level_exp)
        self._skill_table = ExperienceTable(self.skill_exp)

    @property
    def level_table(self) -> ExperienceTable:
        return self._level_table

    @property
    def skill_table(self) -> ExperienceTable:
        return self._skill_table

    def skills(self, category: Optional[SkillCategory] = None) -> Iterator[SkillInfo]:
        for group in self.skill_groups:
            if category is None or group.category == category:
                yield from group.skills

    def find_skill(self, skill_id: int) -> Optional[SkillInfo]:
        for skill in self.skills():
            if skill.id == skill_id:
                return skill
        return None


def default_config_dir() -> Path:
    dirs = PlatformDirs(appname=APP_NAME, appauthor=False)
    return Path(dirs.user_config_dir)


def default_tables_path() -> Path:
    """SOTASAVE_TABLES if set, else tables.yaml in the user config dir."""
    override = os.getenv(ENV_TABLES_PATH)
    if override:
        return Path(override).expanduser()
    return default_config_dir() / TABLES_FILE_NAME


def load_game_tables(path: Optional[Union[str, Path]] = None) -> GameTables:
    path = Path(path) if path is not None else default_tables_path()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Unable to read game tables from {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Game tables file {path} must contain a mapping")
    try:
        tables = GameTables.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid game tables in {path}: {e}") from e

    for name, values in (("level_exp", tables.level_exp), ("skill_exp", tables.skill_exp)):
        if len(values) != LEVEL_COUNT:
            logger.warning("%s in %s has %d entries, expected %d", name, path, len(values), LEVEL_COUNT)
    logger.info("Loaded game tables from %s (%d skills)", path, sum(1 for _ in tables.skills()))
    return tables
