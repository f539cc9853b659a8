"""Load, edit and store a character save file.

A save is a tagged-text container in which a handful of records hold JSON
payloads. SaveDocument parses the three records the editor changes (the
avatar's character sheet, its backpack item store and the user's gold) and
on store splices freshly serialized JSON back into exactly those payload
regions, so every other byte of the file is preserved.

Only ``path`` may be read while another thread stores; every other method
expects the caller to serialize access.
"""
from __future__ import annotations

import copy
import logging
import re
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from ..config import GameTables
from ..errors import ContractViolation, LoadError, RecordDecodeError, RecordNotFoundError, StoreError
from ..progression.experience import ExperienceTable
from .codec import read_object_record, write_record
from .inventory import Item, merge_items, project_items

logger = logging.getLogger(__name__)

# Fixed id of the User and UserGold records.
USER_ID = "000000000000000000000001"

USER = "User"
CHARACTER = "Character"
CHARACTER_SHEET = "CharacterSheet"
ITEM_STORE = "ItemStore"
USER_GOLD = "UserGold"

# Record keys
AVATAR_ID = "dc"
BACKPACK_ID = "mainbp"
ADVENTURER_EXP = "ae"
PRODUCER_EXP = "pe"
SKILLS = "sk2"
MASTERY = "m"
TIMESTAMP = "t"
EXPERIENCE = "x"
GOLD = "g"

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

_INT_TEXT = re.compile(r"[+-]?[0-9]+\Z")

PathLike = Union[str, Path]


def to_int64(value: Any) -> Optional[int]:
    """Integer value of a JSON number or numeric string within int64 range."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        result = value
    elif isinstance(value, str) and _INT_TEXT.match(value):
        result = int(value)
    else:
        return None
    if not INT64_MIN <= result <= INT64_MAX:
        return None
    return result


def _skill_key(skill_id: int) -> str:
    return str(int(skill_id))


def _check_multiplier(multiplier: float) -> None:
    if not multiplier > 0:
        raise ContractViolation(f"Skill multiplier must be positive, got {multiplier}")


def skill_experience(skills: Dict[str, Any], skill_id: int) -> Optional[int]:
    skill = skills.get(_skill_key(skill_id))
    if not isinstance(skill, dict):
        return None
    return to_int64(skill.get(EXPERIENCE))


def skill_level(skills: Dict[str, Any], skill_id: int, multiplier: float, table: ExperienceTable) -> Optional[int]:
    """Level of a skill in a raw ``sk2`` map, or None if absent or below the table."""
    _check_multiplier(multiplier)
    exp = skill_experience(skills, skill_id)
    if exp is None:
        return None
    return table.level_for(int(exp / multiplier))


def find_timestamp_entry(skills: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """First skill entry carrying a timestamp; its value seeds new skills."""
    for value in skills.values():
        if isinstance(value, dict) and TIMESTAMP in value:
            return value
    return None


def _read_text(path: Path) -> str:
    # newline="" keeps \r\n intact so untouched bytes round-trip exactly.
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def _read_string_field(text: str, collection: str, record_id: str, key: str) -> Optional[str]:
    try:
        record = read_object_record(text, collection, record_id)
    except (RecordNotFoundError, RecordDecodeError) as e:
        logger.debug("Unable to read %s record %s: %s", collection, record_id, e)
        return None
    value = record.get(key)
    return value if isinstance(value, str) else None


def _read_section(text: str, collection: str, record_id: str, missing: str, malformed: str) -> Dict[str, Any]:
    try:
        return read_object_record(text, collection, record_id)
    except RecordNotFoundError as e:
        raise LoadError(missing) from e
    except RecordDecodeError as e:
        raise LoadError(f"{malformed}: {e}") from e


class SaveDocument:
    """An opened save file with its editable sections.

    Create instances with :meth:`load`; a SaveDocument always holds a fully
    validated save.
    """

    def __init__(
        self,
        path: Path,
        text: str,
        avatar_id: str,
        backpack_id: str,
        character: Dict[str, Any],
        inventory: Dict[str, Any],
        gold: Dict[str, Any],
        timestamp_template: Any,
        tables: GameTables,
    ) -> None:
        self._path = Path(path)
        self._path_lock = threading.RLock()
        self._text = text
        self._avatar_id = avatar_id
        self._backpack_id = backpack_id
        self._character = character
        self._inventory = inventory
        self._gold = gold
        self._timestamp_template = timestamp_template
        self._tables = tables

    @classmethod
    def load(cls, path: PathLike, tables: GameTables) -> "SaveDocument":
        """Read and validate a save file.

        Raises LoadError describing the first problem found.
        """
        path = Path(path)
        try:
            text = _read_text(path)
        except (OSError, UnicodeDecodeError) as e:
            raise LoadError(f"Unable to load file: {e}") from e

        avatar_id = _read_string_field(text, USER, USER_ID, AVATAR_ID)
        if avatar_id is None:
            raise LoadError("Unable to determine the current avatar")

        character = _read_section(
            text, CHARACTER_SHEET, avatar_id, "Unable to find character sheet", "Error reading character sheet"
        )

        backpack_id = _read_string_field(text, CHARACTER, avatar_id, BACKPACK_ID)
        if backpack_id is None:
            raise LoadError("Unable to find the avatar's backpack")

        inventory = _read_section(text, ITEM_STORE, backpack_id, "Unable to find inventory", "Error reading inventory")
        gold = _read_section(text, USER_GOLD, USER_ID, "Unable to find user gold", "Error reading user gold")

        if to_int64(character.get(ADVENTURER_EXP)) is None:
            raise LoadError("Unable to parse adventurer experience")

        if SKILLS not in character:
            raise LoadError("Unable to find skills")
        skills = character[SKILLS]
        if not isinstance(skills, dict):
            raise LoadError("Error reading skills")

        entry = find_timestamp_entry(skills)
        if entry is None:
            raise LoadError("Unable to parse the date/time")

        logger.info("Loaded save %s (avatar %s, backpack %s)", path, avatar_id, backpack_id)
        return cls(
            path=path,
            text=text,
            avatar_id=avatar_id,
            backpack_id=backpack_id,
            character=character,
            inventory=inventory,
            gold=gold,
            timestamp_template=copy.deepcopy(entry[TIMESTAMP]),
            tables=tables,
        )

    # Persistence

    @property
    def path(self) -> Path:
        with self._path_lock:
            return self._path

    @property
    def text(self) -> str:
        """Save text as it was when loaded."""
        return self._text

    def render(self) -> str:
        """Loaded text with the three edited sections spliced back in."""
        text = self._text
        sections = (
            (CHARACTER_SHEET, self._avatar_id, self._character),
            (ITEM_STORE, self._backpack_id, self._inventory),
            (USER_GOLD, USER_ID, self._gold),
        )
        for collection, record_id, value in sections:
            try:
                text = write_record(text, collection, record_id, value)
            except RecordNotFoundError as e:
                raise StoreError(f"Unable to set {collection}") from e
        return text

    def store(self) -> None:
        self.store_as(self.path)

    def store_as(self, path: PathLike) -> None:
        """Write the edited save to ``path`` and make it the current path.

        The file is truncated and rewritten in place; a failure part way
        through the write can leave it incomplete.
        """
        path = Path(path)
        try:
            data = self.render().encode("utf-8")
        except UnicodeEncodeError as e:
            raise StoreError(f"Unable to encode save text: {e}") from e
        try:
            with open(path, "wb") as f:
                f.write(data)
        except OSError as e:
            logger.error("Failed to store save to %s: %s", path, e)
            raise StoreError(f"Unable to store file: {e}") from e
        with self._path_lock:
            self._path = path
        logger.info("Stored save to %s", path)

    # Identity

    @property
    def avatar_id(self) -> str:
        return self._avatar_id

    @property
    def backpack_id(self) -> str:
        return self._backpack_id

    @property
    def timestamp_template(self) -> Any:
        return copy.deepcopy(self._timestamp_template)

    @property
    def tables(self) -> GameTables:
        return self._tables

    # Gold

    def get_gold(self) -> Optional[int]:
        return to_int64(self._gold.get(GOLD))

    def set_gold(self, gold: int) -> None:
        gold = int(gold)
        if not INT64_MIN <= gold <= INT64_MAX:
            raise ContractViolation(f"Gold {gold} outside the int64 range")
        self._gold[GOLD] = gold

    # Skills

    @property
    def _skills(self) -> Dict[str, Any]:
        return self._character[SKILLS]

    def skill_ids(self) -> List[int]:
        return [int(key) for key in self._skills if key.isascii() and key.isdigit()]

    def get_skill_experience(self, skill_id: int) -> Optional[int]:
        return skill_experience(self._skills, skill_id)

    def get_skill_level(self, skill_id: int, multiplier: float) -> Optional[int]:
        return skill_level(self._skills, skill_id, multiplier, self._tables.skill_table)

    def set_skill_level(self, skill_id: int, level: int, multiplier: float) -> None:
        """Set a skill's level; level 0 removes the skill."""
        table = self._tables.skill_table
        if not 0 <= level <= table.max_level:
            raise ContractViolation(f"Skill level {level} outside 0..{table.max_level}")
        _check_multiplier(multiplier)

        key = _skill_key(skill_id)
        if level == 0:
            self._skills.pop(key, None)
            return

        exp = int(table.experience_for(level) * multiplier)
        skill = self._skills.get(key)
        if isinstance(skill, dict):
            skill[EXPERIENCE] = exp
        else:
            self._skills[key] = {
                MASTERY: 0,
                TIMESTAMP: copy.deepcopy(self._timestamp_template),
                EXPERIENCE: exp,
            }

    # Adventurer / producer levels

    def get_adventurer_experience(self) -> Optional[int]:
        return to_int64(self._character.get(ADVENTURER_EXP))

    def get_adventurer_level(self) -> Optional[int]:
        return self._level_for(self.get_adventurer_experience())

    def set_adventurer_level(self, level: int) -> None:
        self._character[ADVENTURER_EXP] = self._tables.level_table.experience_for(level)

    def get_producer_experience(self) -> Optional[int]:
        return to_int64(self._character.get(PRODUCER_EXP))

    def get_producer_level(self) -> Optional[int]:
        return self._level_for(self.get_producer_experience())

    def set_producer_level(self, level: int) -> None:
        self._character[PRODUCER_EXP] = self._tables.level_table.experience_for(level)

    def _level_for(self, exp: Optional[int]) -> Optional[int]:
        if exp is None:
            return None
        return self._tables.level_table.level_for(exp)

    # Inventory

    def get_inventory_items(self) -> List[Item]:
        return project_items(self._inventory)

    def set_inventory_items(self, items: Iterable[Item]) -> None:
        merge_items(self._inventory, items)
