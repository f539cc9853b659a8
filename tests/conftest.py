import json
import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from sotasave.config import GameTables  # noqa: E402

USER_ID = "000000000000000000000001"
AVATAR_ID = "5d1e0c2a9b8f7e6d5c4b3a21"
BACKPACK_ID = "5d1e0c2a9b8f7e6d5c4b3a99"
TIMESTAMP = {"$date": 1583020800000}

LEVEL_EXP = [i * i * 10 for i in range(200)]
SKILL_EXP = [100 + i * i * 4 for i in range(200)]


def default_character():
    return {
        "ae": 1000,
        "pe": "250",
        "sk2": {
            "10": {"m": 3, "t": TIMESTAMP, "x": 200},
            "22": {"m": 0, "t": {"$date": 1500000000000}, "x": 5000},
        },
        "nm": "Lord Brïtish",
    }


def default_inventory():
    return {
        "in": {
            "item-1": {"in": {"an": "Items/Weapons/LongSword", "qn": 1, "hp": 40.5, "php": 50.0}},
            "item-2": {"in": {"an": "Items/Reagents/Garlic", "qn": 25, "bag": 1}},
            "item-3": {"in": {"an": "Items/Broken/NoCount"}},
        }
    }


def default_gold():
    return {"g": 1000}


def build_save(
    character=None,
    inventory=None,
    gold=None,
    user=None,
    backpack_record=None,
    newline="\r\n",
) -> str:
    """Assemble a save container the way the game writes it."""

    def payload(value):
        # Raw strings pass through so tests can inject malformed payloads.
        if isinstance(value, str):
            return value
        return json.dumps(value)

    character = default_character() if character is None else character
    inventory = default_inventory() if inventory is None else inventory
    gold = default_gold() if gold is None else gold
    user = {"dc": AVATAR_ID, "nm": "player"} if user is None else user
    backpack_record = {"mainbp": BACKPACK_ID, "ts": 7} if backpack_record is None else backpack_record

    lines = [
        '<?xml version="1.0" encoding="utf-8"?>',
        "<StoredGame>",
        '<collection name="User">',
        f'<record Id="{USER_ID}">{payload(user)}</record>',
        "</collection>",
        '<collection name="Character">',
        f'<record Id="000000000000000000000fff">{json.dumps({"mainbp": "wrong"})}</record>',
        f'<record Id="{AVATAR_ID}">{payload(backpack_record)}</record>',
        "</collection>",
        '<collection name="Notes">',
        f'<record Id="{AVATAR_ID}">{{"text": "Schwert ü and <b>bold</b>"}}</record>',
        "</collection>",
        '<collection name="CharacterSheet">',
        f'<record Id="{AVATAR_ID}">{payload(character)}</record>',
        "</collection>",
        '<collection name="ItemStore">',
        f'<record Id="{BACKPACK_ID}">{payload(inventory)}</record>',
        "</collection>",
        '<collection name="UserGold">',
        f'<record Id="{USER_ID}">{payload(gold)}</record>',
        "</collection>",
        "</StoredGame>",
    ]
    return newline.join(lines) + newline


def write_save(path: Path, text: str) -> Path:
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)
    return path


def read_save(path: Path) -> str:
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


@pytest.fixture()
def tables() -> GameTables:
    return GameTables(
        level_exp=LEVEL_EXP,
        skill_exp=SKILL_EXP,
        skill_groups=[
            {
                "name": "Blades",
                "category": "adventurer",
                "skills": [{"name": "Blades Mastery", "multiplier": 1.0, "id": 10}],
            },
            {
                "name": "Smithing",
                "category": "producer",
                "skills": [{"name": "Blacksmithing", "multiplier": 2.0, "id": 22}],
            },
        ],
    )


@pytest.fixture()
def save_path(tmp_path: Path) -> Path:
    return write_save(tmp_path / "save.sota", build_save())
