from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from ..errors import ContractViolation

logger = logging.getLogger(__name__)

# ItemStore keys
ITEMS = "in"
ASSET_NAME = "an"
QUANTITY = "qn"
DURABILITY = "hp"
MAX_DURABILITY = "php"
BAG = "bag"


@dataclass
class Durability:
    current: float
    maximum: float

    @staticmethod
    def from_entry(entry: Dict[str, Any]) -> Optional["Durability"]:
        current = _as_number(entry.get(DURABILITY))
        maximum = _as_number(entry.get(MAX_DURABILITY))
        if current is None or maximum is None:
            return None
        return Durability(current=current, maximum=maximum)


@dataclass
class Item:
    """One inventory entry as shown to the user.

    ``in_bag`` reflects the presence of the bag flag in the save, not its value.
    """

    id: str
    name: str
    count: int
    durability: Optional[Durability] = None
    in_bag: bool = False


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _as_count(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return None
    return value


def item_name(asset_path: Any) -> Optional[str]:
    """Display name from an asset path: the part after the last ``/``."""
    if not isinstance(asset_path, str):
        return None
    pos = asset_path.rfind("/")
    if pos < 0:
        return None
    return asset_path[pos + 1:]


def _item_map(store: Dict[str, Any]) -> Dict[str, Any]:
    items = store.get(ITEMS)
    if not isinstance(items, dict):
        raise ContractViolation("Item store has no item map")
    return items


def project_items(store: Dict[str, Any]) -> List[Item]:
    """Typed view of the ItemStore's items.

    Entries missing the inner object, a name or a count are skipped; the rest
    of the inventory is still returned.
    """
    item_map = store.get(ITEMS)
    if not isinstance(item_map, dict):
        logger.warning("Item store has no item map")
        return []
    items: List[Item] = []
    for key, value in item_map.items():
        entry = value.get(ITEMS) if isinstance(value, dict) else None
        if not isinstance(entry, dict):
            logger.debug("Skipping inventory entry %s: no item data", key)
            continue
        name = item_name(entry.get(ASSET_NAME))
        if name is None:
            logger.debug("Skipping inventory entry %s: no asset name", key)
            continue
        count = _as_count(entry.get(QUANTITY))
        if count is None:
            logger.debug("Skipping inventory entry %s: no quantity", key)
            continue
        items.append(
            Item(
                id=key,
                name=name,
                count=count,
                durability=Durability.from_entry(entry),
                in_bag=BAG in entry,
            )
        )
    return items


def merge_items(store: Dict[str, Any], items: Iterable[Item]) -> None:
    """Write counts and durability of ``items`` back into the ItemStore in place.

    Every item must reference an entry already present in the store; an
    unknown id raises before any entry is changed.
    """
    item_map = _item_map(store)
    updates = []
    for item in items:
        value = item_map.get(item.id)
        entry = value.get(ITEMS) if isinstance(value, dict) else None
        if not isinstance(entry, dict):
            raise ContractViolation(f"Inventory item {item.id} does not exist")
        updates.append((entry, item))

    # Nothing is written unless every item resolved.
    for entry, item in updates:
        entry[QUANTITY] = item.count
        if item.durability is not None:
            entry[DURABILITY] = item.durability.current
            entry[MAX_DURABILITY] = item.durability.maximum
