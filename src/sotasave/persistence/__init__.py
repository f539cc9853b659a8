"""Save-file engine.

- locator: finds record payloads inside the tagged-text container
- codec: JSON decode/encode of located payloads
- inventory: typed view of the backpack item store
- document: SaveDocument, the load/edit/store API
"""

from .document import USER_ID, SaveDocument
from .inventory import Durability, Item
from .locator import RecordSpan, locate_record

__all__ = [
    "USER_ID",
    "SaveDocument",
    "Durability",
    "Item",
    "RecordSpan",
    "locate_record",
]
