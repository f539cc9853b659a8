from __future__ import annotations

import json
import logging
from typing import Any, Dict

from ..errors import RecordDecodeError, RecordNotFoundError
from .locator import extract_record, splice_record

logger = logging.getLogger(__name__)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON literal {name}")


def decode_payload(payload: str) -> Any:
    """Parse a record payload as a JSON value."""
    try:
        return json.loads(payload, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise RecordDecodeError(f"Invalid JSON (line {e.lineno}, column {e.colno}): {e.msg}") from e
    except ValueError as e:
        raise RecordDecodeError(f"Invalid JSON: {e}") from e


def encode_payload(value: Any) -> str:
    """Serialize a JSON value to compact text for splicing into the save.

    ``</`` only occurs inside strings here and is written as ``<\\/`` so the
    payload can never contain the record terminator.
    """
    text = json.dumps(value, ensure_ascii=False, separators=(",", ":"), allow_nan=False)
    return text.replace("</", "<\\/")


def read_record(text: str, collection: str, record_id: str) -> Any:
    payload = extract_record(text, collection, record_id)
    if payload is None:
        raise RecordNotFoundError(f"Record {record_id} not found in collection {collection}")
    try:
        return decode_payload(payload)
    except RecordDecodeError as e:
        logger.debug("Failed to parse %s record %s: %s", collection, record_id, e)
        raise


def read_object_record(text: str, collection: str, record_id: str) -> Dict[str, Any]:
    """Like read_record, but the payload must be a JSON object."""
    value = read_record(text, collection, record_id)
    if not isinstance(value, dict):
        raise RecordDecodeError(
            f"Record {record_id} in collection {collection} is a {type(value).__name__}, expected an object"
        )
    return value


def write_record(text: str, collection: str, record_id: str, value: Any) -> str:
    result = splice_record(text, collection, record_id, encode_payload(value))
    if result is None:
        raise RecordNotFoundError(f"Record {record_id} not found in collection {collection}")
    return result
