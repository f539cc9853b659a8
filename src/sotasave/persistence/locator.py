"""Literal-search locator for JSON payloads inside the save container.

The save file is a proprietary tagged-text wrapper around JSON records::

    <collection name="CharacterSheet"> ... <record Id="5c3f...">{...}</record> ...

It is not well-formed XML, so records are found with plain first-match
substring searches and every character outside a payload is left untouched.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

RECORD_END = "</record>"


def collection_tag(name: str) -> str:
    return f'<collection name="{name}">'


def record_tag(record_id: str) -> str:
    return f'<record Id="{record_id}">'


@dataclass(frozen=True)
class RecordSpan:
    """Half-open ``[start, end)`` range of a record payload within the text."""

    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start

    def slice(self, text: str) -> str:
        return text[self.start:self.end]


def locate_record(text: str, collection: str, record_id: str) -> Optional[RecordSpan]:
    """Find the payload of ``record_id`` within ``collection``.

    The record tag is searched only after the collection tag, and the record
    terminator only after the record tag. Returns None if any marker is absent.
    """
    tag = collection_tag(collection)
    pos = text.find(tag)
    if pos < 0:
        return None
    start = pos + len(tag)

    tag = record_tag(record_id)
    pos = text.find(tag, start)
    if pos < 0:
        return None
    start = pos + len(tag)

    end = text.find(RECORD_END, start)
    if end < 0:
        return None
    return RecordSpan(start=start, end=end)


def extract_record(text: str, collection: str, record_id: str) -> Optional[str]:
    span = locate_record(text, collection, record_id)
    if span is None:
        return None
    return span.slice(text)


def splice_record(text: str, collection: str, record_id: str, payload: str) -> Optional[str]:
    """Return a copy of ``text`` with the record payload replaced by ``payload``."""
    span = locate_record(text, collection, record_id)
    if span is None:
        return None
    return "".join((text[:span.start], payload, text[span.end:]))
