from __future__ import annotations
from datetime import date, datetime

from .config import ENTITY_CLASSES


def normalize_key(name: str) -> str:
    """Lowercase form used as the key in every name-keyed structure (trie, cache, name index)."""
    return name.lower()


def as_day(value: date | datetime) -> date:
    """Truncate a timestamp to its calendar day; plain dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value


def check_entity_class(entity_class: str) -> str:
    if entity_class not in ENTITY_CLASSES:
        raise ValueError(f"Unknown entity class: {entity_class!r} (expected one of {ENTITY_CLASSES})")
    return entity_class
