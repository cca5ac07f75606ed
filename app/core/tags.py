# app/core/tags.py
"""Tag lists stored as JSON-encoded text columns.

Older rows hold a bare string, an already-decoded list, or nothing at all,
so decoding accepts all of those.
"""
import json
from typing import Any, Iterable


def _clean(items: Iterable[Any]) -> list[str]:
    return [item.strip() for item in items if isinstance(item, str) and item.strip()]


def encode_tags(tags: Iterable[str] | None) -> str | None:
    """Serialize a tag list for storage; empty lists are stored as NULL."""
    if not tags:
        return None
    tags = list(tags)
    if not tags:
        return None
    return json.dumps(tags)


def decode_tags(value: Any) -> list[str]:
    if not value:
        return []

    if isinstance(value, (list, tuple)):
        return _clean(value)

    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except ValueError:
            return [value.strip()] if value.strip() else []
        if isinstance(parsed, list):
            return _clean(parsed)
        if isinstance(parsed, str) and parsed.strip():
            return [parsed.strip()]

    return []


def unique_tags(values: Iterable[Any]) -> list[str]:
    """Sorted distinct tags across many stored values."""
    found: set[str] = set()
    for value in values:
        found.update(decode_tags(value))
    return sorted(found)


__all__ = ["encode_tags", "decode_tags", "unique_tags"]
