"""
normalize.py - Field name normalization module.

Core normalizer:
    normalize_field(field)          -> NormalizedField

Convenience wrappers:
    normalize_fields(fields)
    is_combo_field(field) / split_combo_field(field)
    get_unique_normalized_fields(fields)
    expand_combo_fields(fields)

Design principles:
    - SAME normalization on BOTH sides
    - Pure transformations, no external lookups beyond the static dictionary
    - Any string is valid input; unknown names map to themselves
"""

from __future__ import annotations

from typing import Any, Iterable

from field_dictionary import normalize_field_name
from logging_config import get_logger
from models import COMBO_SEPARATOR, NormalizedField

logger = get_logger(__name__)


def _as_field_text(field: Any) -> str:
    if field is None:
        return ""
    if isinstance(field, str):
        return field
    return str(field)


def is_combo_field(field: str) -> bool:
    """Whether a raw field name joins several sub-fields with ' + '."""
    return COMBO_SEPARATOR in _as_field_text(field)


def split_combo_field(field: str) -> list[str]:
    """Split a combo field into trimmed sub-field names.

    A plain field comes back as a one-element list. Empty parts are
    kept, so "a + " splits to ["a", ""].
    """
    field = _as_field_text(field)
    if not is_combo_field(field):
        return [field]
    return [part.strip() for part in field.split(COMBO_SEPARATOR)]


def normalize_field(field: str) -> NormalizedField:
    """Normalize a raw field name and extract combo information.

    Combo fields keep their whole raw string as the normalized value; only
    plain fields go through the dictionary.
    """
    field = _as_field_text(field)

    if is_combo_field(field):
        result = NormalizedField(
            original=field,
            normalized=field,
            is_combo=True,
            combo_fields=split_combo_field(field),
        )
    else:
        result = NormalizedField(
            original=field,
            normalized=normalize_field_name(field),
            is_combo=False,
            combo_fields=[],
        )

    logger.debug(
        "normalize_field | raw=%r | normalized=%r | combo=%s",
        field,
        result.normalized,
        result.is_combo,
    )
    return result


def normalize_fields(fields: Iterable[str] | None) -> list[NormalizedField]:
    """Normalize a list of raw field names, preserving order."""
    if fields is None:
        return []
    return [normalize_field(field) for field in fields]


def get_unique_normalized_fields(fields: Iterable[str] | None) -> list[str]:
    """Unique normalized names, first-seen order. Combo fields stay whole."""
    return list(dict.fromkeys(item.normalized for item in normalize_fields(fields)))


def expand_combo_fields(fields: Iterable[str] | None) -> list[str]:
    """Canonical names with combo fields split and each part normalized."""
    expanded: list[str] = []
    for item in normalize_fields(fields):
        if item.is_combo:
            expanded.extend(normalize_field_name(part) for part in item.combo_fields)
        else:
            expanded.append(item.normalized)
    return expanded
