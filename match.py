"""
match.py - Field name matching between two requirement sets.

Two raw field names match when they denote the same or an overlapping
compliance concept:
- same canonical name after dictionary lookup
- two combo fields sharing a raw component
- a plain field whose canonical name is one of a combo field's raw components

Combo components are compared as raw strings, never canonicalized. A combo
"dateOfBirth + birthplace" therefore does not match a plain "date_of_birth".
"""

from __future__ import annotations

from typing import Iterable

from logging_config import get_logger
from models import FieldMatch, MatchType, NormalizedField
from normalize import normalize_field

logger = get_logger(__name__)


def _combo_overlap(first: NormalizedField, second: NormalizedField) -> bool:
    if first.is_combo and second.is_combo:
        return bool(set(first.combo_fields) & set(second.combo_fields))
    if first.is_combo:
        return second.normalized in first.combo_fields
    if second.is_combo:
        return first.normalized in second.combo_fields
    return False


def classify_match(field1: str, field2: str) -> MatchType | None:
    """Return how two raw field names match, or None when they don't."""
    n1 = normalize_field(field1)
    n2 = normalize_field(field2)

    if n1.normalized == n2.normalized:
        match_type: MatchType | None = MatchType.EXACT
    elif _combo_overlap(n1, n2):
        match_type = MatchType.COMBO
    else:
        match_type = None

    logger.debug(
        "field_matching | a=%r | a_norm=%r | b=%r | b_norm=%r | match=%s",
        field1,
        n1.normalized,
        field2,
        n2.normalized,
        match_type.value if match_type else None,
    )
    return match_type


def fields_match(field1: str, field2: str) -> bool:
    """Whether two raw field names denote the same or an overlapping concept."""
    return classify_match(field1, field2) is not None


def find_matching_fields(fields1: Iterable[str], fields2: Iterable[str]) -> list[FieldMatch]:
    """All matching pairs between two field lists, in input order."""
    right = list(fields2)
    matches: list[FieldMatch] = []
    for field1 in fields1:
        for field2 in right:
            match_type = classify_match(field1, field2)
            if match_type is not None:
                matches.append(FieldMatch(field1=field1, field2=field2, match_type=match_type))
    return matches


def has_matches(field: str, pairings: dict[str, list[str]]) -> bool:
    """Whether a field has any pairing on the other side."""
    return field in pairings


def get_matching_fields(field: str, pairings: dict[str, list[str]]) -> list[str]:
    """Fields paired with `field`, or an empty list."""
    return list(pairings.get(field, []))
