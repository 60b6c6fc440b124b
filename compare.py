"""
compare.py - Comparable-set construction for two requirement sets.

Given the applicant's and the counterparty's requirements, this module:
1. flattens plain fields and group fields into one list per side
2. pairs every applicant field with every matching counterparty field
3. decides AND/OR group satisfaction from those pairings
4. records which canonical names are present on each side

Output is a single immutable `ComparableSets` consumed by classify.py and
by the presentation layer (per-field match indicators, group badges).
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Union

from extract import coerce_requirement_set
from logging_config import get_logger
from match import fields_match
from models import (
    ComparableSets,
    FieldPresence,
    GroupResult,
    Logic,
    RequirementGroup,
    RequirementSet,
)
from normalize import get_unique_normalized_fields

logger = get_logger(__name__)

GROUP_KEY_PREFIX = "group_"

RequirementsInput = Union[RequirementSet, Mapping[str, Any]]


def flatten_fields(requirements: RequirementSet) -> list[str]:
    """Plain fields then every group's fields, duplicates removed, order kept."""
    flattened: dict[str, None] = dict.fromkeys(requirements.fields)
    for group in requirements.groups:
        flattened.update(dict.fromkeys(group.fields))
    return list(flattened)


def _pair_fields(
    applicant_fields: list[str],
    counterparty_fields: list[str],
) -> tuple[dict[str, list[str]], dict[str, list[str]]]:
    pairings: dict[str, list[str]] = {}
    reverse: dict[str, list[str]] = {}

    for applicant_field in applicant_fields:
        matches = [
            counterparty_field
            for counterparty_field in counterparty_fields
            if fields_match(applicant_field, counterparty_field)
        ]
        if not matches:
            continue
        pairings.setdefault(applicant_field, []).extend(matches)
        for counterparty_field in matches:
            reverse.setdefault(counterparty_field, []).append(applicant_field)

    return pairings, reverse


def evaluate_group(group: RequirementGroup, pairings: Mapping[str, list[str]]) -> GroupResult:
    """Decide whether a group is satisfied by the given pairing map.

    OR needs any field paired, AND needs every field paired. Matched fields
    are reported either way.
    """
    matched = [field for field in group.fields if field in pairings]
    if group.logic == Logic.OR:
        satisfied = len(matched) > 0
    else:
        satisfied = all(field in pairings for field in group.fields)

    return GroupResult(
        logic=group.logic,
        fields=list(group.fields),
        satisfied=satisfied,
        matched_fields=matched,
    )


def _evaluate_groups(
    groups: list[RequirementGroup],
    pairings: Mapping[str, list[str]],
) -> list[tuple[str, GroupResult]]:
    return [
        (f"{GROUP_KEY_PREFIX}{index}", evaluate_group(group, pairings))
        for index, group in enumerate(groups)
    ]


def build_field_presence_map(
    applicant_fields: Iterable[str],
    counterparty_fields: Iterable[str],
) -> dict[str, FieldPresence]:
    """Canonical name -> presence on each side.

    Each field is normalized directly; combo fields count as their whole
    string, not their parts.
    """
    applicant_names = get_unique_normalized_fields(applicant_fields)
    counterparty_names = get_unique_normalized_fields(counterparty_fields)
    applicant_lookup = set(applicant_names)
    counterparty_lookup = set(counterparty_names)

    return {
        name: FieldPresence(
            in_applicant=name in applicant_lookup,
            in_counterparty=name in counterparty_lookup,
        )
        for name in dict.fromkeys(applicant_names + counterparty_names)
    }


def is_field_present_on_both_sides(
    normalized_field: str,
    presence_map: Mapping[str, FieldPresence],
) -> bool:
    presence = presence_map.get(normalized_field)
    return presence.on_both_sides if presence is not None else False


def build_comparable_sets(
    applicant_requirements: RequirementsInput,
    counterparty_requirements: RequirementsInput,
) -> ComparableSets:
    """Build pairings, group verdicts and presence data for two requirement sets."""
    applicant = coerce_requirement_set(applicant_requirements)
    counterparty = coerce_requirement_set(counterparty_requirements)

    applicant_fields = flatten_fields(applicant)
    counterparty_fields = flatten_fields(counterparty)

    pairings, reverse = _pair_fields(applicant_fields, counterparty_fields)

    applicant_groups = _evaluate_groups(applicant.groups, pairings)
    counterparty_groups = _evaluate_groups(counterparty.groups, reverse)

    result = ComparableSets(
        applicant_fields=applicant_fields,
        counterparty_fields=counterparty_fields,
        applicant_groups=applicant_groups,
        counterparty_groups=counterparty_groups,
        field_pairings=pairings,
        reverse_pairings=reverse,
        total_matches=len(pairings),
        applicant_matched_fields=list(pairings.keys()),
        counterparty_matched_fields=list(reverse.keys()),
        field_presence_map=build_field_presence_map(applicant_fields, counterparty_fields),
    )

    logger.info(
        "comparable_sets_built | applicant_kind=%s | counterparty_kind=%s | applicant_fields=%s | counterparty_fields=%s | total_matches=%s | applicant_groups_satisfied=%s/%s | counterparty_groups_satisfied=%s/%s",
        applicant.kind.value,
        counterparty.kind.value,
        len(applicant_fields),
        len(counterparty_fields),
        result.total_matches,
        sum(1 for _, group in applicant_groups if group.satisfied),
        len(applicant_groups),
        sum(1 for _, group in counterparty_groups if group.satisfied),
        len(counterparty_groups),
    )
    return result
