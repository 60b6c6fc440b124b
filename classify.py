"""
classify.py - Deterministic compliance classification.

This module converts two requirement sets and a transfer direction into a
verdict: does the sender supply exactly, more than, or less than what the
receiver requires?

Both sides are expanded to individual canonical names first: a combo field
contributes each of its parts, normalized on its own. This differs from the
presence map in compare.py, which keeps combo fields whole.
"""

from __future__ import annotations

from compare import RequirementsInput, build_comparable_sets
from extract import coerce_requirement_set
from logging_config import get_logger
from models import ComplianceReport, ComplianceStatus, Direction
from normalize import expand_combo_fields

logger = get_logger(__name__)

APPLICANT_LABEL = "Applicant"
COUNTERPARTY_LABEL = "Counterparty"


def resolve_direction(direction: Direction | str | None) -> Direction:
    """Accept a Direction or a case-insensitive 'IN' / 'OUT' string."""
    if direction is None:
        return Direction.OUT
    if isinstance(direction, Direction):
        return direction
    try:
        return Direction(str(direction).strip().upper())
    except ValueError as exc:
        raise ValueError(
            f"Unknown direction {direction!r}; expected 'IN' or 'OUT'"
        ) from exc


def get_direction_labels(direction: Direction | str | None = Direction.OUT) -> dict[str, str]:
    """Sender / receiver labels for a transfer direction."""
    if resolve_direction(direction) == Direction.OUT:
        return {"sender": APPLICANT_LABEL, "receiver": COUNTERPARTY_LABEL}
    return {"sender": COUNTERPARTY_LABEL, "receiver": APPLICANT_LABEL}


def _status_for(sender: set[str], receiver: set[str]) -> ComplianceStatus:
    if not receiver <= sender:
        return ComplianceStatus.UNDERCOMPLIANCE
    if not sender <= receiver:
        return ComplianceStatus.OVERCOMPLIANCE
    return ComplianceStatus.MATCH


def assess_compliance(
    applicant_requirements: RequirementsInput,
    counterparty_requirements: RequirementsInput,
    direction: Direction | str | None = Direction.OUT,
) -> ComplianceReport:
    """Classify the sender's fields against the receiver's, with full evidence."""
    resolved = resolve_direction(direction)
    applicant = coerce_requirement_set(applicant_requirements)
    counterparty = coerce_requirement_set(counterparty_requirements)

    comparable = build_comparable_sets(applicant, counterparty)

    applicant_names = set(expand_combo_fields(comparable.applicant_fields))
    counterparty_names = set(expand_combo_fields(comparable.counterparty_fields))

    if resolved == Direction.OUT:
        sender, receiver = applicant_names, counterparty_names
    else:
        sender, receiver = counterparty_names, applicant_names

    status = _status_for(sender, receiver)
    missing = sorted(receiver - sender)
    extra = sorted(sender - receiver)
    labels = get_direction_labels(resolved)

    evidence: list[str] = [
        f"Direction {resolved.value}: {labels['sender']} sends, {labels['receiver']} receives",
        f"{labels['sender']} supplies {len(sender)} field(s); "
        f"{labels['receiver']} requires {len(receiver)} field(s)",
    ]
    if missing:
        evidence.append(f"Missing for {labels['receiver']}: {', '.join(missing)}")
    if extra:
        evidence.append(f"Beyond {labels['receiver']} requirements: {', '.join(extra)}")
    if not missing and not extra:
        evidence.append("Sender and receiver field sets are identical")

    for side, groups in (
        (APPLICANT_LABEL, comparable.applicant_groups),
        (COUNTERPARTY_LABEL, comparable.counterparty_groups),
    ):
        for key, group in groups:
            if not group.satisfied:
                evidence.append(
                    f"{side} {key} ({group.logic.value}) not satisfied: "
                    f"matched {len(group.matched_fields)}/{len(group.fields)}"
                )

    logger.info(
        "classification | status=%s | direction=%s | sender_fields=%s | receiver_fields=%s | missing=%s | extra=%s",
        status.value,
        resolved.value,
        len(sender),
        len(receiver),
        len(missing),
        len(extra),
    )

    return ComplianceReport(
        status=status,
        direction=resolved,
        sender_label=labels["sender"],
        receiver_label=labels["receiver"],
        sender_fields=sorted(sender),
        receiver_fields=sorted(receiver),
        missing_fields=missing,
        extra_fields=extra,
        evidence=evidence,
        comparable=comparable,
        applicant_flags=applicant.flags,
        counterparty_flags=counterparty.flags,
    )


def compare_field_sets(
    applicant_requirements: RequirementsInput,
    counterparty_requirements: RequirementsInput,
    direction: Direction | str | None = Direction.OUT,
) -> ComplianceStatus:
    """Return 'match', 'overcompliance' or 'undercompliance'.

    Missing receiver fields take priority over extra sender fields.
    """
    resolved = resolve_direction(direction)
    comparable = build_comparable_sets(applicant_requirements, counterparty_requirements)

    applicant_names = set(expand_combo_fields(comparable.applicant_fields))
    counterparty_names = set(expand_combo_fields(comparable.counterparty_fields))

    if resolved == Direction.OUT:
        return _status_for(applicant_names, counterparty_names)
    return _status_for(counterparty_names, applicant_names)
