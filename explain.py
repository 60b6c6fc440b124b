"""
explain.py - Human-readable and JSON-ready compliance report formatting.

This module converts a structured `ComplianceReport` into:
- terminal-friendly text output for CLI usage
- machine-friendly dictionary output for APIs/logging/storage
"""

from __future__ import annotations

import pandas as pd

from logging_config import get_logger
from models import ComparableSets, ComplianceReport, ComplianceStatus, GroupResult, VerificationFlags

logger = get_logger(__name__)

STATUS_HEADERS: dict[ComplianceStatus, str] = {
    ComplianceStatus.MATCH: "MATCH - requirements met exactly",
    ComplianceStatus.OVERCOMPLIANCE: "OVERCOMPLIANCE - sender supplies extra fields",
    ComplianceStatus.UNDERCOMPLIANCE: "UNDERCOMPLIANCE - required fields missing",
}

PRESENCE_COLUMNS = ["field", "in_applicant", "in_counterparty", "on_both_sides"]

OUTPUT_WIDTH = 56
SEPARATOR = "=" * OUTPUT_WIDTH
MAX_EVIDENCE_DISPLAY = 8


def _presence_rows(comparable: ComparableSets) -> list[dict]:
    rows = [
        {
            "field": name,
            "in_applicant": presence.in_applicant,
            "in_counterparty": presence.in_counterparty,
            "on_both_sides": presence.on_both_sides,
        }
        for name, presence in comparable.field_presence_map.items()
    ]
    return sorted(rows, key=lambda row: row["field"])


def presence_table(comparable: ComparableSets) -> pd.DataFrame:
    """One row per canonical field name with presence per side, sorted by name."""
    rows = _presence_rows(comparable)
    if not rows:
        return pd.DataFrame(columns=PRESENCE_COLUMNS)
    return pd.DataFrame(rows, columns=PRESENCE_COLUMNS)


def _group_line(side: str, key: str, group: GroupResult) -> str:
    mark = "OK " if group.satisfied else "-- "
    matched = ", ".join(group.matched_fields) or "none"
    return (
        f"    {mark}{side} {key} [{group.logic.value}] "
        f"{len(group.matched_fields)}/{len(group.fields)} matched ({matched})"
    )


def _yes_no(value: bool) -> str:
    return "yes" if value else "no"


def _flags_line(label: str, flags: VerificationFlags | None) -> str | None:
    if flags is None:
        return None
    return (
        f"  {label:<13} KYC={_yes_no(flags.kyc_required)}  "
        f"AML={_yes_no(flags.aml_required)}  "
        f"Wallet attribution={_yes_no(flags.wallet_attribution)}"
    )


def format_report(report: ComplianceReport | None) -> str:
    """Format a ComplianceReport into a clean, human-readable text block."""
    if report is None:
        logger.error("explain_input_error | report_none=True | fallback=error_block")
        return (
            "\n"
            + SEPARATOR
            + "\n"
            + "  ERROR: No comparison data available\n"
            + SEPARATOR
            + "\n"
        )

    lines: list[str] = [""]
    lines.append(SEPARATOR)
    lines.append(f"  {STATUS_HEADERS.get(report.status, report.status_label)}")
    lines.append(SEPARATOR)

    lines.append("")
    lines.append(f"  Direction:    {report.direction.value}")
    lines.append(f"  Sender:       {report.sender_label} ({len(report.sender_fields)} field(s))")
    lines.append(f"  Receiver:     {report.receiver_label} ({len(report.receiver_fields)} field(s))")

    flag_lines = [
        line
        for line in (
            _flags_line("Applicant:", report.applicant_flags),
            _flags_line("Counterparty:", report.counterparty_flags),
        )
        if line
    ]
    if flag_lines:
        lines.append("")
        lines.append("  Verification flags:")
        lines.extend(flag_lines)

    if report.missing_fields:
        lines.append("")
        lines.append("  Missing fields:")
        for field in report.missing_fields:
            lines.append(f"    • {field}")

    if report.extra_fields:
        lines.append("")
        lines.append("  Extra fields:")
        for field in report.extra_fields:
            lines.append(f"    • {field}")

    comparable = report.comparable
    group_lines = [
        _group_line("Applicant", key, group) for key, group in comparable.applicant_groups
    ] + [
        _group_line("Counterparty", key, group) for key, group in comparable.counterparty_groups
    ]
    if group_lines:
        lines.append("")
        lines.append("  Requirement groups:")
        lines.extend(group_lines)

    table = presence_table(comparable)
    lines.append("")
    lines.append(f"  Field presence ({comparable.total_matches} paired field(s)):")
    if table.empty:
        lines.append("    (no fields on either side)")
    else:
        display = table.copy()
        for column in PRESENCE_COLUMNS[1:]:
            display[column] = display[column].map(_yes_no)
        for row in display.to_string(index=False).splitlines():
            lines.append(f"    {row}")

    lines.append("")
    lines.append("  Evidence:")
    evidence_items = list(report.evidence)
    if not evidence_items:
        lines.append("    • (no evidence recorded)")
    elif len(evidence_items) <= MAX_EVIDENCE_DISPLAY:
        for evidence in evidence_items:
            lines.append(f"    • {evidence}")
    else:
        for evidence in evidence_items[: MAX_EVIDENCE_DISPLAY - 1]:
            lines.append(f"    • {evidence}")
        remaining = len(evidence_items) - (MAX_EVIDENCE_DISPLAY - 1)
        lines.append(f"    • ... and {remaining} more evidence item(s)")

    lines.append("")
    lines.append(f"  Verdict: {report.status_label}")
    lines.append("")
    lines.append(SEPARATOR)
    lines.append("")
    return "\n".join(lines)


def format_report_json(report: ComplianceReport | None) -> dict:
    """Format a ComplianceReport as a structured JSON-compatible dictionary."""
    if report is None:
        logger.error("explain_json_input_error | report_none=True | fallback=error_payload")
        return {
            "status": "error",
            "status_label": "Error",
            "direction": None,
            "roles": None,
            "fields": None,
            "groups": None,
            "pairings": None,
            "presence": [],
            "flags": None,
            "evidence": ["No comparison data available"],
        }

    comparable = report.comparable

    def _groups(groups: list[tuple[str, GroupResult]]) -> list[dict]:
        return [{"key": key, **group.model_dump(mode="json")} for key, group in groups]

    return {
        "status": report.status.value,
        "status_label": report.status_label,
        "direction": report.direction.value,
        "roles": {
            "sender": report.sender_label,
            "receiver": report.receiver_label,
        },
        "fields": {
            "applicant": list(comparable.applicant_fields),
            "counterparty": list(comparable.counterparty_fields),
            "sender_normalized": list(report.sender_fields),
            "receiver_normalized": list(report.receiver_fields),
            "missing": list(report.missing_fields),
            "extra": list(report.extra_fields),
        },
        "groups": {
            "applicant": _groups(comparable.applicant_groups),
            "counterparty": _groups(comparable.counterparty_groups),
        },
        "pairings": {
            "field_pairings": {key: list(value) for key, value in comparable.field_pairings.items()},
            "reverse_pairings": {key: list(value) for key, value in comparable.reverse_pairings.items()},
            "total_matches": comparable.total_matches,
            "applicant_matched_fields": list(comparable.applicant_matched_fields),
            "counterparty_matched_fields": list(comparable.counterparty_matched_fields),
        },
        "presence": _presence_rows(comparable),
        "flags": {
            "applicant": report.applicant_flags.model_dump() if report.applicant_flags else None,
            "counterparty": report.counterparty_flags.model_dump() if report.counterparty_flags else None,
        },
        "evidence": list(report.evidence),
    }
