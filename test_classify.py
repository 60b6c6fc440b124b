"""
test_classify.py - Compliance classifier tests.

Covers:
- match / overcompliance / undercompliance verdicts
- direction handling (OUT / IN / case / invalid)
- combo expansion in the classifier
- ComplianceReport evidence and flags

Usage: python -m pytest test_classify.py
"""

from __future__ import annotations

import pytest

from classify import assess_compliance, compare_field_sets, get_direction_labels, resolve_direction
from models import ComplianceStatus, Direction


def test_undercompliance():
    status = compare_field_sets(
        {"fields": ["full_name"]},
        {"fields": ["full_name", "date_of_birth"]},
        "OUT",
    )
    assert status == ComplianceStatus.UNDERCOMPLIANCE


def test_overcompliance_with_default_direction():
    status = compare_field_sets(
        {"fields": ["full_name", "date_of_birth", "extra_field"]},
        {"fields": ["full_name", "date_of_birth"]},
    )
    assert status == ComplianceStatus.OVERCOMPLIANCE


def test_match_after_normalization():
    status = compare_field_sets(
        {"fields": ["fullName", "passportNumber"]},
        {"fields": ["full_name", "id_document_number"]},
    )
    assert status == ComplianceStatus.MATCH


def test_direction_in_swaps_roles():
    applicant = {"fields": ["full_name"]}
    counterparty = {"fields": ["full_name", "date_of_birth"]}
    assert compare_field_sets(applicant, counterparty, Direction.IN) == ComplianceStatus.OVERCOMPLIANCE
    assert compare_field_sets(applicant, counterparty, "in") == ComplianceStatus.OVERCOMPLIANCE


def test_undercompliance_takes_priority():
    status = compare_field_sets(
        {"fields": ["full_name", "extra_field"]},
        {"fields": ["full_name", "date_of_birth"]},
    )
    assert status == ComplianceStatus.UNDERCOMPLIANCE


def test_classifier_expands_combo_fields():
    # Combo parts are normalized individually here, unlike in the matcher.
    status = compare_field_sets(
        {"fields": ["dateOfBirth + placeOfBirth"]},
        {"fields": ["date_of_birth", "birthplace"]},
    )
    assert status == ComplianceStatus.MATCH


@pytest.mark.parametrize(
    "applicant, counterparty, expected",
    [
        ([], [], ComplianceStatus.MATCH),
        ([], ["full_name"], ComplianceStatus.UNDERCOMPLIANCE),
        (["full_name"], [], ComplianceStatus.OVERCOMPLIANCE),
    ],
)
def test_empty_sides(applicant, counterparty, expected):
    assert compare_field_sets({"fields": applicant}, {"fields": counterparty}) == expected


def test_group_fields_count_toward_verdict():
    status = compare_field_sets(
        {"fields": ["full_name"], "groups": [{"logic": "OR", "fields": ["nationality"]}]},
        {"fields": ["full_name", "nationality"]},
    )
    assert status == ComplianceStatus.MATCH


def test_resolve_direction():
    assert resolve_direction(None) == Direction.OUT
    assert resolve_direction(" out ") == Direction.OUT
    assert resolve_direction(Direction.IN) == Direction.IN
    with pytest.raises(ValueError):
        resolve_direction("sideways")


def test_invalid_direction_is_rejected():
    with pytest.raises(ValueError):
        compare_field_sets({"fields": []}, {"fields": []}, "UP")


def test_direction_labels():
    assert get_direction_labels("OUT") == {"sender": "Applicant", "receiver": "Counterparty"}
    assert get_direction_labels("IN") == {"sender": "Counterparty", "receiver": "Applicant"}


def test_assess_compliance_report():
    report = assess_compliance(
        {"fields": ["full_name"]},
        {"fields": ["full_name", "date_of_birth"]},
    )
    assert report.is_undercompliant
    assert report.status_label == "Undercompliance"
    assert report.sender_label == "Applicant"
    assert report.receiver_label == "Counterparty"
    assert report.missing_fields == ["date_of_birth"]
    assert report.extra_fields == []
    assert report.sender_fields == ["full_name"]
    assert report.receiver_fields == ["date_of_birth", "full_name"]
    assert any("date_of_birth" in line for line in report.evidence)
    assert report.comparable.total_matches == 1


def test_assess_compliance_agrees_with_compare_field_sets():
    cases = [
        ({"fields": ["full_name"]}, {"fields": ["full_name", "date_of_birth"]}),
        ({"fields": ["full_name", "tax_id"]}, {"fields": ["full_name"]}),
        ({"fields": ["passportNumber"]}, {"fields": ["id_document_number"]}),
    ]
    for applicant, counterparty in cases:
        for direction in Direction:
            report = assess_compliance(applicant, counterparty, direction)
            assert report.status == compare_field_sets(applicant, counterparty, direction)


def test_identical_sets_evidence():
    report = assess_compliance({"fields": ["full_name"]}, {"fields": ["fullName"]})
    assert report.is_match
    assert "Sender and receiver field sets are identical" in report.evidence


def test_unsatisfied_groups_are_reported():
    report = assess_compliance(
        {"groups": [{"logic": "AND", "fields": ["date_of_birth", "nationality"]}]},
        {"fields": ["date_of_birth"]},
    )
    assert any("Applicant group_0 (AND) not satisfied: matched 1/2" == line for line in report.evidence)


def test_flags_pass_through():
    report = assess_compliance(
        {"required_fields": ["full_name"], "kyc_required": True, "aml_required": True},
        {"fields": ["full_name"]},
    )
    assert report.applicant_flags is not None
    assert report.applicant_flags.kyc_required is True
    assert report.applicant_flags.wallet_attribution is False
    assert report.counterparty_flags is None
    assert report.is_match


def test_trailing_separator_contributes_empty_name():
    status = compare_field_sets({"fields": ["a + "]}, {"fields": ["a", ""]})
    assert status == ComplianceStatus.MATCH
