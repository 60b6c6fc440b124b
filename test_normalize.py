"""
test_normalize.py - Field dictionary and normalization tests.

Covers:
- normalize_field_name / dictionary helpers
- alias loading and merging
- normalize_field (plain and combo)
- split / expand helpers

Usage: python -m pytest test_normalize.py
"""

from __future__ import annotations

import json

import pytest

from field_dictionary import (
    BASE_FIELD_DICTIONARY,
    get_normalized_fields,
    get_raw_fields,
    load_field_aliases,
    merge_field_aliases,
    normalize_field_name,
)
from normalize import (
    expand_combo_fields,
    get_unique_normalized_fields,
    is_combo_field,
    normalize_field,
    normalize_fields,
    split_combo_field,
)


@pytest.mark.parametrize(
    "raw, canonical",
    [
        ("passportNumber", "id_document_number"),
        ("idDocumentNumber", "id_document_number"),
        ("passport_number", "id_document_number"),
        ("dateOfBirth", "date_of_birth"),
        ("fullName", "full_name"),
        ("residentialAddress", "residential_address"),
        ("full_name", "full_name"),
    ],
)
def test_dictionary_aliases(raw, canonical):
    assert normalize_field_name(raw) == canonical


def test_unknown_name_is_identity():
    assert normalize_field_name("walletAddress") == "walletAddress"
    assert normalize_field_name("") == ""


def test_every_canonical_name_maps_to_itself():
    for canonical in get_normalized_fields():
        assert normalize_field_name(canonical) == canonical


def test_dictionary_listings():
    assert "passportNumber" in get_raw_fields()
    canonical = get_normalized_fields()
    assert "id_document_number" in canonical
    assert len(canonical) == len(set(canonical))


def test_load_field_aliases(tmp_path):
    path = tmp_path / "aliases.json"
    path.write_text(json.dumps({"personalId": "national_id_number"}), encoding="utf-8")
    assert load_field_aliases(path) == {"personalId": "national_id_number"}


def test_load_field_aliases_rejects_bad_files(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_field_aliases(tmp_path / "missing.json")

    not_object = tmp_path / "list.json"
    not_object.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_field_aliases(not_object)

    bad_value = tmp_path / "bad.json"
    bad_value.write_text(json.dumps({"x": 1}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_field_aliases(bad_value)


def test_merge_keeps_dictionary_idempotent():
    merged = merge_field_aliases(
        BASE_FIELD_DICTIONARY,
        {
            "personalId": "national_id_number",
            # canonical name re-mapped: rejected
            "full_name": "legal_name_field",
            # target is an alias of something else: rejected
            "nameOnCard": "fullName",
            # combo target: rejected
            "weird": "a + b",
        },
    )
    assert merged["personalId"] == "national_id_number"
    assert merged["full_name"] == "full_name"
    assert "nameOnCard" not in merged
    assert "weird" not in merged
    for canonical in set(merged.values()):
        assert merged.get(canonical, canonical) == canonical


def test_normalize_plain_field():
    result = normalize_field("passportNumber")
    assert result.original == "passportNumber"
    assert result.normalized == "id_document_number"
    assert result.is_combo is False
    assert result.combo_fields == []


def test_normalize_combo_field_keeps_whole_label():
    result = normalize_field("date_of_birth + birthplace")
    assert result.original == "date_of_birth + birthplace"
    assert result.normalized == "date_of_birth + birthplace"
    assert result.is_combo is True
    assert result.combo_fields == ["date_of_birth", "birthplace"]


def test_combo_parts_are_not_canonicalized():
    result = normalize_field("dateOfBirth + placeOfBirth")
    assert result.combo_fields == ["dateOfBirth", "placeOfBirth"]


def test_separator_needs_surrounding_spaces():
    assert is_combo_field("a+b") is False
    assert normalize_field("a+b").is_combo is False
    assert is_combo_field("a + b") is True


def test_empty_string_is_not_combo():
    result = normalize_field("")
    assert result.normalized == ""
    assert result.is_combo is False


def test_none_is_treated_as_empty():
    assert normalize_field(None).normalized == ""  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "raw",
    ["passportNumber", "id_document_number", "date_of_birth + birthplace", "unknown_thing", "", "a+b"],
)
def test_normalization_is_idempotent(raw):
    once = normalize_field(raw).normalized
    assert normalize_field(once).normalized == once


def test_split_combo_field():
    assert split_combo_field("a + b + c") == ["a", "b", "c"]
    assert split_combo_field("plain") == ["plain"]
    assert split_combo_field("a + ") == ["a", ""]


def test_normalize_fields_preserves_order():
    results = normalize_fields(["fullName", "dob"])
    assert [item.normalized for item in results] == ["full_name", "date_of_birth"]
    assert normalize_fields(None) == []


def test_unique_normalized_fields_keep_combos_whole():
    fields = ["passportNumber", "id_document_number", "date_of_birth + birthplace"]
    assert get_unique_normalized_fields(fields) == [
        "id_document_number",
        "date_of_birth + birthplace",
    ]


def test_expand_combo_fields_normalizes_each_part():
    assert expand_combo_fields(["dateOfBirth + placeOfBirth", "fullName"]) == [
        "date_of_birth",
        "birthplace",
        "full_name",
    ]


def test_empty_combo_parts_are_kept():
    result = normalize_field("a + ")
    assert result.is_combo is True
    assert result.combo_fields == ["a", ""]
    assert expand_combo_fields([" + "]) == ["", ""]
