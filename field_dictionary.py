"""
field_dictionary.py - Raw field name -> canonical field name lookup.

Different institutions label the same KYC attribute differently
("passportNumber", "idDocumentNumber", "passport_number"). The dictionary
maps every known alias to one canonical name per concept. Unknown names
map to themselves.

Invariant: every canonical name maps to itself, so lookup is idempotent.
"""

from __future__ import annotations

import json
from pathlib import Path

import config
from logging_config import get_logger
from models import COMBO_SEPARATOR

logger = get_logger(__name__)

BASE_FIELD_DICTIONARY: dict[str, str] = {
    # Name
    "full_name": "full_name",
    "fullName": "full_name",
    "name": "full_name",
    "legal_name": "full_name",
    "legalName": "full_name",
    "first_name": "first_name",
    "firstName": "first_name",
    "given_name": "first_name",
    "givenName": "first_name",
    "last_name": "last_name",
    "lastName": "last_name",
    "surname": "last_name",
    "family_name": "last_name",
    "familyName": "last_name",
    # Birth
    "date_of_birth": "date_of_birth",
    "dateOfBirth": "date_of_birth",
    "dob": "date_of_birth",
    "birth_date": "date_of_birth",
    "birthDate": "date_of_birth",
    "birthplace": "birthplace",
    "place_of_birth": "birthplace",
    "placeOfBirth": "birthplace",
    "birth_place": "birthplace",
    # Citizenship and residence
    "nationality": "nationality",
    "citizenship": "nationality",
    "residential_address": "residential_address",
    "residentialAddress": "residential_address",
    "address": "residential_address",
    "home_address": "residential_address",
    "country_of_residence": "country_of_residence",
    "countryOfResidence": "country_of_residence",
    "residence_country": "country_of_residence",
    # Identity documents
    "id_document_number": "id_document_number",
    "idDocumentNumber": "id_document_number",
    "passportNumber": "id_document_number",
    "passport_number": "id_document_number",
    "document_number": "id_document_number",
    "documentNumber": "id_document_number",
    "id_document_type": "id_document_type",
    "idDocumentType": "id_document_type",
    "document_type": "id_document_type",
    "national_id_number": "national_id_number",
    "nationalIdNumber": "national_id_number",
    "national_identity_number": "national_id_number",
    "tax_id": "tax_id",
    "taxId": "tax_id",
    "tax_identification_number": "tax_id",
    "customer_id": "customer_id",
    "customerId": "customer_id",
    "customer_identification_number": "customer_id",
    # Account
    "account_number": "account_number",
    "accountNumber": "account_number",
    "wallet_address": "wallet_address",
}


def load_field_aliases(path: str | Path) -> dict[str, str]:
    """Load extra alias -> canonical entries from a JSON object file."""
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Field dictionary file not found: {path}")

    try:
        payload = json.loads(path.read_text(encoding="utf-8-sig"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Field dictionary '{path}' is not valid JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise ValueError(
            f"Field dictionary '{path}' must be a JSON object, got {type(payload).__name__}"
        )

    bad_entries = [
        key for key, value in payload.items() if not isinstance(key, str) or not isinstance(value, str)
    ]
    if bad_entries:
        raise ValueError(
            f"Field dictionary '{path}' has non-string entries: {bad_entries[:5]}"
        )
    return dict(payload)


def merge_field_aliases(base: dict[str, str], extra: dict[str, str]) -> dict[str, str]:
    """Merge extra aliases into a copy of base without breaking idempotence."""
    merged = dict(base)
    canonical_names = set(base.values())
    skipped = 0

    for alias, canonical in extra.items():
        alias = alias.strip()
        canonical = canonical.strip()
        if not alias or not canonical or COMBO_SEPARATOR in canonical:
            skipped += 1
            continue

        if alias in canonical_names and canonical != alias:
            logger.warning(
                "field_dictionary_conflict | alias=%r | canonical=%r | reason='alias is already a canonical name'",
                alias,
                canonical,
            )
            skipped += 1
            continue

        if merged.get(canonical, canonical) != canonical:
            logger.warning(
                "field_dictionary_conflict | alias=%r | canonical=%r | reason='target is itself an alias of %r'",
                alias,
                canonical,
                merged[canonical],
            )
            skipped += 1
            continue

        merged[alias] = canonical
        canonical_names.add(canonical)

    logger.debug(
        "field_dictionary_merge | base=%s | extra=%s | skipped=%s | total=%s",
        len(base),
        len(extra),
        skipped,
        len(merged),
    )
    return merged


def _build_field_dictionary() -> dict[str, str]:
    if not config.FIELD_DICTIONARY_PATH:
        return dict(BASE_FIELD_DICTIONARY)

    extra = load_field_aliases(config.FIELD_DICTIONARY_PATH)
    logger.info(
        "field_dictionary_loaded | path=%s | extra_entries=%s",
        config.FIELD_DICTIONARY_PATH,
        len(extra),
    )
    return merge_field_aliases(BASE_FIELD_DICTIONARY, extra)


FIELD_DICTIONARY: dict[str, str] = _build_field_dictionary()


def normalize_field_name(field: str) -> str:
    """Return the canonical name for a raw field name, or the name itself."""
    return FIELD_DICTIONARY.get(field, field)


def get_normalized_fields() -> list[str]:
    """All canonical field names known to the dictionary, first-seen order."""
    return list(dict.fromkeys(FIELD_DICTIONARY.values()))


def get_raw_fields() -> list[str]:
    """All raw field names the dictionary can normalize."""
    return list(FIELD_DICTIONARY.keys())
