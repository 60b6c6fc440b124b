"""
extract.py - Requirement extraction from rule blocks and JSON payloads.

Rule tables describe each threshold bucket as a rule block that is either
simple (`required_fields`) or grouped (`requirement_groups`), plus three
verification flags. This module turns those blocks, and plain
`fields` / `groups` payloads, into validated RequirementSet objects.

Country lookup and threshold bucketing happen before this module; callers
hand in the already-selected block.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError

from logging_config import get_logger
from models import RequirementGroup, RequirementSet, VerificationFlags

logger = get_logger(__name__)

RULE_BLOCK_KEYS = {"required_fields", "requirement_groups"}
REQUIREMENT_SET_KEYS = {"fields", "groups"}
FLAG_KEYS = ("kyc_required", "aml_required", "wallet_attribution")


class RuleBlock(BaseModel):
    """One threshold bucket of a country rule, as stored in the rule table."""

    required_fields: Optional[list[str]] = Field(
        default=None,
        description="Simple rule: every listed field is required.",
    )
    requirement_groups: Optional[list[RequirementGroup]] = Field(
        default=None,
        description="Grouped rule: AND/OR groups of fields.",
    )
    kyc_required: bool = False
    aml_required: bool = False
    wallet_attribution: bool = False


def extract_from_rule_block(block: RuleBlock | Mapping[str, Any]) -> RequirementSet:
    """Convert a rule block into a RequirementSet, carrying flags through."""
    if not isinstance(block, RuleBlock):
        try:
            block = RuleBlock.model_validate(block)
        except ValidationError as exc:
            raise ValueError(f"Invalid rule block: {exc}") from exc

    # A simple rule wins; groups are only read from a block without required_fields.
    if block.required_fields is not None:
        fields, groups = list(block.required_fields), []
        if block.requirement_groups:
            logger.warning(
                "rule_block_groups_ignored | fields=%s | ignored_groups=%s",
                len(fields),
                len(block.requirement_groups),
            )
    else:
        fields = []
        groups = [group.model_copy(deep=True) for group in block.requirement_groups or []]

    requirements = RequirementSet(
        fields=fields,
        groups=groups,
        flags=VerificationFlags(
            kyc_required=block.kyc_required,
            aml_required=block.aml_required,
            wallet_attribution=block.wallet_attribution,
        ),
    )
    logger.debug(
        "rule_block_extracted | kind=%s | fields=%s | groups=%s",
        requirements.kind.value,
        len(requirements.fields),
        len(requirements.groups),
    )
    return requirements


def parse_requirements(payload: Mapping[str, Any]) -> RequirementSet:
    """Parse either a requirement-set payload or a rule-block payload."""
    if not isinstance(payload, Mapping):
        raise ValueError(
            f"Requirements must be a JSON object, got {type(payload).__name__}"
        )

    keys = set(payload.keys())
    if keys & RULE_BLOCK_KEYS:
        if keys & REQUIREMENT_SET_KEYS:
            raise ValueError(
                "Requirements mix rule-block keys (required_fields/requirement_groups) "
                "with requirement-set keys (fields/groups)"
            )
        return extract_from_rule_block(payload)

    data = dict(payload)
    # Flags may sit at top level, as they do in extracted rule blocks.
    top_level_flags = {key: data.pop(key) for key in FLAG_KEYS if key in data}
    if top_level_flags and data.get("flags") is None:
        data["flags"] = top_level_flags

    try:
        return RequirementSet.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid requirements: {exc}") from exc


def coerce_requirement_set(value: RequirementSet | Mapping[str, Any] | None) -> RequirementSet:
    """Accept a RequirementSet or a mapping; None means there is nothing to compare."""
    if value is None:
        raise ValueError("No requirements available for this side - cannot compare")
    if isinstance(value, RequirementSet):
        return value
    return parse_requirements(value)


def load_requirements_file(path: str | Path) -> RequirementSet:
    """Load and validate a requirements JSON file."""
    if path is None:
        raise ValueError("requirements path cannot be None")

    path_text = str(path).strip()
    if not path_text:
        raise ValueError("requirements path cannot be empty")

    file_path = Path(path_text)
    if not file_path.is_file():
        raise FileNotFoundError(
            f"Requirements file not found: {file_path}\n"
            "Provide a valid JSON file with --applicant / --counterparty"
        )

    try:
        payload = json.loads(file_path.read_text(encoding="utf-8-sig"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Failed to parse requirements '{file_path}': {exc}") from exc

    requirements = parse_requirements(payload)
    logger.info(
        "requirements_loaded | path=%s | kind=%s | fields=%s | groups=%s",
        file_path,
        requirements.kind.value,
        len(requirements.fields),
        len(requirements.groups),
    )
    return requirements


def has_requirement_groups(requirements: RequirementSet) -> bool:
    return len(requirements.groups) > 0


def has_required_fields(requirements: RequirementSet) -> bool:
    return len(requirements.fields) > 0
