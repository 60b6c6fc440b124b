"""
models.py - Data Models for the Travel Rule Comparison Pipeline

This file defines ALL data structures used across the comparison pipeline.
Every module communicates exclusively through these models:

    extract.py  ->  RequirementSet
    normalize.py -> NormalizedField
    match.py    ->  FieldMatch
    compare.py  ->  ComparableSets
    classify.py ->  ComplianceStatus / ComplianceReport
    explain.py  ->  str / dict (uses ComplianceReport as input)

Design principles:
1. Each layer's output is the next layer's input
2. Results are built fresh on every comparison and never mutated afterwards
3. Raw field names are kept verbatim; canonical names are always derived

Schema relationships:
    Logic             --used by--> RequirementGroup.logic, GroupResult.logic
    RequirementGroup  --used by--> RequirementSet.groups
    VerificationFlags --used by--> RequirementSet.flags
    GroupResult       --used by--> ComparableSets.applicant_groups
    FieldPresence     --used by--> ComparableSets.field_presence_map
    ComparableSets    --used by--> ComplianceReport.comparable
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

COMBO_SEPARATOR = " + "


class Logic(str, Enum):
    """How the fields of a requirement group combine."""

    # Every field of the group must be matched on the other side.
    AND = "AND"

    # Any one matched field satisfies the group.
    OR = "OR"


class Direction(str, Enum):
    """Transfer direction, seen from the applicant side."""

    # Applicant sends, counterparty receives.
    OUT = "OUT"

    # Counterparty sends, applicant receives.
    IN = "IN"


class ComplianceStatus(str, Enum):
    """Three-way verdict of sender fields against receiver requirements."""

    MATCH = "match"
    OVERCOMPLIANCE = "overcompliance"
    UNDERCOMPLIANCE = "undercompliance"


class MatchType(str, Enum):
    """Why two raw field names were paired."""

    # Same canonical name after dictionary lookup.
    EXACT = "exact"

    # At least one side is a combo field sharing a component.
    COMBO = "combo"


class RequirementKind(str, Enum):
    """Which shape a requirement set actually carries."""

    FIELDS = "fields"
    GROUPS = "groups"
    MIXED = "mixed"
    EMPTY = "empty"


class NormalizedField(BaseModel):
    """A raw field name together with its canonical form and combo parts."""

    model_config = ConfigDict(frozen=True)

    original: str = Field(..., description="Raw field name exactly as supplied.")
    normalized: str = Field(
        ...,
        description=(
            "Canonical name from the field dictionary, or the raw name when "
            "no entry exists. Combo fields keep their whole raw string here."
        ),
    )
    is_combo: bool = Field(
        default=False,
        description="True iff the raw name contains the ' + ' separator.",
    )
    combo_fields: list[str] = Field(
        default_factory=list,
        description=(
            "Trimmed raw sub-field names of a combo field. Not canonicalized. "
            "Empty for plain fields."
        ),
    )


class RequirementGroup(BaseModel):
    """A set of fields that jointly (AND) or alternatively (OR) satisfy one obligation."""

    logic: Logic = Field(..., description="AND: all fields required. OR: any one suffices.")
    fields: list[str] = Field(
        default_factory=list,
        description=(
            "Ordered raw field names. May include combo fields such as "
            "'date_of_birth + birthplace'."
        ),
    )

    @field_validator("logic", mode="before")
    @classmethod
    def upper_logic(cls, value: object) -> object:
        return value.strip().upper() if isinstance(value, str) else value

    @field_validator("fields", mode="before")
    @classmethod
    def none_as_empty(cls, value: object) -> object:
        return [] if value is None else value


class VerificationFlags(BaseModel):
    """Pass-through verification flags attached to a rule block.

    The comparison engine never interprets these; they are carried from the
    rule table to the report so the presentation layer can show them.
    """

    kyc_required: bool = False
    aml_required: bool = False
    wallet_attribution: bool = False


class RequirementSet(BaseModel):
    """One side's requirements: plain fields, grouped fields, or both.

    Absent lists are treated as empty. `kind` resolves which shape is
    actually present so callers never need structural presence checks.
    """

    fields: list[str] = Field(
        default_factory=list,
        description="Ungrouped required raw field names.",
    )
    groups: list[RequirementGroup] = Field(
        default_factory=list,
        description="AND/OR requirement groups, keyed by position as 'group_<index>'.",
    )
    flags: Optional[VerificationFlags] = Field(
        default=None,
        description="KYC / AML / wallet attribution flags, passed through unmodified.",
    )

    @field_validator("fields", "groups", mode="before")
    @classmethod
    def none_as_empty(cls, value: object) -> object:
        return [] if value is None else value

    @property
    def kind(self) -> RequirementKind:
        if self.fields and self.groups:
            return RequirementKind.MIXED
        if self.groups:
            return RequirementKind.GROUPS
        if self.fields:
            return RequirementKind.FIELDS
        return RequirementKind.EMPTY

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "fields": ["full_name", "passportNumber"],
                    "groups": [
                        {"logic": "OR", "fields": ["date_of_birth + birthplace", "nationality"]}
                    ],
                    "flags": {
                        "kyc_required": True,
                        "aml_required": True,
                        "wallet_attribution": False,
                    },
                }
            ]
        }
    )


class GroupResult(BaseModel):
    """Satisfaction verdict for one requirement group."""

    logic: Logic
    fields: list[str] = Field(default_factory=list)
    satisfied: bool = Field(
        default=False,
        description=(
            "OR: any field has a pairing on the other side. "
            "AND: every field has a pairing on the other side."
        ),
    )
    matched_fields: list[str] = Field(
        default_factory=list,
        description=(
            "Group fields that have a pairing, in group order. Reported for "
            "unsatisfied AND groups too, so partial matches stay visible."
        ),
    )


class FieldPresence(BaseModel):
    """Whether a canonical field name occurs on each side."""

    in_applicant: bool = False
    in_counterparty: bool = False

    @property
    def on_both_sides(self) -> bool:
        return self.in_applicant and self.in_counterparty


class FieldMatch(BaseModel):
    """One recorded pairing between two raw field names."""

    field1: str
    field2: str
    match_type: MatchType


class ComparableSets(BaseModel):
    """Everything the presentation layer needs to render a two-sided comparison.

    Built fresh by compare.build_comparable_sets and entirely derived from its
    two input requirement sets.
    """

    model_config = ConfigDict(frozen=True)

    applicant_fields: list[str] = Field(
        default_factory=list,
        description="Applicant plain fields then group fields, duplicates removed.",
    )
    counterparty_fields: list[str] = Field(
        default_factory=list,
        description="Counterparty plain fields then group fields, duplicates removed.",
    )
    applicant_groups: list[tuple[str, GroupResult]] = Field(default_factory=list)
    counterparty_groups: list[tuple[str, GroupResult]] = Field(default_factory=list)
    field_pairings: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Applicant raw field -> matching counterparty raw fields.",
    )
    reverse_pairings: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Counterparty raw field -> matching applicant raw fields.",
    )
    total_matches: int = Field(default=0, ge=0)
    applicant_matched_fields: list[str] = Field(default_factory=list)
    counterparty_matched_fields: list[str] = Field(default_factory=list)
    field_presence_map: dict[str, FieldPresence] = Field(
        default_factory=dict,
        description=(
            "Canonical name -> presence per side. Combo fields contribute "
            "their whole string, not their parts."
        ),
    )

    @property
    def unmatched_applicant_fields(self) -> list[str]:
        return [field for field in self.applicant_fields if field not in self.field_pairings]

    @property
    def unmatched_counterparty_fields(self) -> list[str]:
        return [field for field in self.counterparty_fields if field not in self.reverse_pairings]

    @property
    def fields_on_both_sides(self) -> list[str]:
        return [name for name, presence in self.field_presence_map.items() if presence.on_both_sides]


class ComplianceReport(BaseModel):
    """Final output of the comparison pipeline.

    classify.assess_compliance fills everything except `explanation`;
    explain.format_report fills that afterwards, keeping classification
    separate from presentation.
    """

    status: ComplianceStatus
    direction: Direction = Direction.OUT
    sender_label: str = ""
    receiver_label: str = ""
    sender_fields: list[str] = Field(
        default_factory=list,
        description="Sorted canonical names on the sending side, combo fields expanded.",
    )
    receiver_fields: list[str] = Field(
        default_factory=list,
        description="Sorted canonical names on the receiving side, combo fields expanded.",
    )
    missing_fields: list[str] = Field(
        default_factory=list,
        description="Required by the receiver but not supplied by the sender.",
    )
    extra_fields: list[str] = Field(
        default_factory=list,
        description="Supplied by the sender beyond what the receiver requires.",
    )
    evidence: list[str] = Field(default_factory=list)
    comparable: ComparableSets = Field(default_factory=ComparableSets)
    applicant_flags: Optional[VerificationFlags] = None
    counterparty_flags: Optional[VerificationFlags] = None
    explanation: str = ""

    @property
    def is_match(self) -> bool:
        return self.status == ComplianceStatus.MATCH

    @property
    def is_overcompliant(self) -> bool:
        return self.status == ComplianceStatus.OVERCOMPLIANCE

    @property
    def is_undercompliant(self) -> bool:
        return self.status == ComplianceStatus.UNDERCOMPLIANCE

    @property
    def status_label(self) -> str:
        names = {
            ComplianceStatus.MATCH: "Match",
            ComplianceStatus.OVERCOMPLIANCE: "Overcompliance",
            ComplianceStatus.UNDERCOMPLIANCE: "Undercompliance",
        }
        return names.get(self.status, self.status.value)
