"""
api.py - FastAPI HTTP layer for the travel rule comparison.

Endpoints:
  - GET  /health
  - GET  /fields     (field dictionary listing)
  - POST /normalize  (normalize a list of raw field names)
  - POST /compare    (two requirement payloads + direction -> report)

No normalization/matching/classification logic is implemented here.
"""

from __future__ import annotations

from typing import Any, Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

import config
from classify import assess_compliance
from explain import format_report, format_report_json
from extract import parse_requirements
from field_dictionary import FIELD_DICTIONARY, get_normalized_fields
from logging_config import get_logger, setup_logging
from models import Direction
from normalize import normalize_fields

logger = get_logger("travel-rule-api")

app = FastAPI(
    title="Travel Rule Comparison API",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


class CompareRequest(BaseModel):
    """Both sides' requirements plus the transfer direction."""

    applicant: Optional[dict[str, Any]] = Field(
        default=None,
        description="Applicant requirements: 'fields'/'groups' or a rule block.",
    )
    counterparty: Optional[dict[str, Any]] = Field(
        default=None,
        description="Counterparty requirements: 'fields'/'groups' or a rule block.",
    )
    direction: Direction = Direction.OUT
    include_text: bool = Field(
        default=False,
        description="Also return the terminal-style text explanation.",
    )


class NormalizeRequest(BaseModel):
    fields: list[str] = Field(default_factory=list)


@app.get("/health")
def health() -> dict[str, str]:
    """Service health check."""
    return {"status": "ok"}


@app.get("/fields")
def list_fields() -> dict[str, Any]:
    """Return the field dictionary: canonical names and alias mapping."""
    return {
        "canonical": get_normalized_fields(),
        "aliases": dict(FIELD_DICTIONARY),
    }


@app.post("/normalize")
def normalize_endpoint(request: NormalizeRequest) -> list[dict[str, Any]]:
    """Normalize raw field names, reporting combo parts."""
    return [item.model_dump() for item in normalize_fields(request.fields)]


@app.post("/compare")
def compare_endpoint(request: CompareRequest) -> dict[str, Any]:
    """Run the comparison pipeline and return structured JSON."""
    missing_sides = [
        side
        for side, payload in (("applicant", request.applicant), ("counterparty", request.counterparty))
        if payload is None
    ]
    if missing_sides:
        raise HTTPException(
            status_code=400,
            detail=f"Cannot compare: no requirements for {', '.join(missing_sides)}.",
        )

    try:
        applicant = parse_requirements(request.applicant)
        counterparty = parse_requirements(request.counterparty)
        report = assess_compliance(applicant, counterparty, request.direction)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:
        logger.error(
            "api_compare_error | error_type=%s | error=%s",
            type(exc).__name__,
            exc,
            exc_info=True,
        )
        raise HTTPException(
            status_code=500,
            detail="Unexpected server error while comparing requirements.",
        ) from exc

    payload = format_report_json(report)
    if request.include_text:
        payload["explanation"] = format_report(report)
    if config.DEBUG:
        payload["debug_trace"] = {
            "applicant_kind": applicant.kind.value,
            "counterparty_kind": counterparty.kind.value,
            "dictionary_size": len(FIELD_DICTIONARY),
        }
    return payload


if __name__ == "__main__":
    setup_logging()
    uvicorn.run("api:app", host=config.HOST, port=config.PORT, reload=False)
