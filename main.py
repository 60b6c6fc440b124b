"""
main.py - CLI orchestration for the travel rule comparison.

This module is orchestration-only:
1. extract (load both requirement files)
2. classify (builds comparable sets internally)
3. explain
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from typing import Sequence

from classify import assess_compliance
from explain import format_report, format_report_json
from extract import load_requirements_file
from logging_config import get_logger, setup_logging
from models import ComplianceReport, Direction

logger = get_logger("travel-rule-cli")


def run_comparison(
    applicant_path: str,
    counterparty_path: str,
    direction: Direction | str = Direction.OUT,
) -> ComplianceReport:
    """Load both requirement files, classify, and attach the text explanation."""
    pipeline_start = time.time()

    logger.info("%s", "─" * 50)
    logger.info(
        "pipeline_start | applicant=%s | counterparty=%s | direction=%s",
        applicant_path,
        counterparty_path,
        direction.value if isinstance(direction, Direction) else direction,
    )
    logger.info("%s", "─" * 50)

    # Stage 1: extract.
    stage_start = time.time()
    applicant = load_requirements_file(applicant_path)
    counterparty = load_requirements_file(counterparty_path)
    extract_time = time.time() - stage_start
    logger.info(
        "pipeline_stage | stage=1/3 | name=extract | status=complete | applicant_kind=%s | counterparty_kind=%s | duration_s=%.3f",
        applicant.kind.value,
        counterparty.kind.value,
        extract_time,
    )

    # Stage 2: classify.
    stage_start = time.time()
    report = assess_compliance(applicant, counterparty, direction)
    classify_time = time.time() - stage_start
    logger.info(
        "pipeline_stage | stage=2/3 | name=classify | status=complete | verdict=%s | total_matches=%s | duration_s=%.3f",
        report.status.value,
        report.comparable.total_matches,
        classify_time,
    )

    # Stage 3: explain.
    stage_start = time.time()
    report.explanation = format_report(report)
    explain_time = time.time() - stage_start

    logger.info(
        "pipeline_complete | total_duration_s=%.3f | extract_s=%.3f | classify_s=%.3f | explain_s=%.3f",
        time.time() - pipeline_start,
        extract_time,
        classify_time,
        explain_time,
    )
    return report


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="travel-rule-compare",
        description=(
            "Travel Rule field comparison\n"
            "Checks whether the sender's KYC/AML fields meet, exceed, or fall "
            "short of the receiver's requirements."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Requirement files are JSON objects with either 'fields'/'groups' or\n"
            "'required_fields'/'requirement_groups' keys.\n\n"
            "Examples:\n"
            "  %(prog)s --applicant deu.json --counterparty zaf.json\n"
            "  %(prog)s -a deu.json -c zaf.json --direction IN --json\n"
        ),
    )
    parser.add_argument(
        "--applicant",
        "-a",
        type=str,
        required=True,
        help="Path to the applicant's requirements JSON file (required)",
    )
    parser.add_argument(
        "--counterparty",
        "-c",
        type=str,
        required=True,
        help="Path to the counterparty's requirements JSON file (required)",
    )
    parser.add_argument(
        "--direction",
        "-d",
        type=str.upper,
        choices=[direction.value for direction in Direction],
        default=Direction.OUT.value,
        help="OUT: applicant sends (default). IN: counterparty sends.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose (DEBUG-level) logging",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output results as JSON instead of formatted text",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        help="Output logs as JSON lines (for production/log aggregation)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(
        level=logging.DEBUG if args.verbose else None,
        json_format=True if args.log_json else None,
    )

    try:
        report = run_comparison(args.applicant, args.counterparty, args.direction)
        if args.json:
            print(json.dumps(format_report_json(report), indent=2))
        else:
            print(report.explanation)
    except FileNotFoundError as exc:
        logger.error("cli_error | type=FileNotFoundError | error=%s", exc)
        print(f"\nError: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    except ValueError as exc:
        logger.error("cli_error | type=ValueError | error=%s", exc)
        print(f"\nError: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        raise SystemExit(130)


if __name__ == "__main__":
    main()
