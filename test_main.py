"""
test_main.py - CLI tests.

Covers:
- run_comparison end to end from JSON files
- text and --json output
- --direction handling
- exit codes on bad input

Usage: python -m pytest test_main.py
"""

from __future__ import annotations

import json
import logging

import pytest

from main import main, run_comparison


@pytest.fixture(autouse=True)
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def requirement_files(tmp_path):
    applicant = tmp_path / "applicant.json"
    applicant.write_text(json.dumps({"required_fields": ["full_name"]}), encoding="utf-8")
    counterparty = tmp_path / "counterparty.json"
    counterparty.write_text(
        json.dumps({"fields": ["fullName", "dateOfBirth"]}),
        encoding="utf-8",
    )
    return str(applicant), str(counterparty)


def test_run_comparison(requirement_files):
    applicant, counterparty = requirement_files
    report = run_comparison(applicant, counterparty)
    assert report.is_undercompliant
    assert report.missing_fields == ["date_of_birth"]
    assert "Verdict: Undercompliance" in report.explanation


def test_cli_text_output(requirement_files, capsys):
    applicant, counterparty = requirement_files
    main(["--applicant", applicant, "--counterparty", counterparty])
    out = capsys.readouterr().out
    assert "UNDERCOMPLIANCE" in out
    assert "Verdict: Undercompliance" in out


def test_cli_json_output_with_direction(requirement_files, capsys):
    applicant, counterparty = requirement_files
    main(["-a", applicant, "-c", counterparty, "-d", "in", "--json"])
    payload = json.loads(capsys.readouterr().out)
    assert payload["status"] == "overcompliance"
    assert payload["direction"] == "IN"
    assert payload["roles"]["sender"] == "Counterparty"


def test_cli_missing_file_exits_with_error(requirement_files, tmp_path, capsys):
    applicant, _ = requirement_files
    with pytest.raises(SystemExit) as exc_info:
        main(["-a", applicant, "-c", str(tmp_path / "nope.json")])
    assert exc_info.value.code == 1
    assert "Error:" in capsys.readouterr().err


def test_cli_invalid_payload_exits_with_error(requirement_files, tmp_path, capsys):
    applicant, _ = requirement_files
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps(["full_name"]), encoding="utf-8")
    with pytest.raises(SystemExit) as exc_info:
        main(["-a", applicant, "-c", str(bad)])
    assert exc_info.value.code == 1


def test_cli_rejects_unknown_direction(requirement_files):
    applicant, counterparty = requirement_files
    with pytest.raises(SystemExit) as exc_info:
        main(["-a", applicant, "-c", counterparty, "-d", "sideways"])
    assert exc_info.value.code == 2
