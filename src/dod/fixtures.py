# src/dod/fixtures.py
"""
Fixture validator (entry point: validate-fixtures).

Loads the checked-in JSON fixtures, runs each one through the structural check
of its category and prints one status line per file plus a summary line.

Behavior:
- Files are processed one at a time, in the configured order.
- A missing/unreadable file (OSError) or malformed JSON (json.JSONDecodeError)
  is not recovered: the run stops with a traceback.
- An invalid fixture is a reported outcome, not an error. The exit code stays 0
  unless strict mode is enabled (DOD_FIXTURES_STRICT=1).
"""
from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Sequence, TextIO, Tuple

from dotenv import load_dotenv

from dod.config import load_settings
from dod.logging_utils import setup_logging
from dod.schema import Check, ValidationResult, check_jira_ticket, check_merge_request

logger = logging.getLogger("dod.fixtures")

VALID_MARK = "✓"
INVALID_MARK = "✗"
SUMMARY_LINE = "Validation complete!"


@dataclass(frozen=True)
class FixtureSet:
    label: str
    filenames: Tuple[str, ...]
    check: Check

    def __post_init__(self) -> None:
        if not self.filenames:
            raise ValueError(f"Fixture set '{self.label}' must list at least one file.")


@dataclass(frozen=True)
class FixtureReport:
    filename: str
    result: ValidationResult
    data: Any

    @property
    def valid(self) -> bool:
        return self.result.valid


JIRA_TICKET_FIXTURES = FixtureSet(
    label="Jira ticket",
    filenames=(
        "jira-backend-ticket.json",
        "jira-frontend-ticket.json",
        "jira-infrastructure-ticket.json",
        "jira-bug-ticket.json",
    ),
    check=check_jira_ticket,
)

MERGE_REQUEST_FIXTURES = FixtureSet(
    label="GitLab MR",
    filenames=(
        "gitlab-mr-passed.json",
        "gitlab-mr-failed.json",
        "gitlab-mr-running.json",
    ),
    check=check_merge_request,
)

DEFAULT_FIXTURE_SETS: Tuple[FixtureSet, ...] = (JIRA_TICKET_FIXTURES, MERGE_REQUEST_FIXTURES)


def load_fixture(fixtures_dir: Path, filename: str) -> Any:
    path = fixtures_dir / filename
    text = path.read_text(encoding="utf-8")
    return json.loads(text)


def validate_fixture_set(fixtures_dir: Path, fixture_set: FixtureSet) -> List[FixtureReport]:
    reports: List[FixtureReport] = []
    # OSError and JSONDecodeError propagate and stop the run
    for filename in fixture_set.filenames:
        data = load_fixture(fixtures_dir, filename)
        result = fixture_set.check(data)
        logger.info(
            "fixture_checked set=%s file=%s valid=%s errors=%d",
            fixture_set.label,
            filename,
            result.valid,
            len(result.errors),
        )
        reports.append(FixtureReport(filename=filename, result=result, data=data))
    return reports


def format_report(report: FixtureReport) -> List[str]:
    if report.valid:
        return [f"{VALID_MARK} {report.filename}: VALID"]

    # Invalid fixtures also dump their data so the broken field is visible
    lines = [f"{INVALID_MARK} {report.filename}: INVALID"]
    lines.extend(f"  - {reason}" for reason in report.result.errors)
    lines.append("  Data: " + json.dumps(report.data, indent=2, ensure_ascii=False))
    return lines


def run_validation(
    fixtures_dir: Path,
    fixture_sets: Sequence[FixtureSet] = DEFAULT_FIXTURE_SETS,
    out: Optional[TextIO] = None,
) -> List[FixtureReport]:
    """
    Validate every fixture set and print the report.
    Returns all reports in output order.
    """
    out = out or sys.stdout
    all_reports: List[FixtureReport] = []
    for idx, fixture_set in enumerate(fixture_sets):
        # Blank line between sets, none before the first
        prefix = "\n" if idx else ""
        print(f"{prefix}Validating {fixture_set.label} fixtures...\n", file=out)
        for report in validate_fixture_set(fixtures_dir, fixture_set):
            for line in format_report(report):
                print(line, file=out)
            all_reports.append(report)

    print(f"\n{SUMMARY_LINE}", file=out)
    return all_reports


def main() -> int:
    load_dotenv()
    settings = load_settings()
    setup_logging(level=settings.log_level, log_file=settings.log_file)

    logger.info("fixtures_dir=%s strict=%s", settings.fixtures_dir, settings.fixtures_strict)
    reports = run_validation(settings.fixtures_dir)

    # Invalid fixtures are a report, not a failure, unless strict mode is on
    invalid = [r.filename for r in reports if not r.valid]
    if invalid:
        logger.warning("invalid fixtures: %s", ", ".join(invalid))
        if settings.fixtures_strict:
            return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
