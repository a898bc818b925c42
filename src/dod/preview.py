# src/dod/preview.py
"""
DoD preview (entry point: test-fixture).

Loads the backend ticket fixture, runs generate_dod_from_input() on it and
prints the first 500 characters of the result. Errors returned by the
generator are printed and do not change the exit code; an exception is
printed to stderr and exits with 1.
"""
from __future__ import annotations

import logging
import sys
from typing import Any, Optional, TextIO

from dotenv import load_dotenv

from dod.config import Settings, load_settings
from dod.fixtures import load_fixture
from dod.generate import generate_dod_from_input
from dod.logging_utils import setup_logging

logger = logging.getLogger("dod.preview")

PREVIEW_FIXTURE = "jira-backend-ticket.json"
PREVIEW_CHARS = 500
RULE = "─" * 80


def preview_fixture(
    settings: Settings,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
    client: Optional[Any] = None,
) -> int:
    out = out or sys.stdout
    err = err or sys.stderr
    ticket = load_fixture(settings.fixtures_dir, PREVIEW_FIXTURE)

    print("Testing DoD generation with backend ticket fixture...\n", file=out)
    # A non-object fixture still goes to the generator, which reports it as invalid input.
    fields = ticket if isinstance(ticket, dict) else {}
    print(f"Ticket: {fields.get('key')} - {fields.get('summary')}\n", file=out)

    try:
        result = generate_dod_from_input(
            {"ticket_json": ticket, "type": "backend"},
            settings=settings,
            client=client,
        )
    except Exception as e:
        logger.debug("DoD generation failed for %s", PREVIEW_FIXTURE, exc_info=True)
        print(f"✗ Failed to generate DoD: {e}", file=err)
        return 1

    if result.errors:
        print(f"Errors: {result.errors}", file=out)
        return 0

    print("✓ DoD generated successfully!\n", file=out)
    print(f"Preview (first {PREVIEW_CHARS} characters):", file=out)
    print(RULE, file=out)
    print(result.dod[:PREVIEW_CHARS] + "...", file=out)
    print(RULE, file=out)
    print(f"\nTotal length: {len(result.dod)} characters", file=out)
    return 0


def main() -> int:
    load_dotenv()
    settings = load_settings()
    setup_logging(level=settings.log_level, log_file=settings.log_file)
    return preview_fixture(settings)


if __name__ == "__main__":
    raise SystemExit(main())
