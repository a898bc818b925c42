from __future__ import annotations

from dod.render import render_dod_markdown
from dod.schema import DoDTable


def _table(rows, title="Testing"):
    return DoDTable.model_validate(
        {
            "sections": [{"title": title, "rows": rows}],
            "metadata": {"ticketKey": "BACK-1", "ticketType": "backend", "generatedAt": "2026-01-01T00:00:00+00:00"},
        }
    )


def test_header_and_single_item_row():
    md = render_dod_markdown(_table([{"category": "Unit Tests", "items": ["Cover paging"], "checked": False}]))
    assert md.splitlines() == [
        "# Definition of Done: BACK-1",
        "",
        "**Ticket Type:** backend",
        "**Generated:** 2026-01-01T00:00:00+00:00",
        "",
        "## Testing",
        "",
        "- [ ] **Unit Tests:** Cover paging",
    ]
    assert md.endswith("Cover paging\n")


def test_multi_item_row_and_checked():
    md = render_dod_markdown(_table([{"category": "Docs", "items": ["README", "API docs"], "checked": True}]))
    assert "- [x] **Docs**\n  - README\n  - API docs" in md


def test_asterisks_in_category_are_escaped():
    md = render_dod_markdown(_table([{"category": "a*b", "items": ["x"], "checked": False}]))
    assert "**a\\*b:** x" in md
