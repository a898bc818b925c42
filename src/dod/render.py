# src/dod/render.py
"""
DoD renderer (deterministic).

Turns a validated DoDTable into Markdown. No network calls, no LLM calls: the
generator only proposes the table, this module decides how it reads.
"""
from __future__ import annotations

from typing import List

from dod.schema import DoDRow, DoDSection, DoDTable


def _escape_asterisks(text: str) -> str:
    # Keeps a literal "*" in a category from closing the bold marker early.
    return text.replace("*", "\\*")


def _fmt_row(row: DoDRow) -> List[str]:
    checkbox = "[x]" if row.checked else "[ ]"
    category = _escape_asterisks(row.category)

    if len(row.items) == 1:
        return [f"- {checkbox} **{category}:** {row.items[0]}"]

    lines = [f"- {checkbox} **{category}**"]
    lines.extend(f"  - {item}" for item in row.items)
    return lines


def _fmt_section(section: DoDSection) -> List[str]:
    lines = [f"## {section.title}", ""]
    for row in section.rows:
        lines.extend(_fmt_row(row))
    return lines


def render_dod_markdown(table: DoDTable) -> str:
    meta = table.metadata

    lines: List[str] = [
        f"# Definition of Done: {meta.ticketKey}",
        "",
        f"**Ticket Type:** {meta.ticketType}",
        f"**Generated:** {meta.generatedAt}",
        "",
    ]
    for section in table.sections:
        lines.extend(_fmt_section(section))
        lines.append("")

    return "\n".join(lines)
