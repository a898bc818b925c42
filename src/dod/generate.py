# src/dod/generate.py
"""
DoD generation entry point: generate_dod_from_input().

Flow:
1) Validate the input envelope (ticket_json + optional type).
2) Resolve the ticket type: explicit > configured default > inferred.
3) Ask the LLM gateway for checklist sections (JSON only).
4) Validate the reply with Pydantic (DoDReply) before using any of it.
5) Attach metadata and render Markdown.

Input problems and replies that break the schema are returned in
DoDResult.errors. A reply that is not JSON at all, and gateway or
transport failures (openai errors, missing API_KEY), are raised to the caller.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from dod.config import Settings, load_settings
from dod.inference import infer_ticket_type
from dod.llm import chat_json
from dod.render import render_dod_markdown
from dod.schema import (
    DoDInput,
    DoDMetadata,
    DoDReply,
    DoDTable,
    JiraTicket,
    check_dod_input,
    format_validation_errors,
)

logger = logging.getLogger("dod.generate")


@dataclass(frozen=True)
class DoDResult:
    dod: str
    errors: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors


SYSTEM_PROMPT = """You are assisting an engineering team with Definition of Done checklists.
Rules:
- Base every item on the ticket content and the ticket type; do not invent features.
- Start with an "Acceptance Criteria" section: one row per acceptance criterion,
  or a single row asking for manual review when none are given.
- Add testing, documentation and type-specific sections, and finish with a reviewer checklist.
- Every row starts unchecked.
Return ONLY valid JSON matching the requested schema. No extra text.
"""


def build_user_prompt(ticket: JiraTicket, ticket_type: str) -> str:
    criteria = ticket.acceptanceCriteria or []
    return f"""
Produce the Definition of Done for the following {ticket_type} ticket.

SCHEMA:
{{
  "sections": [
    {{"title": string, "rows": [{{"category": string, "items": [string], "checked": false}}]}}
  ]
}}

TICKET:
- key: {ticket.key}
- issue type: {ticket.issueType}
- summary: {ticket.summary}
- labels: {ticket.labels}
- linked issues: {ticket.linkedIssues}
- acceptance criteria: {criteria}
- description: {ticket.description}
"""


def generate_dod_from_input(
    input: Dict[str, Any],
    *,
    settings: Optional[Settings] = None,
    client: Optional[Any] = None,
) -> DoDResult:
    # 1) Input envelope: reported, never raised
    check = check_dod_input(input)
    if not check.valid:
        return DoDResult("", [f"Invalid input: {', '.join(check.errors)}"])

    # 2) Ticket type: explicit > configured default > inferred
    settings = settings or load_settings()
    parsed = DoDInput.model_validate(input)
    ticket = parsed.ticket_json
    ticket_type = infer_ticket_type(ticket, parsed.type or settings.default_ticket_type)

    # 3) One gateway call; run_id ties the log lines of this call together
    run_id = str(uuid.uuid4())
    logger.info("generate_dod ticket=%s type=%s run_id=%s", ticket.key, ticket_type, run_id)

    raw = chat_json(
        model=settings.model,
        system=SYSTEM_PROMPT,
        user=build_user_prompt(ticket, ticket_type),
        temperature=0.2,
        operation="generate_dod",
        run_id=run_id,
        client=client,
    )

    # 4) The reply is untrusted until it passes the schema
    try:
        reply = DoDReply.model_validate(raw)
    except ValidationError as e:
        reasons = format_validation_errors(e)
        logger.warning("generate_dod invalid_reply ticket=%s errors=%s", ticket.key, reasons)
        return DoDResult("", [f"Generator returned an invalid DoD table: {'; '.join(reasons)}"])

    # 5) Metadata is ours, not the model's
    table = DoDTable(
        sections=reply.sections,
        metadata=DoDMetadata(
            ticketKey=ticket.key,
            ticketType=ticket_type,
            generatedAt=datetime.now(timezone.utc).isoformat(),
        ),
    )
    return DoDResult(render_dod_markdown(table), [])
