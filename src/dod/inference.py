# src/dod/inference.py
"""
Ticket type inference (deterministic).

Priority: explicit type > labels > keyword score over description/summary/issue
type > "backend". Only used when the caller did not say which kind of ticket it is.
"""
from __future__ import annotations

from typing import List, Optional

from dod.schema import JiraTicket

DEFAULT_TICKET_TYPE = "backend"

# Checked label by label, after the exact type names.
LABEL_VARIANTS = {
    "backend": ["back-end", "api", "server", "database", "db"],
    "frontend": ["front-end", "ui", "ux", "client", "web"],
    "infrastructure": ["infra", "devops", "deployment", "ci/cd", "cicd"],
}

KEYWORDS = {
    "backend": [
        "api", "endpoint", "rest", "graphql", "database", "sql",
        "migration", "server", "backend", "microservice", "service",
    ],
    "frontend": [
        "ui", "ux", "component", "react", "vue", "angular", "frontend",
        "button", "form", "page", "view", "css", "html", "styling",
    ],
    "infrastructure": [
        "infrastructure", "deployment", "ci/cd", "pipeline", "docker",
        "kubernetes", "k8s", "terraform", "ansible", "devops",
        "monitoring", "logging",
    ],
}

# Tie-break order.
_ORDER = ("backend", "frontend", "infrastructure")


def type_from_labels(labels: List[str]) -> Optional[str]:
    normalized = [label.lower() for label in labels]

    for ttype in _ORDER:
        if ttype in normalized:
            return ttype

    for label in normalized:
        for ttype in _ORDER:
            if any(variant in label for variant in LABEL_VARIANTS[ttype]):
                return ttype
    return None


def type_from_text(description: str, summary: str, issue_type: str) -> Optional[str]:
    # Plain substring matching: "ui" also hits "build", as with the label variants.
    text = f"{description} {summary} {issue_type}".lower()
    scores = {ttype: sum(1 for kw in KEYWORDS[ttype] if kw in text) for ttype in _ORDER}

    best = max(scores.values())
    if best == 0:
        return None
    for ttype in _ORDER:
        if scores[ttype] == best:
            return ttype
    return None


def infer_ticket_type(ticket: JiraTicket, explicit_type: Optional[str] = None) -> str:
    if explicit_type:
        return explicit_type

    return (
        type_from_labels(ticket.labels)
        or type_from_text(ticket.description, ticket.summary, ticket.issueType)
        or DEFAULT_TICKET_TYPE
    )
