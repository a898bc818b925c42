from __future__ import annotations

import pytest

from dod.inference import infer_ticket_type, type_from_labels, type_from_text
from dod.schema import JiraTicket


def _ticket(labels=(), description="", summary="", issue_type="Task"):
    return JiraTicket.model_validate(
        {
            "key": "X-1",
            "summary": summary,
            "description": description,
            "labels": list(labels),
            "issueType": issue_type,
            "linkedIssues": [],
        }
    )


def test_explicit_type_wins():
    assert infer_ticket_type(_ticket(labels=["frontend"]), "infrastructure") == "infrastructure"


@pytest.mark.parametrize(
    "labels, expected",
    [
        (["Frontend"], "frontend"),
        (["infrastructure", "backend"], "backend"),
        (["back-end"], "backend"),
        (["devops"], "infrastructure"),
        (["client-side"], "frontend"),
        (["misc"], None),
    ],
)
def test_type_from_labels(labels, expected):
    assert type_from_labels(labels) == expected


def test_type_from_text_scores():
    assert type_from_text("Deploy with docker and kubernetes", "", "Task") == "infrastructure"
    assert type_from_text("New React component with a form", "", "Story") == "frontend"
    assert type_from_text("", "", "") is None


def test_type_from_text_tie_prefers_backend():
    # one backend keyword ("sql") and one frontend keyword ("css")
    assert type_from_text("sql css", "", "") == "backend"


def test_labels_before_text():
    ticket = _ticket(labels=["web"], description="database migration for the server")
    assert infer_ticket_type(ticket) == "frontend"


def test_default_is_backend():
    assert infer_ticket_type(_ticket(labels=["misc"], description="tidy", summary="", issue_type="")) == "backend"
