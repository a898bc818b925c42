# src/dod/schema.py
"""
Record shapes (schema) and structural predicates.

Purpose:
- Describe the JSON shapes the tooling consumes: Jira tickets, GitLab merge
  requests, DoD generation input, and the DoD table returned by the generator.
- Turn each shape into a check that returns a ValidationResult (valid + reasons)
  and a plain boolean predicate on top of it.

Design principles:
- Pydantic models with strict field types: 1 is not a string and "true" is not a bool.
- Unknown keys are ignored, only the listed fields are checked.
- Checks never raise on bad data; they report it.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, List, Literal, Type

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, ValidationError

TicketType = Literal["backend", "frontend", "infrastructure"]
CIStatus = Literal["passed", "failed", "running", "pending", "canceled"]

TICKET_TYPES = ("backend", "frontend", "infrastructure")


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore")


class JiraTicket(_Record):
    key: StrictStr
    summary: StrictStr
    description: StrictStr
    labels: List[StrictStr]
    issueType: StrictStr
    linkedIssues: List[StrictStr]

    # May be absent; an explicit null is rejected (no None in the annotation).
    acceptanceCriteria: List[StrictStr] = Field(None, description="Optional list of acceptance criteria.")


class MergeRequest(_Record):
    title: StrictStr
    ciStatus: CIStatus
    changedFiles: List[StrictStr]
    webUrl: StrictStr


class DoDInput(_Record):
    ticket_json: JiraTicket

    # Same rule as acceptanceCriteria: absent is fine, null is not.
    type: TicketType = Field(None, description="Ticket type; inferred when absent.")


class DoDRow(_Record):
    category: StrictStr
    items: List[StrictStr]
    checked: StrictBool


class DoDSection(_Record):
    title: StrictStr
    rows: List[DoDRow]


class DoDMetadata(_Record):
    ticketKey: StrictStr
    ticketType: StrictStr
    generatedAt: StrictStr


class DoDTable(_Record):
    sections: List[DoDSection]
    metadata: DoDMetadata


# Contract for the generator gateway reply: sections only, metadata is ours.
class DoDReply(_Record):
    sections: List[DoDSection] = Field(..., min_length=1, description="Ordered checklist sections.")


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.valid


def format_validation_errors(exc: ValidationError) -> List[str]:
    """Flatten a pydantic ValidationError into 'path: message' strings."""
    out: List[str] = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "<root>"
        out.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return out


def _check(model: Type[BaseModel], value: Any) -> ValidationResult:
    if not isinstance(value, dict):
        return ValidationResult(False, [f"expected a JSON object, got {type(value).__name__}"])
    try:
        model.model_validate(value)
    except ValidationError as e:
        return ValidationResult(False, format_validation_errors(e))
    return ValidationResult(True, [])


def check_jira_ticket(value: Any) -> ValidationResult:
    return _check(JiraTicket, value)


def check_merge_request(value: Any) -> ValidationResult:
    return _check(MergeRequest, value)


def check_dod_input(value: Any) -> ValidationResult:
    return _check(DoDInput, value)


def check_dod_table(value: Any) -> ValidationResult:
    return _check(DoDTable, value)


def is_jira_ticket(value: Any) -> bool:
    return check_jira_ticket(value).valid


def is_merge_request(value: Any) -> bool:
    return check_merge_request(value).valid


def is_dod_input(value: Any) -> bool:
    return check_dod_input(value).valid


def is_dod_table(value: Any) -> bool:
    return check_dod_table(value).valid


Check = Callable[[Any], ValidationResult]
