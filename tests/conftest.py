from __future__ import annotations

import json
import logging
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest

REPO_FIXTURES = Path(__file__).resolve().parents[1] / "fixtures"


@pytest.fixture(autouse=True)
def _restore_root_logging():
    # Entry points call setup_logging(); drop whatever handlers a test installed.
    root = logging.getLogger()
    before, level = list(root.handlers), root.level
    yield
    for handler in [h for h in root.handlers if h not in before]:
        root.removeHandler(handler)
        handler.close()
    root.setLevel(level)


def write_json(directory: Path, filename: str, data: Any) -> Path:
    path = directory / filename
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class FakeCompletions:
    def __init__(self, content: Optional[str] = None, error: Optional[Exception] = None) -> None:
        self.content = content
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        usage = SimpleNamespace(prompt_tokens=10, completion_tokens=20, total_tokens=30)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)], usage=usage)


class FakeClient:
    """Stands in for openai.OpenAI: only chat.completions.create is used."""

    def __init__(self, content: Optional[str] = None, error: Optional[Exception] = None) -> None:
        self.completions = FakeCompletions(content, error)
        self.chat = SimpleNamespace(completions=self.completions)


@pytest.fixture
def ticket() -> Dict[str, Any]:
    return {
        "key": "BACK-1",
        "summary": "Add pagination to the orders API",
        "description": "Cursor pagination for GET /api/orders.",
        "labels": ["backend"],
        "issueType": "Story",
        "linkedIssues": ["FRONT-12"],
        "acceptanceCriteria": ["limit and cursor are accepted"],
    }


@pytest.fixture
def merge_request() -> Dict[str, Any]:
    return {
        "title": "BACK-1: pagination",
        "ciStatus": "passed",
        "changedFiles": ["src/orders/api.py"],
        "webUrl": "https://gitlab.example.com/shop/orders/-/merge_requests/101",
    }


@pytest.fixture
def sections_reply() -> Dict[str, Any]:
    return {
        "sections": [
            {
                "title": "Acceptance Criteria",
                "rows": [
                    {"category": "Acceptance Criteria", "items": ["limit and cursor are accepted"], "checked": False}
                ],
            },
            {
                "title": "Testing",
                "rows": [
                    {"category": "Unit Tests", "items": ["Cover cursor encoding", "Cover page limits"], "checked": False}
                ],
            },
        ]
    }
