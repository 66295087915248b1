"""Load the declarative question bank from bundled JSON resources."""

from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any

from .models import Question, QuestionBank

CONTENT_PACKAGE = "vimarcade.content"
CONTENT_FILE = "questions.json"

logger = logging.getLogger(__name__)


def _question_from_dict(raw: dict[str, Any]) -> Question:
    """Build a question from raw JSON content."""
    question_id = str(raw.get("id", "")).strip()
    if not question_id:
        raise ValueError("Question is missing an id.")
    expected = tuple(str(value).strip() for value in raw.get("expected", []) if str(value).strip())
    if not expected:
        raise ValueError(f"Question '{question_id}' has no valid expected answers.")
    return Question(id=question_id, prompt=str(raw.get("prompt", "")), expected=expected)


def _bank_from_dict(raw: dict[str, Any]) -> QuestionBank:
    """Build and validate a question bank from raw JSON content."""
    questions = tuple(_question_from_dict(item) for item in raw.get("questions", []))
    if not questions:
        raise ValueError("Question bank has no questions.")
    seen: set[str] = set()
    for question in questions:
        if question.id in seen:
            raise ValueError(f"Duplicate question id: {question.id}")
        seen.add(question.id)

    sample_text = tuple(str(line) for line in raw.get("sample_text", [])) or ("",)
    return QuestionBank(sample_text=sample_text, questions=questions)


def load_question_bank() -> QuestionBank:
    """Load the bundled question bank."""
    entry = resources.files(CONTENT_PACKAGE).joinpath(CONTENT_FILE)
    bank = _bank_from_dict(json.loads(entry.read_text(encoding="utf-8-sig")))
    logger.debug("Loaded %d bundled questions", len(bank.questions))
    return bank


def load_question_bank_from_file(path: Path | str) -> QuestionBank:
    """Load a question bank from a JSON file for tests/tools."""
    raw = json.loads(Path(path).read_text(encoding="utf-8-sig"))
    if not isinstance(raw, dict):
        raise ValueError("Question bank root must be a JSON object.")
    bank = _bank_from_dict(raw)
    logger.debug("Loaded %d questions from %s", len(bank.questions), path)
    return bank
