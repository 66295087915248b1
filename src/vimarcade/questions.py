"""Question sampling and answer checking."""

from __future__ import annotations

import random
from collections.abc import Sequence
from functools import lru_cache

from .content_loader import load_question_bank
from .models import Question


@lru_cache(maxsize=1)
def bundled_questions() -> tuple[Question, ...]:
    """Return the bundled catalog, loaded once per process."""
    return load_question_bank().questions


def pick_random(
    count: int | None = None,
    *,
    questions: Sequence[Question] | None = None,
    rng: random.Random | None = None,
) -> list[Question]:
    """Return up to `count` questions sampled uniformly without replacement.

    `count=None` returns the whole catalog shuffled.
    """
    pool = list(bundled_questions() if questions is None else questions)
    size = len(pool) if count is None else max(0, min(count, len(pool)))
    return (rng or random).sample(pool, size)


def is_correct(question: Question, command: str) -> bool:
    """Return whether a command string is one of the accepted answers."""
    return command in question.expected
