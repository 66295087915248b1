"""Application service for timed arcade rounds and player statistics."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from .content_loader import load_question_bank
from .interpreter import apply_keys
from .models import Buffer, PlayerStats, Question, QuestionBank, Register
from .progress import ProgressStore
from .questions import is_correct, pick_random

DEFAULT_DURATION_SECONDS = 60.0
HINT_COMMAND = "@@"
LEADERBOARD_SIZE = 10

Clock = Callable[[], float]

logger = logging.getLogger(__name__)


def points_for(correct: bool, used_hint: bool) -> int:
    """Score one answer: a hinted one earns nothing."""
    if not correct:
        return 0
    return 0 if used_hint else 1


@dataclass(frozen=True)
class RoundResult:
    """Outcome of one submitted input."""

    kind: str
    command: str
    buffer: Buffer
    points: int
    question: Question
    hint: str = ""


class GameSession:
    """One timed play session over a shuffled list of questions."""

    def __init__(
        self,
        username: str,
        questions: Sequence[Question],
        sample_text: Sequence[str],
        register: Register,
        duration: float = DEFAULT_DURATION_SECONDS,
        clock: Clock = time.monotonic,
    ) -> None:
        if not questions:
            raise ValueError("A session needs at least one question.")
        self.username = username
        self.questions = list(questions)
        self.sample_text = tuple(sample_text)
        self.register = register
        self.register.clear()
        self.duration = duration
        self._clock = clock
        self._deadline = clock() + duration
        self.score = 0
        self.index = 0
        self.answered = 0
        self.finished = False
        self.hint_used = False
        self.stats: PlayerStats | None = None
        self.buffer = self._fresh_buffer()

    def _fresh_buffer(self) -> Buffer:
        return Buffer.from_lines(self.sample_text)

    @property
    def current_question(self) -> Question:
        return self.questions[self.index]

    def time_left(self) -> float:
        """Seconds remaining, never negative."""
        return max(0.0, self._deadline - self._clock())

    def timed_out(self) -> bool:
        return self.time_left() <= 0

    def finish(self) -> None:
        self.finished = True

    def submit(self, raw_input: str) -> RoundResult:
        """Handle one typed input for the current question."""
        if self.finished:
            raise RuntimeError("Session is already finished.")
        question = self.current_question
        typed = raw_input.strip()

        if self.timed_out():
            # Too late: the input is neither applied nor judged.
            self.finish()
            return RoundResult(kind="timeout", command=typed, buffer=self.buffer, points=0, question=question)

        if not typed:
            return RoundResult(kind="ignored", command="", buffer=self.buffer, points=0, question=question)

        if typed == HINT_COMMAND:
            self.hint_used = True
            return RoundResult(
                kind="hint",
                command=typed,
                buffer=self.buffer,
                points=0,
                question=question,
                hint=question.expected[0],
            )

        result = apply_keys(self.buffer, typed, self.register)
        self.buffer = result.buffer
        correct = is_correct(question, result.command) or is_correct(question, typed)
        if not correct:
            return RoundResult(kind="wrong", command=result.command, buffer=self.buffer, points=0, question=question)

        points = points_for(True, self.hint_used)
        self.score += points
        self.answered += 1
        self._advance()
        return RoundResult(kind="correct", command=result.command, buffer=result.buffer, points=points, question=question)

    def _advance(self) -> None:
        """Move to the next question, wrapping around, on a fresh buffer."""
        self.index = (self.index + 1) % len(self.questions)
        self.hint_used = False
        self.buffer = self._fresh_buffer()


class GameService:
    """Coordinates question content, sessions and persisted statistics."""

    def __init__(
        self,
        db_path: Path | str,
        duration: float = DEFAULT_DURATION_SECONDS,
        bank: QuestionBank | None = None,
        clock: Clock = time.monotonic,
    ) -> None:
        """Initialize service with database path."""
        self.bank = bank if bank is not None else load_question_bank()
        self.progress = ProgressStore(db_path)
        self.duration = duration
        self.register = Register()
        self._clock = clock

    def start_session(self, username: str, count: int | None = None) -> GameSession:
        """Start a new session with freshly shuffled questions and an empty register."""
        name = username.strip()
        if not name:
            raise ValueError("Username is required.")
        questions = pick_random(count, questions=self.bank.questions)
        logger.debug("Starting session for %s with %d questions", name, len(questions))
        return GameSession(
            username=name,
            questions=questions,
            sample_text=self.bank.sample_text,
            register=self.register,
            duration=self.duration,
            clock=self._clock,
        )

    def finish_session(self, session: GameSession) -> PlayerStats:
        """Finish a session and record its score once."""
        session.finish()
        if session.stats is None:
            logger.debug("Session for %s finished with score %d", session.username, session.score)
            session.stats = self.progress.record_game(session.username, session.score)
        return session.stats

    def leaderboard(self, limit: int = LEADERBOARD_SIZE) -> list[PlayerStats]:
        return self.progress.top_players(limit)

    def player_stats(self, username: str) -> PlayerStats | None:
        return self.progress.get_player(username)

    def close(self) -> None:
        """Close resources."""
        self.progress.close()

    def __del__(self) -> None:  # pragma: no cover
        """Best-effort cleanup for test/process teardown."""
        try:
            self.close()
        except Exception:
            pass
