"""Core domain models for the buffer engine and question bank."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class Cursor:
    """Cursor position inside a buffer."""

    row: int = 0
    col: int = 0


@dataclass(frozen=True)
class Buffer:
    """Immutable text buffer: ordered lines plus cursor.

    `row` may sit one step outside the lines (-1 or len(lines)) after a jump
    to the top or bottom of the file; every other edit keeps it in range.
    """

    lines: tuple[str, ...]
    cursor: Cursor = Cursor()

    @classmethod
    def from_lines(cls, lines: Iterable[str], row: int = 0, col: int = 0) -> Buffer:
        """Build a buffer, keeping at least one (possibly empty) line."""
        items = tuple(str(line) for line in lines)
        return cls(lines=items or ("",), cursor=Cursor(row=row, col=col))


@dataclass
class Register:
    """Single unnamed register holding the last yanked line."""

    line: str | None = None

    def clear(self) -> None:
        """Forget the yanked line."""
        self.line = None


@dataclass(frozen=True)
class Question:
    """One prompt with its accepted canonical commands."""

    id: str
    prompt: str
    expected: tuple[str, ...]


@dataclass(frozen=True)
class QuestionBank:
    """Loaded question catalog and the sample text every question starts from."""

    sample_text: tuple[str, ...]
    questions: tuple[Question, ...]


@dataclass(frozen=True)
class PlayerStats:
    """Aggregate statistics for one player."""

    username: str
    times_played: int
    highest_score: int
