"""Editing primitives over immutable buffers.

Each primitive returns a new `Buffer`; only `yank_line` and `paste_below`
touch the register. A cursor parked above or below the text by `go_top` or
`go_bottom` is anchored to the nearest real line before other edits; yank
and paste read it as an empty row above or below the text.
"""

from __future__ import annotations

import re
from dataclasses import replace

from .models import Buffer, Cursor, Register

_WORD_CHAR = re.compile(r"\w", re.ASCII)
_WORD_SPAN = re.compile(r"\W*\w+\W*", re.ASCII)
_LAST_WORD_CHAR = re.compile(r"\w(?=\W*$)", re.ASCII)


def clamp(value: int, low: int, high: int) -> int:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def _last_col(line: str) -> int:
    return max(0, len(line) - 1)


def _anchor(buf: Buffer) -> Buffer:
    """Move a transient off-buffer cursor row back onto the nearest line."""
    row = clamp(buf.cursor.row, 0, len(buf.lines) - 1)
    if row == buf.cursor.row:
        return buf
    return replace(buf, cursor=Cursor(row=row, col=0))


def _current_line(buf: Buffer) -> str:
    """Return the line under the cursor, or "" while parked off the buffer."""
    if 0 <= buf.cursor.row < len(buf.lines):
        return buf.lines[buf.cursor.row]
    return ""


def _with_line(buf: Buffer, text: str) -> Buffer:
    lines = list(buf.lines)
    lines[buf.cursor.row] = text
    return replace(buf, lines=tuple(lines))


def move_cursor(buf: Buffer, d_row: int, d_col: int) -> Buffer:
    """Shift the cursor, clamping row to the lines and col to the destination line."""
    row = clamp(buf.cursor.row + d_row, 0, len(buf.lines) - 1)
    col = clamp(buf.cursor.col + d_col, 0, _last_col(buf.lines[row]))
    return replace(buf, cursor=Cursor(row=row, col=col))


def line_start(buf: Buffer) -> Buffer:
    buf = _anchor(buf)
    return replace(buf, cursor=Cursor(row=buf.cursor.row, col=0))


def line_end(buf: Buffer) -> Buffer:
    buf = _anchor(buf)
    return replace(buf, cursor=Cursor(row=buf.cursor.row, col=_last_col(_current_line(buf))))


def go_top(buf: Buffer) -> Buffer:
    """Park the cursor just above the first line."""
    return replace(buf, cursor=Cursor(row=-1, col=0))


def go_bottom(buf: Buffer) -> Buffer:
    """Park the cursor just below the last line."""
    return replace(buf, cursor=Cursor(row=len(buf.lines), col=0))


def delete_char(buf: Buffer) -> Buffer:
    """Delete the character under the cursor. The column is not re-clamped."""
    buf = _anchor(buf)
    line = _current_line(buf)
    col = buf.cursor.col
    if not line or col >= len(line):
        return buf
    return _with_line(buf, line[:col] + line[col + 1 :])


def delete_word(buf: Buffer) -> Buffer:
    """Delete leading non-word chars, one word and its trailing non-word chars."""
    buf = _anchor(buf)
    line = _current_line(buf)
    col = buf.cursor.col
    match = _WORD_SPAN.match(line, col)
    if match is None:
        return buf
    return _with_line(buf, line[:col] + line[match.end() :])


def change_word(buf: Buffer) -> Buffer:
    # No insert mode: changing a word only removes it.
    return delete_word(buf)


def yank_line(buf: Buffer, register: Register) -> None:
    """Copy the current line into the register; off the buffer that is an empty line."""
    register.line = _current_line(buf)


def paste_below(buf: Buffer, register: Register) -> Buffer:
    """Insert the register line below the cursor row and move onto it.

    Above the first line this inserts at the top; below the last it appends.
    """
    row = clamp(buf.cursor.row + 1, 0, len(buf.lines))
    lines = list(buf.lines)
    lines.insert(row, register.line if register.line is not None else "")
    return Buffer(lines=tuple(lines), cursor=Cursor(row=row, col=0))


def delete_line(buf: Buffer, count: int = 1) -> Buffer:
    """Delete `count` lines from the cursor row, never leaving the buffer without lines."""
    buf = _anchor(buf)
    row = buf.cursor.row
    removed = clamp(count, 1, len(buf.lines) - row)
    if removed >= len(buf.lines):
        return Buffer(lines=("",), cursor=Cursor(row=0, col=0))

    lines = buf.lines[:row] + buf.lines[row + removed :]
    new_row = min(row, len(lines) - 1)
    new_col = clamp(buf.cursor.col, 0, _last_col(lines[new_row]))
    return Buffer(lines=lines, cursor=Cursor(row=new_row, col=new_col))


def word_forward(buf: Buffer) -> Buffer:
    """Jump to the next word character after the cursor on the same line."""
    buf = _anchor(buf)
    row, col = buf.cursor.row, buf.cursor.col
    match = _WORD_CHAR.search(_current_line(buf), col + 1)
    if match is None:
        return buf
    return replace(buf, cursor=Cursor(row=row, col=match.start()))


def word_backward(buf: Buffer) -> Buffer:
    """Jump back to the last word character before the run of non-word chars at the cursor."""
    buf = _anchor(buf)
    row, col = buf.cursor.row, buf.cursor.col
    match = _LAST_WORD_CHAR.search(_current_line(buf)[:col])
    if match is None:
        return buf
    return replace(buf, cursor=Cursor(row=row, col=match.start()))
