"""Parse typed normal-mode commands and apply them to a buffer."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from . import buffer as ops
from .models import Buffer, Register

_COUNTED = re.compile(r"(\d+)([a-z]+)", re.ASCII)
# Larger counts clamp here; dd never removes more lines than the buffer holds.
MAX_COUNT = 999_999


class CommandKind(Enum):
    """Closed set of supported commands, valued by their canonical text."""

    LEFT = "h"
    DOWN = "j"
    UP = "k"
    RIGHT = "l"
    LINE_START = "0"
    LINE_END = "$"
    TOP = "gg"
    BOTTOM = "G"
    DELETE_CHAR = "x"
    DELETE_WORD = "dw"
    CHANGE_WORD = "cw"
    YANK_LINE = "yy"
    PASTE_BELOW = "p"
    DELETE_LINE = "dd"
    WORD_FORWARD = "w"
    WORD_BACKWARD = "b"
    YANK_PASTE = "yy p"
    UNKNOWN = ""


_ALIASES = {"yyp": CommandKind.YANK_PASTE}


@dataclass(frozen=True)
class Command:
    """Parsed command: variant, repeat count and canonical text."""

    kind: CommandKind
    count: int
    text: str


@dataclass(frozen=True)
class KeyResult:
    """Buffer after a command and the canonical command string."""

    buffer: Buffer
    command: str


Handler = Callable[[Buffer, Register, int], Buffer]


def _yank(buf: Buffer, register: Register, count: int) -> Buffer:
    ops.yank_line(buf, register)
    return buf


def _yank_paste(buf: Buffer, register: Register, count: int) -> Buffer:
    ops.yank_line(buf, register)
    return ops.paste_below(buf, register)


HANDLERS: dict[CommandKind, Handler] = {
    CommandKind.LEFT: lambda buf, reg, count: ops.move_cursor(buf, 0, -1),
    CommandKind.DOWN: lambda buf, reg, count: ops.move_cursor(buf, 1, 0),
    CommandKind.UP: lambda buf, reg, count: ops.move_cursor(buf, -1, 0),
    CommandKind.RIGHT: lambda buf, reg, count: ops.move_cursor(buf, 0, 1),
    CommandKind.LINE_START: lambda buf, reg, count: ops.line_start(buf),
    CommandKind.LINE_END: lambda buf, reg, count: ops.line_end(buf),
    CommandKind.TOP: lambda buf, reg, count: ops.go_top(buf),
    CommandKind.BOTTOM: lambda buf, reg, count: ops.go_bottom(buf),
    CommandKind.DELETE_CHAR: lambda buf, reg, count: ops.delete_char(buf),
    CommandKind.DELETE_WORD: lambda buf, reg, count: ops.delete_word(buf),
    CommandKind.CHANGE_WORD: lambda buf, reg, count: ops.change_word(buf),
    CommandKind.YANK_LINE: _yank,
    CommandKind.PASTE_BELOW: lambda buf, reg, count: ops.paste_below(buf, reg),
    CommandKind.DELETE_LINE: lambda buf, reg, count: ops.delete_line(buf, count),
    CommandKind.WORD_FORWARD: lambda buf, reg, count: ops.word_forward(buf),
    CommandKind.WORD_BACKWARD: lambda buf, reg, count: ops.word_backward(buf),
    CommandKind.YANK_PASTE: _yank_paste,
}


def split_count(raw_input: str) -> tuple[int, str]:
    """Split a leading repeat count like `3dd` into (3, "dd")."""
    stripped = raw_input.strip()
    match = _COUNTED.fullmatch(stripped)
    if match is None:
        return (1, stripped)
    digits = match.group(1).lstrip("0") or "0"
    count = MAX_COUNT if len(digits) > len(str(MAX_COUNT)) else min(int(digits), MAX_COUNT)
    return (count, match.group(2))


def parse_command(raw_input: str) -> Command:
    """Parse raw input; unsupported text becomes an UNKNOWN command echoing the input."""
    count, base = split_count(raw_input)
    kind = _ALIASES.get(base)
    if kind is None:
        try:
            kind = CommandKind(base)
        except ValueError:
            kind = CommandKind.UNKNOWN
    if kind is CommandKind.UNKNOWN:
        return Command(kind=kind, count=count, text=base)
    return Command(kind=kind, count=count, text=kind.value)


def apply_keys(buf: Buffer, raw_input: str, register: Register) -> KeyResult:
    """Apply one typed command to a buffer.

    Never raises for string input: unsupported commands leave the buffer as it
    is. Only `dd` honours the repeat count. The register is updated in place
    by yank commands.
    """
    command = parse_command(raw_input)
    handler = HANDLERS.get(command.kind)
    if handler is None:
        return KeyResult(buffer=buf, command=command.text)
    return KeyResult(buffer=handler(buf, register, command.count), command=command.text)
