"""vimarcade: arcade drills for vim normal-mode commands."""

from __future__ import annotations

import re
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from .interpreter import KeyResult, apply_keys
from .models import Buffer, Cursor, Question, Register
from .questions import pick_random

__all__ = ["Buffer", "Cursor", "KeyResult", "Question", "Register", "__version__", "apply_keys", "pick_random"]

_VERSION_LINE = re.compile(r'^version\s*=\s*"([^"]+)"\s*$')


def _version_from_pyproject() -> str | None:
    """Read [project].version from a source checkout's pyproject.toml, if any."""
    for base in Path(__file__).resolve().parents:
        pyproject = base / "pyproject.toml"
        if not pyproject.exists():
            continue
        section = ""
        for line in pyproject.read_text(encoding="utf-8").splitlines():
            stripped = line.strip()
            if stripped.startswith("[") and stripped.endswith("]"):
                section = stripped
            elif section == "[project]" and (match := _VERSION_LINE.match(stripped)):
                return match.group(1)
    return None


def _resolve_version() -> str:
    found = _version_from_pyproject()
    if found is not None:
        return found
    try:
        return version("vimarcade")
    except PackageNotFoundError:
        return "0+unknown"


__version__ = _resolve_version()
