"""Run the arcade with `python -m vimarcade`."""

from __future__ import annotations

from .main import main_entry


def main() -> None:
    """Start the CLI."""
    main_entry()


if __name__ == "__main__":  # pragma: no cover
    main()
