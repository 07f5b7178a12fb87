"""Colored progress output for installer commands.

Color is dropped when stdout is not a TTY, ``NO_COLOR`` is set, or
``TERM=dumb``.
"""

from __future__ import annotations

import os
import sys

GRAY = "1;38;5;243"
BLUE = "1;34"
GREEN = "1;32"
RED = "1;31"
PURPLE = "1;35"
YELLOW = "1;33"


def _use_color() -> bool:
    return (
        sys.stdout.isatty()
        and os.environ.get("NO_COLOR") is None
        and os.environ.get("TERM") != "dumb"
    )


def paint(code: str, text: str) -> str:
    """Wrap *text* in the ANSI escape *code* when color is enabled."""
    if not _use_color():
        return text
    return f"\033[{code}m{text}\033[0m"


def title(text: str) -> None:
    print()
    print(paint(PURPLE, text))
    print(paint(GRAY, "=" * 30))
    print()


def info(text: str) -> None:
    print(f"{paint(BLUE, 'Info:')} {text}")


def warning(text: str) -> None:
    print(f"{paint(YELLOW, 'Warning:')} {text}")


def error(text: str) -> None:
    print(f"{paint(RED, 'Error:')} {text}")


def success(text: str) -> None:
    print(paint(GREEN, text))


def dry_run(text: str) -> None:
    print(f"{paint(PURPLE, '[dry-run]')} {text}")
