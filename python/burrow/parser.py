"""Lightweight line splitting helpers for burrow."""

from __future__ import annotations

import shlex
from typing import List, Tuple


def split_command(line: str) -> List[str]:
    """Split a command line into argv tokens using shlex rules."""
    if not line:
        return []
    try:
        return shlex.split(line, comments=False, posix=True)
    except ValueError as exc:
        # Return the raw line as a single token so callers can raise a friendlier error.
        return [line.strip(), f"#parse-error:{exc}"]


def split_first_word(line: str) -> Tuple[str, str]:
    """Return ``(first_token, remainder)`` split on the first run of whitespace."""
    parts = line.strip().split(None, 1)
    if not parts:
        return "", ""
    if len(parts) == 1:
        return parts[0], ""
    return parts[0], parts[1]


def is_parse_error(argv: List[str]) -> bool:
    return len(argv) == 2 and argv[1].startswith("#parse-error")
