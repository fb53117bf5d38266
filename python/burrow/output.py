"""Output helpers for burrow."""

from __future__ import annotations

import sys
import traceback
from typing import Any, Optional, TextIO

from .evaluator import EVAL_FILENAME

VIEW_CLIP_LIMIT = 60


class OutputSink:
    """Line-oriented text sink; holds no formatting logic."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        # Resolved lazily so pytest's capsys sees writes to the default sink.
        return self._stream if self._stream is not None else sys.stdout

    def write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()

    def puts(self, text: Any = "") -> None:
        line = str(text)
        self.write(line if line.endswith("\n") else line + "\n")

    def isatty(self) -> bool:
        isatty = getattr(self.stream, "isatty", None)
        try:
            return bool(isatty and isatty())
        except ValueError:
            return False


def view(value: Any) -> str:
    try:
        return repr(value)
    except Exception as exc:
        return f"<unrepresentable {type(value).__name__}: {exc}>"


def view_clip(value: Any, limit: int = VIEW_CLIP_LIMIT) -> str:
    """Short display form for prompts and nesting listings."""
    text = view(value)
    if len(text) <= limit and "\n" not in text:
        return text
    name = getattr(value, "__name__", None)
    if isinstance(name, str):
        return f"#<{type(value).__name__} {name}>"
    return f"#<{type(value).__name__}:0x{id(value):x}>"


def add_line_numbers(text: str, start_line: int = 1) -> str:
    lines = text.splitlines()
    if not lines:
        return ""
    width = len(str(start_line + len(lines) - 1))
    return "\n".join(f"{start_line + idx:>{width}}: {line}" for idx, line in enumerate(lines))


def emit_error(output: OutputSink, message: str) -> None:
    """Report a recoverable failure to the user."""
    output.puts(f"error: {message}")


def format_exception(exc: BaseException) -> str:
    """``Type: message`` plus the innermost location of the failure."""
    lines = [f"{type(exc).__name__}: {exc}"]
    if isinstance(exc, SyntaxError):
        if exc.lineno:
            lines.append(f"from {exc.filename or EVAL_FILENAME}:{exc.lineno}")
        return "\n".join(lines)
    frames = traceback.extract_tb(exc.__traceback__) if exc.__traceback__ else []
    user_frames = [frame for frame in frames if frame.filename == EVAL_FILENAME] or frames[-1:]
    if user_frames:
        frame = user_frames[-1]
        lines.append(f"from {frame.filename}:{frame.lineno}")
    return "\n".join(lines)


__all__ = [
    "OutputSink",
    "view",
    "view_clip",
    "add_line_numbers",
    "emit_error",
    "format_exception",
]
