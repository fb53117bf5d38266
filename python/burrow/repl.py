"""Interactive read loop for burrow."""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, Iterable, Iterator, Optional, Protocol

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.patch_stdout import patch_stdout

from .completion import ShellCompleter
from .context import SessionState
from .dispatch import NoSuchCommand, ParseFailure, dispatch
from .errors import EvaluationError, InvalidNestingLevel
from .history import HistoryStore
from .nesting import SessionFrame
from .output import emit_error, format_exception, view_clip
from .signals import Breakout, Continue, ControlSignal

try:  # pragma: no cover - not available on every platform
    import readline
except ImportError:  # pragma: no cover
    readline = None

LOGGER = logging.getLogger("burrow.repl")


class LineSource(Protocol):
    def next_line(self, prompt: str) -> str:
        ...


class ScriptSource:
    """Feeds a fixed sequence of lines; EOFError once exhausted."""

    def __init__(self, lines: Iterable[str]) -> None:
        self._lines: Iterator[str] = iter(lines)

    def next_line(self, prompt: str) -> str:
        try:
            return next(self._lines)
        except StopIteration:
            raise EOFError from None


class InputSource:
    """input() with readline history, used when stdin is not a terminal."""

    def __init__(self, history: Optional[HistoryStore] = None) -> None:
        self.history = history
        self._readline_enabled = readline is not None and history is not None
        if self._readline_enabled:
            for entry in history.snapshot():  # type: ignore[union-attr]
                readline.add_history(entry)

    def next_line(self, prompt: str) -> str:
        line = input(prompt)
        if self._readline_enabled and self.history is not None:
            while readline.get_current_history_length() > self.history.limit:
                readline.remove_history_item(0)
        return line


class PromptToolkitSource:
    """prompt_toolkit session seeded from the history store."""

    def __init__(self, state: SessionState) -> None:
        history = InMemoryHistory()
        if state.history is not None:
            for entry in state.history.snapshot():
                history.append_string(entry)
        self._session: PromptSession = PromptSession(
            history=history,
            completer=ShellCompleter(state),
            complete_while_typing=False,
        )

    def next_line(self, prompt: str) -> str:
        with patch_stdout():
            return self._session.prompt(prompt)


def default_line_source(state: SessionState) -> LineSource:
    if sys.stdin.isatty() and sys.stdout.isatty():
        return PromptToolkitSource(state)
    return InputSource(state.history)


class Shell:
    """Runs one read loop per session frame and threads control signals.

    ``start`` pushes a frame and loops until a breakout targets that frame
    (or a lower one), then pops it and returns the carried value.
    """

    def __init__(self, state: SessionState, *, line_source: Optional[LineSource] = None) -> None:
        self.state = state
        self.line_source = line_source
        self.status = 0
        self._continuation: list[str] = []
        self._unwind_value: Any = None
        self.result: Any = None
        state.shell = self

    def run(self) -> int:
        """Run the level-0 session; ``result`` holds the value it exited with."""
        self.result = self._session_loop(self.state.stack[0])
        return 0

    def start(self, receiver: Any) -> Any:
        stack = self.state.stack
        frame = stack.push(receiver, self.state.target.child(receiver))
        try:
            return self._session_loop(frame)
        finally:
            stack.release(frame)

    def _session_loop(self, frame: SessionFrame) -> Any:
        stack = self.state.stack
        while stack.contains(frame) and not self.state.input_exhausted:
            try:
                line = self.read_line(self.prompt())
            except EOFError:
                self.state.input_exhausted = True
                self._unwind_value = None
                self.state.output.puts()
                break
            except KeyboardInterrupt:
                self._reset_buffers()
                self.state.output.puts()
                continue
            if self._handle_multiline(line):
                continue
            payload = " ".join(self._continuation) if self._continuation else line
            self._continuation.clear()
            if not payload.strip() and not self.state.control.pending_buffer:
                continue
            self._record_history(payload)
            try:
                signal = self.handle(payload)
            except KeyboardInterrupt:
                self._reset_buffers()
                self.state.output.puts("^C")
                continue
            if not stack.contains(frame):
                break
            if isinstance(signal, Breakout) and signal.target_level == frame.level:
                break
        return self._unwind_value

    def handle(self, line: str) -> Optional[ControlSignal]:
        """Dispatch one line at the current level.

        Returns the Breakout that was accepted, or None to keep reading.
        """
        state = self.state
        level_before = state.stack.depth
        exception_before = state.last_exception
        self.status = 0
        outcome = dispatch(line, state)
        if state.last_exception is not exception_before:
            self.status = 1
        if state.stack.depth < level_before or state.input_exhausted:
            # A nested session already unwound past this level.
            return None
        if isinstance(outcome, NoSuchCommand):
            self._handle_unmatched(outcome)
            return None
        if isinstance(outcome, ParseFailure):
            emit_error(state.output, outcome.reason)
            self.status = 1
            return None
        signal = outcome.signal
        if isinstance(signal, Continue):
            if signal.has_value:
                self._show(signal.value)
            return None
        if isinstance(signal, Breakout):
            try:
                self._unwind_value = state.stack.breakout(signal.target_level, signal.value)
            except InvalidNestingLevel as exc:
                state.output.puts(str(exc))
                self.status = 1
                return None
            return signal
        return None

    def _handle_unmatched(self, outcome: NoSuchCommand) -> None:
        state = self.state
        if not state.eval_unmatched:
            state.output.puts(f"No such command: {outcome.name}")
            self.status = 1
            return
        buffer = state.control.pending_buffer
        buffer.append(outcome.line)
        source = "\n".join(buffer)
        if not state.evaluator.is_complete(source):
            return
        buffer.clear()
        try:
            value = state.evaluate(source)
        except EvaluationError as exc:
            state.last_exception = exc.original
            state.output.puts(format_exception(exc.original))
            self.status = 1
            return
        if value is not None:
            self._show(value)

    def _show(self, value: Any) -> None:
        self.state.last_result = value
        self.state.target.set_local("_", value)
        self.state.output.puts(f"=> {self.state.renderer.value(value)}")

    def prompt(self) -> str:
        state = self.state
        pending = bool(state.control.pending_buffer or self._continuation)
        if state.prompt_style == "simple":
            return " | " if pending else ">> "
        if state.prompt_style == "shell":
            return "* " if pending else f"burrow {os.getcwd()} $ "
        frame = state.stack.current
        label = "main" if frame.scope.toplevel else view_clip(frame.receiver)
        return f"burrow({label}):{frame.level}{'*' if pending else '>'} "

    def read_line(self, prompt: str) -> str:
        if self.state.replay:
            line = self.state.replay.popleft()
            self.state.output.puts(f"{prompt}{line}")
            return line
        if self.line_source is None:
            self.line_source = default_line_source(self.state)
        return self.line_source.next_line(prompt)

    def _handle_multiline(self, line: str) -> bool:
        stripped = line.rstrip()
        if stripped.endswith("\\"):
            self._continuation.append(stripped[:-1])
            return True
        if self._continuation:
            self._continuation.append(stripped)
        return False

    def _reset_buffers(self) -> None:
        self._continuation.clear()
        self.state.control.pending_buffer.clear()

    def _record_history(self, entry: str) -> None:
        if self.state.history is not None:
            self.state.history.append(entry)


__all__ = [
    "LineSource",
    "ScriptSource",
    "InputSource",
    "PromptToolkitSource",
    "default_line_source",
    "Shell",
]
