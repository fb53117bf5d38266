"""Input matching and command dispatch."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional, Union

from .context import CommandContext, SessionState
from .errors import EvaluationError, OptionError
from .options import parse
from .output import emit_error, format_exception
from .parser import is_parse_error, split_command, split_first_word
from .signals import Continue, ControlSignal, Skip, is_signal

if TYPE_CHECKING:  # pragma: no cover
    from .commands import CommandRegistry
    from .commands.base import Command

LOGGER = logging.getLogger("burrow.dispatch")


@dataclass(frozen=True)
class Handled:
    signal: ControlSignal


@dataclass(frozen=True)
class NoSuchCommand:
    line: str

    @property
    def name(self) -> str:
        return split_first_word(self.line)[0]


@dataclass(frozen=True)
class ParseFailure:
    reason: str
    command: Optional[str] = None


DispatchOutcome = Union[Handled, NoSuchCommand, ParseFailure]


@dataclass(frozen=True)
class Match:
    command: "Command"
    word: str
    remainder: str


class InputMatcher:
    """Decides which command, if any, handles a raw input line.

    The first word is tried against canonical names and aliases; pattern
    commands are consulted, in registration order, only when that fails.
    """

    def __init__(self, registry: "CommandRegistry") -> None:
        self.registry = registry

    def match(self, line: str) -> Optional[Match]:
        stripped = line.strip()
        if not stripped:
            return None
        word, remainder = split_first_word(stripped)
        command = self.registry.lookup(word)
        if command is not None:
            return Match(command, word, remainder)
        for candidate in self.registry.patterns():
            rest = candidate.match_pattern(stripped)
            if rest is not None:
                return Match(candidate, word, rest)
        return None


def dispatch(line: str, state: SessionState) -> DispatchOutcome:
    """Match *line*, parse its options and run the command body."""
    match = InputMatcher(state.registry).match(line)
    if match is None:
        return NoSuchCommand(line.rstrip("\r\n"))
    command = match.command
    argv = split_command(match.remainder)
    if is_parse_error(argv):
        if len(command.options):
            return ParseFailure(argv[1].split(":", 1)[-1], command.name)
        argv = match.remainder.split()
    try:
        opts = parse(command.options, argv)
    except OptionError as exc:
        return ParseFailure(str(exc), command.name)
    if opts.help_requested:
        state.output.puts(command.format_usage())
        return Handled(Skip())

    ctx = CommandContext(
        state=state,
        command=command,
        line=line,
        args=list(opts.args),
        opts=opts,
        target=state.target,
    )
    state.control.trailing_text = match.remainder
    LOGGER.debug("dispatch %s", ctx.as_dict())
    try:
        result = command.run(ctx, opts)
    except SystemExit:
        raise
    except EvaluationError as exc:
        state.last_exception = exc.original
        state.output.puts(format_exception(exc.original))
        return Handled(Skip())
    except Exception as exc:
        LOGGER.exception("command failed")
        state.last_exception = exc
        emit_error(state.output, f"Command '{command.name}' failed: {exc}")
        return Handled(Skip())
    finally:
        state.control.trailing_text = ""
    return Handled(_as_signal(command, result))


def _as_signal(command: "Command", result: Any) -> ControlSignal:
    if is_signal(result):
        return result
    if command.keep_retval:
        return Continue(result)
    return Continue()


__all__ = [
    "Handled",
    "NoSuchCommand",
    "ParseFailure",
    "DispatchOutcome",
    "Match",
    "InputMatcher",
    "dispatch",
]
