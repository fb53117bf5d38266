"""Tests for burrow input matching and dispatch."""

from __future__ import annotations

import re
import sys
from pathlib import Path
from typing import Any, List, Tuple

REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.append(str(REPO_ROOT / "python"))

from burrow.commands import CommandRegistry, build_registry
from burrow.commands.base import Command
from burrow.dispatch import Handled, InputMatcher, NoSuchCommand, ParseFailure, dispatch
from burrow.options import Flag, OptionSchema
from burrow.scope import Scope
from burrow.signals import Breakout, Continue, Skip


class RecordingEvaluator:
    """Evaluator stub that records calls and returns a fixed value."""

    def __init__(self, value: Any = "evaluated") -> None:
        self.value = value
        self.calls: List[Tuple[Scope, str]] = []

    def evaluate(self, scope: Scope, source: str) -> Any:
        self.calls.append((scope, source))
        return self.value

    def is_complete(self, source: str) -> bool:
        return True


def _at_level(state, level: int) -> None:
    for idx in range(level):
        state.stack.push(idx, state.target.child(idx))


def test_alias_and_canonical_dispatch_identically(make_state):
    evaluator = RecordingEvaluator()
    state = make_state(evaluator=evaluator)
    _at_level(state, 2)
    matcher = InputMatcher(state.registry)
    assert matcher.match("quit all done").command is matcher.match("exit all done").command
    outcome = dispatch("quit all done", state)
    assert outcome == Handled(Breakout(2, "evaluated"))
    assert evaluator.calls[-1][1] == "all done"
    assert dispatch("exit all done", state) == Handled(Breakout(2, "evaluated"))


def test_catch_all_receives_remainder(make_state):
    state = make_state()
    match = InputMatcher(state.registry).match(".ls -la")
    assert match is not None
    assert match.command.name == ".<shell command>"
    assert match.remainder == "ls -la"


def test_literal_commands_win_over_patterns():
    registry = CommandRegistry()
    registry.register(Command("catch", "catch-all", pattern=re.compile(r"^(.*)$"), handler=lambda c, o: None))
    literal = registry.register(Command("ls", "list", handler=lambda c, o: None))
    match = InputMatcher(registry).match("ls -l")
    assert match.command is literal
    assert match.remainder == "-l"


def test_unknown_command_leaves_state_unchanged(make_state):
    state = make_state()
    names_before = state.registry.names()
    depth_before = state.stack.depth
    outcome = dispatch("frobnicate", state)
    assert isinstance(outcome, NoSuchCommand)
    assert outcome.name == "frobnicate"
    assert state.registry.names() == names_before
    assert state.stack.depth == depth_before


def test_unmatched_line_keeps_indentation(make_state):
    outcome = dispatch("    return 1\n", make_state())
    assert outcome == NoSuchCommand("    return 1")


def _flagged_registry(calls: List[Any]) -> CommandRegistry:
    registry = CommandRegistry()

    def handler(ctx, opts):
        calls.append(opts)
        return None

    registry.register(
        Command(
            "search",
            "search command",
            options=OptionSchema([Flag("v", "verbose", "Verbose"), Flag("f", "filter", "Filter", takes_value=True)], help=True),
            usage="Usage: search [-v] [-f PATTERN]",
            handler=handler,
        )
    )
    return registry


def test_help_flag_prints_usage_and_skips_body(make_state, capsys):
    calls: List[Any] = []
    state = make_state(registry=_flagged_registry(calls))
    outcome = dispatch("search -v --help", state)
    assert outcome == Handled(Skip())
    assert calls == []
    out = capsys.readouterr().out
    assert out.startswith("Usage: search")
    assert "--filter" in out


def test_help_flag_wins_as_flag_value_and_after_double_dash(make_state, capsys):
    calls: List[Any] = []
    state = make_state(registry=_flagged_registry(calls))
    assert dispatch("search -f -h", state) == Handled(Skip())
    assert dispatch("search -- -h", state) == Handled(Skip())
    assert calls == []
    assert capsys.readouterr().out.count("Usage: search") == 2


def test_option_errors_become_parse_failures(make_state):
    calls: List[Any] = []
    state = make_state(registry=_flagged_registry(calls))
    outcome = dispatch("search --bogus", state)
    assert outcome == ParseFailure("unknown option: --bogus", "search")
    outcome = dispatch("search -f", state)
    assert isinstance(outcome, ParseFailure)
    assert "-f" in outcome.reason
    assert calls == []


def test_unbalanced_quotes_fail_only_for_commands_with_options(make_state):
    calls: List[Any] = []
    state = make_state(registry=_flagged_registry(calls))
    assert isinstance(dispatch("search 'open", state), ParseFailure)
    seen: List[Any] = []
    state.registry.register(Command("plain", "plain", handler=lambda ctx, opts: seen.append(opts.args)))
    assert dispatch("plain 'open quote", state) == Handled(Continue())
    assert seen == [["'open", "quote"]]


def test_parsed_options_reach_handler(make_state):
    calls: List[Any] = []
    state = make_state(registry=_flagged_registry(calls))
    dispatch("search -v -f foo bar", state)
    opts = calls[0]
    assert opts.verbose is True
    assert opts.filter == "foo"
    assert opts.args == ["bar"]


def test_trailing_text_visible_during_body_only(make_state):
    seen: List[str] = []
    registry = CommandRegistry()
    registry.register(Command("echo", "echo", handler=lambda ctx, opts: seen.append(ctx.trailing_text)))
    state = make_state(registry=registry)
    dispatch("echo  a  b ", state)
    assert seen == ["a  b"]
    assert state.control.trailing_text == ""


def test_keep_retval_turns_result_into_value(make_state):
    registry = CommandRegistry()
    registry.register(Command("answer", "answer", keep_retval=True, handler=lambda ctx, opts: 42))
    registry.register(Command("quiet", "quiet", handler=lambda ctx, opts: 42))
    state = make_state(registry=registry)
    assert dispatch("answer", state) == Handled(Continue(42))
    assert dispatch("quiet", state) == Handled(Continue())


def test_failing_command_body_is_contained(make_state, capsys):
    def boom(ctx, opts):
        raise RuntimeError("kaput")

    registry = CommandRegistry()
    registry.register(Command("boom", "explodes", handler=boom))
    state = make_state(registry=registry)
    assert dispatch("boom", state) == Handled(Skip())
    assert isinstance(state.last_exception, RuntimeError)
    assert "error: Command 'boom' failed: kaput" in capsys.readouterr().out


def test_evaluation_error_is_rendered(make_state, capsys):
    state = make_state()
    outcome = dispatch("cat 1 / 0", state)
    assert outcome == Handled(Skip())
    assert isinstance(state.last_exception, ZeroDivisionError)
    assert "ZeroDivisionError: division by zero" in capsys.readouterr().out


def test_exit_without_value_at_top_level(make_state):
    state = make_state(registry=build_registry())
    assert dispatch("exit", state) == Handled(Breakout(0, None))
    assert dispatch("exit-all", state) == Handled(Breakout(0, None))
