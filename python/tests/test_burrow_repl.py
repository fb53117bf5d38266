"""Tests for the burrow read loop."""

from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.append(str(REPO_ROOT / "python"))

from burrow.history import HistoryStore
from burrow.repl import ScriptSource, Shell
from burrow.signals import Breakout


def test_unmatched_lines_are_evaluated(run_shell, capsys):
    shell = run_shell(["x = 20", "x + 22", "_ * 2"])
    out = capsys.readouterr().out
    assert "=> 42" in out
    assert "=> 84" in out
    assert shell.state.last_result == 84


def test_multiline_definitions_use_pending_buffer(run_shell, capsys):
    run_shell(["def double(n):", "    return n * 2", "", "double(21)"])
    assert "=> 42" in capsys.readouterr().out


def test_clear_buffer_discards_pending_input(run_shell, capsys):
    shell = run_shell(["def broken():", "!", "1 + 1"])
    out = capsys.readouterr().out
    assert "Input buffer cleared!" in out
    assert "=> 2" in out
    assert shell.state.control.pending_buffer == []


def test_history_records_into_empty_store_and_hist_reports_empty_range(make_state, capsys, tmp_path):
    store = HistoryStore(str(tmp_path / "hist"), limit=10)
    lines = ["a = 1", "b = 2", "c = 3", "hist -r 0...0"]
    Shell(make_state(history=store), line_source=ScriptSource(lines)).run()
    out = capsys.readouterr().out
    assert store.snapshot() == lines
    assert "error: no history in range 0...0" in out
    assert "burrow(main):0> a = 1" not in out


def test_hist_exclusive_range_with_negative_end(make_state, capsys, tmp_path):
    store = HistoryStore(str(tmp_path / "hist"), limit=10)
    lines = ["a = 1", "b = 2", "c = 3", "hist -r 1...-1", "b"]
    Shell(make_state(history=store), line_source=ScriptSource(lines)).run()
    out = capsys.readouterr().out
    assert "burrow(main):0> b = 2" in out
    assert "burrow(main):0> a = 1" not in out
    assert "burrow(main):0> c = 3" not in out
    assert "=> 2" in out


def test_backslash_continuation_joins_lines(run_shell, capsys):
    run_shell(["1 + \\", "2"])
    assert "=> 3" in capsys.readouterr().out


def test_evaluation_errors_are_reported_and_loop_continues(run_shell, capsys):
    shell = run_shell(["undefined_name", "1"])
    out = capsys.readouterr().out
    assert "NameError: name 'undefined_name' is not defined" in out
    assert "from (burrow):1" in out
    assert "=> 1" in out
    assert isinstance(shell.state.last_exception, NameError)


def test_strict_mode_reports_no_such_command(run_shell, capsys):
    shell = run_shell(["frobnicate now"], eval_unmatched=False)
    assert "No such command: frobnicate" in capsys.readouterr().out
    assert shell.status == 1


def test_parse_failure_is_reported(run_shell, capsys):
    run_shell(["ls --bogus"])
    assert "error: unknown option: --bogus" in capsys.readouterr().out


def test_prompt_styles(make_state):
    state = make_state()
    shell = Shell(state, line_source=ScriptSource([]))
    assert shell.prompt() == "burrow(main):0> "
    state.control.pending_buffer.append("def f():")
    assert shell.prompt() == "burrow(main):0* "
    state.set_prompt_style("simple")
    assert shell.prompt() == " | "
    state.control.pending_buffer.clear()
    assert shell.prompt() == ">> "
    state.set_prompt_style("shell")
    assert shell.prompt().startswith("burrow ")
    assert shell.prompt().endswith(" $ ")


def test_prompt_shows_receiver_and_level(make_state):
    state = make_state()
    shell = Shell(state, line_source=ScriptSource([]))
    state.stack.push([1, 2], state.target.child([1, 2]))
    assert shell.prompt() == "burrow([1, 2]):1> "


def test_history_records_submitted_lines(make_state, tmp_path):
    store = HistoryStore(str(tmp_path / "hist"), limit=10)
    shell = Shell(make_state(history=store), line_source=ScriptSource(["a = 1", "", "a"]))
    shell.run()
    assert store.snapshot() == ["a = 1", "a"]


def test_hist_lists_and_replays(make_state, capsys, tmp_path):
    store = HistoryStore(str(tmp_path / "hist"), limit=10)
    lines = ["counter = 0", "counter += 1", "hist", "hist -r 1", "counter"]
    shell = Shell(make_state(history=store), line_source=ScriptSource(lines))
    shell.run()
    out = capsys.readouterr().out
    assert "0: counter = 0" in out
    assert "1: counter += 1" in out
    assert "burrow(main):0> counter += 1" in out
    assert "=> 2" in out


def test_replayed_lines_are_read_before_line_source(make_state, capsys):
    state = make_state()
    state.replay.extend(["40 + 2"])
    Shell(state, line_source=ScriptSource([])).run()
    assert "=> 42" in capsys.readouterr().out


def test_toggle_commands_change_state(run_shell, capsys):
    shell = run_shell(["toggle-color", "simple-prompt", "shell-mode", "shell-mode"])
    out = capsys.readouterr().out
    assert "Syntax highlighting on" in out
    assert shell.state.color is True
    assert shell.state.prompt_style == "default"


def test_game_reads_guesses_from_session(run_shell, capsys, monkeypatch):
    monkeypatch.setattr("burrow.commands.game.random.randint", lambda low, high: 7)
    run_shell(["game 10", "x", "3", "9", "7"])
    out = capsys.readouterr().out
    assert "Please enter a number." in out
    assert "Too low." in out
    assert "Too high." in out
    assert "Well done! You guessed it in 3 attempts." in out


def test_out_of_range_breakout_keeps_session(make_state, capsys):
    state = make_state()
    levels = []

    @state.registry.command("leap", "Break out to a level that does not exist")
    def leap(ctx, opts):
        return Breakout(7, "x")

    @state.registry.command("where-now", "Record the current level")
    def where_now(ctx, opts):
        levels.append(ctx.level)

    shell = Shell(state, line_source=ScriptSource(["cd 5", "leap", "where-now", "real * 2"]))
    shell.run()
    out = capsys.readouterr().out
    assert "Invalid nest level. Must be between 0 and 1. Got 7." in out
    assert levels == [1]
    assert "=> 10" in out


def test_game_quits_on_dot(run_shell, capsys, monkeypatch):
    monkeypatch.setattr("burrow.commands.game.random.randint", lambda low, high: 4)
    run_shell(["game", "50", ".", "6 * 7"])
    out = capsys.readouterr().out
    assert "('.' to quit)" in out
    assert "Too high." in out
    assert "The number was 4." in out
    assert "Please enter a number." not in out
    assert "=> 42" in out
