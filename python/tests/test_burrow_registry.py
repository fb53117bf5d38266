"""Tests for the burrow command registry and help index."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.append(str(REPO_ROOT / "python"))

from burrow.commands import CommandRegistry, build_registry
from burrow.commands.base import Command
from burrow.errors import UnknownCommand


def _cmd(name: str, description: str = "", **kwargs) -> Command:
    return Command(name, description or f"{name} command", handler=lambda ctx, opts: None, **kwargs)


def test_aliases_resolve_to_canonical_descriptor():
    registry = build_registry()
    for command in registry.list_commands(include_hidden=True):
        for alias in registry.aliases_for(command.name):
            assert registry.lookup(alias) is registry.lookup(command.name)


def test_redefinition_keeps_aliases_pointed_at_new_descriptor():
    registry = CommandRegistry()
    first = registry.register(_cmd("exit"))
    registry.alias("quit", "exit")
    second = registry.register(_cmd("exit", "replacement"))
    assert second is not first
    assert registry.lookup("exit") is second
    assert registry.lookup("quit") is second


def test_redefinition_keeps_listing_position():
    registry = CommandRegistry()
    registry.register(_cmd("a"))
    registry.register(_cmd("b"))
    registry.register(_cmd("a", "again"))
    assert [cmd.name for cmd in registry.list_commands()] == ["a", "b"]


def test_alias_to_unknown_command_fails():
    registry = CommandRegistry()
    with pytest.raises(UnknownCommand) as excinfo:
        registry.alias("ll", "ls")
    assert excinfo.value.name == "ls"
    assert "ll" not in registry


def test_alias_of_alias_targets_canonical_name():
    registry = CommandRegistry()
    registry.register(_cmd("show-source"))
    registry.alias("$", "show-source")
    registry.alias("src", "$")
    assert registry.list_aliases()["src"] == "show-source"


def test_list_commands_respects_hidden_and_order():
    registry = CommandRegistry()
    registry.register(_cmd("one"))
    registry.register(_cmd("secret", hidden=True))
    registry.register(_cmd("two"))
    assert [cmd.name for cmd in registry.list_commands()] == ["one", "two"]
    assert [cmd.name for cmd in registry.list_commands(include_hidden=True)] == ["one", "secret", "two"]


def test_declared_aliases_registered_with_command():
    registry = CommandRegistry()
    registry.register(_cmd("exit", aliases=("quit", "back")))
    assert registry.canonical_name("quit") == "exit"
    assert sorted(registry.aliases_for("exit")) == ["back", "quit"]


def test_remove_drops_aliases():
    registry = CommandRegistry()
    registry.register(_cmd("exit", aliases=("quit",)))
    removed = registry.remove("quit")
    assert removed is not None and removed.name == "exit"
    assert registry.lookup("exit") is None
    assert registry.lookup("quit") is None


def test_command_decorator_registers_handler():
    registry = CommandRegistry()

    @registry.command("greet", "Say hello")
    def greet(ctx, opts):
        return "hello"

    command = registry.lookup("greet")
    assert command is not None
    assert command.run(None, None) == "hello"  # type: ignore[arg-type]


def test_builtin_registry_has_catch_all_last():
    registry = build_registry()
    commands = registry.list_commands(include_hidden=True)
    assert commands[-1].pattern is not None
    assert registry.lookup(".<shell command>") is commands[-1]
    assert registry.lookup("game").hidden is True


def test_help_lists_canonical_names_with_aliases(make_state, capsys):
    from burrow.dispatch import dispatch

    state = make_state()
    dispatch("help", state)
    out = capsys.readouterr().out
    assert out.startswith("Command list:\n--\n")
    assert "exit (quit, back)" in out
    assert "game" not in out


def test_help_for_alias_shows_canonical_help(make_state, capsys):
    from burrow.dispatch import dispatch

    state = make_state()
    dispatch("help quit", state)
    out = capsys.readouterr().out
    assert out.splitlines()[0].startswith("exit: End the current session")
    assert "Aliases: quit, back" in out


def test_help_for_unknown_command(make_state, capsys):
    from burrow.dispatch import dispatch

    dispatch("help frobnicate", make_state())
    assert capsys.readouterr().out.strip() == "No such command: frobnicate."
