"""Command registry for burrow."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterator, List, Optional

from ..errors import UnknownCommand
from .base import Command, Handler
from .files import CatFileCommand, EvalFileCommand
from .game import GameCommand
from .help import AliasCommand, HelpCommand
from .input import ClearBufferCommand, HistCommand
from .introspect import CatCommand, LsCommand, StatCommand, StatusCommand, VersionCommand, WhereamiCommand
from .nesting import (
    CdCommand,
    ExitAllCommand,
    ExitCommand,
    ExitProgramCommand,
    JumpToCommand,
    NestCommand,
    NestingCommand,
)
from .packages import PipInstallCommand, PkgCdCommand, PydocCommand
from .prompt import ShellModeCommand, SimplePromptCommand, ToggleColorCommand
from .shell import ShellEscapeCommand
from .source import GistSourceCommand, ShowCommandCommand, ShowDocCommand, ShowSourceCommand

LOGGER = logging.getLogger("burrow.commands")


class CommandRegistry:
    """Stores commands by canonical name and resolves aliases.

    Aliases store the canonical *name*, so redefining a command keeps every
    alias pointed at the new definition.
    """

    def __init__(self) -> None:
        self._commands: Dict[str, Command] = {}
        self._aliases: Dict[str, str] = {}

    def register(self, command: Command) -> Command:
        if command.name in self._commands:
            LOGGER.debug("redefining command %s", command.name)
        self._aliases.pop(command.name, None)
        self._commands[command.name] = command
        for alias in command.aliases:
            self.alias(alias, command.name)
        return command

    def alias(self, alias_name: str, canonical: str) -> None:
        target = self._aliases.get(canonical, canonical)
        if target not in self._commands:
            raise UnknownCommand(canonical)
        if alias_name == target:
            self._aliases.pop(alias_name, None)
            return
        if alias_name in self._commands:
            LOGGER.debug("alias %s is shadowed by a command of the same name", alias_name)
        self._aliases[alias_name] = target

    def unalias(self, alias_name: str) -> bool:
        return self._aliases.pop(alias_name, None) is not None

    def canonical_name(self, name: str) -> Optional[str]:
        if name in self._commands:
            return name
        target = self._aliases.get(name)
        return target if target in self._commands else None

    def lookup(self, name: str) -> Optional[Command]:
        canonical = self.canonical_name(name)
        return self._commands[canonical] if canonical else None

    get = lookup

    def remove(self, name: str) -> Optional[Command]:
        canonical = self.canonical_name(name)
        if canonical is None:
            return None
        for alias, target in list(self._aliases.items()):
            if target == canonical:
                del self._aliases[alias]
        return self._commands.pop(canonical)

    def aliases_for(self, name: str) -> List[str]:
        canonical = self.canonical_name(name)
        return [alias for alias, target in self._aliases.items() if target == canonical]

    def list_aliases(self) -> Dict[str, str]:
        return dict(self._aliases)

    def list_commands(self, include_hidden: bool = False) -> List[Command]:
        return [cmd for cmd in self._commands.values() if include_hidden or not cmd.hidden]

    def patterns(self) -> List[Command]:
        return [cmd for cmd in self._commands.values() if cmd.pattern is not None]

    def names(self) -> List[str]:
        return list(self._commands) + list(self._aliases)

    def command(self, name: str, description: str = "", **kwargs: Any) -> Callable[[Handler], Handler]:
        """Decorator registering a plain ``(ctx, opts)`` function as a command."""

        def decorator(func: Handler) -> Handler:
            self.register(Command(name, description, handler=func, **kwargs))
            return func

        return decorator

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.canonical_name(name) is not None

    def __len__(self) -> int:
        return len(self._commands)

    def __iter__(self) -> Iterator[Command]:
        return iter(list(self._commands.values()))


def build_registry() -> CommandRegistry:
    registry = CommandRegistry()
    commands = [
        HelpCommand(),
        AliasCommand(),
        ClearBufferCommand(),
        NestCommand(),
        HistCommand(),
        ExitProgramCommand(),
        PipInstallCommand(),
        PydocCommand(),
        StatCommand(),
        GistSourceCommand(),
        PkgCdCommand(),
        ToggleColorCommand(),
        SimplePromptCommand(),
        ShellModeCommand(),
        NestingCommand(),
        StatusCommand(),
        WhereamiCommand(),
        VersionCommand(),
        ExitAllCommand(),
        LsCommand(),
        CatFileCommand(),
        EvalFileCommand(),
        CatCommand(),
        CdCommand(),
        ShowDocCommand(),
        ShowSourceCommand(),
        ShowCommandCommand(),
        JumpToCommand(),
        ExitCommand(),
        GameCommand(),
        ShellEscapeCommand(),
    ]
    for command in commands:
        registry.register(command)
    return registry


__all__ = ["Command", "CommandRegistry", "build_registry"]
