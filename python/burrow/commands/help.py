"""Help and alias commands."""

from __future__ import annotations

from ..context import CommandContext
from ..errors import UnknownCommand
from ..options import Flag, OptionSchema, ParsedOptions
from ..output import emit_error
from .base import Command


class HelpCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            "help",
            "Show a list of commands. Type `help <command>` for information about a specific command.",
        )

    def run(self, ctx: CommandContext, opts: ParsedOptions) -> None:
        registry = ctx.registry
        if opts.args:
            name = opts.args[0]
            command = registry.lookup(name)
            if command is None:
                ctx.puts(f"No such command: {name}.")
                return
            ctx.puts(f"{command.listing_name}: {command.description}")
            aliases = registry.aliases_for(command.name)
            if aliases:
                ctx.puts(f"Aliases: {', '.join(aliases)}")
            if len(command.options) or command.usage:
                ctx.puts(command.format_usage())
            return
        ctx.puts("Command list:")
        ctx.puts("--")
        for command in registry.list_commands():
            ctx.puts(command.format_help(registry.aliases_for(command.name)))


class AliasCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            "alias",
            "Manage command aliases. e.g. `alias ll ls`",
            options=OptionSchema([Flag("d", "delete", "Remove an alias.", takes_value=True, metavar="NAME")], help=True),
            usage="Usage: alias [NAME COMMAND] [-d NAME]",
        )

    def run(self, ctx: CommandContext, opts: ParsedOptions) -> None:
        registry = ctx.registry
        if opts.delete:
            if registry.unalias(opts.delete):
                ctx.puts(f"Removed alias {opts.delete}")
            else:
                emit_error(ctx.output, f"no such alias: {opts.delete}")
            return
        if len(opts.args) == 2:
            name, target = opts.args
            try:
                registry.alias(name, target)
            except UnknownCommand as exc:
                emit_error(ctx.output, str(exc))
                return
            ctx.puts(f"{name} -> {registry.canonical_name(name)}")
            return
        if opts.args:
            emit_error(ctx.output, "alias takes a NAME and a COMMAND")
            return
        aliases = registry.list_aliases()
        if not aliases:
            ctx.puts("No aliases defined")
            return
        ctx.puts("Aliases:")
        for alias, command in sorted(aliases.items()):
            ctx.puts(f"  {alias}={command}")
