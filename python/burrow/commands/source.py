"""Commands that show source code and documentation."""

from __future__ import annotations

import inspect
import logging
import subprocess

from ..context import CommandContext
from ..options import Flag, OptionSchema, ParsedOptions
from ..output import emit_error
from ..signals import Skip
from .base import Command
from .helpers import (
    CONTEXT_FLAG,
    FLOOD_FLAG,
    INSTANCE_METHODS_FLAG,
    LINE_NUMBERS_FLAG,
    METHODS_FLAG,
    code_for,
    describe_object,
    get_method_object,
    make_header,
    render_output,
    source_location,
    target_scope,
)

LOGGER = logging.getLogger("burrow.commands.source")


class ShowSourceCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            "show-source",
            "Show the source for METH. Type `show-source --help` for more info.",
            aliases=("show-method", "$"),
            options=OptionSchema(
                [LINE_NUMBERS_FLAG, INSTANCE_METHODS_FLAG, METHODS_FLAG, FLOOD_FLAG, CONTEXT_FLAG],
                help=True,
            ),
            usage=(
                "Usage: show-source [OPTIONS] [METH]\n"
                "Show the source for method METH. Tries instance methods first and then methods by default.\n"
                "e.g: show-source hello_method\n"
                "--"
            ),
        )

    def run(self, ctx: CommandContext, opts: ParsedOptions) -> object:
        scope = target_scope(ctx, opts)
        name = opts.args[0] if opts.args else None
        obj = get_method_object(ctx, name, opts, scope)
        if obj is None:
            emit_error(ctx.output, f"could not find method: {name or '(current)'}")
            return Skip()
        code, start = code_for(obj)
        if code is None:
            emit_error(ctx.output, f"could not locate source for {describe_object(obj)}")
            return Skip()
        body = ctx.renderer.highlight(code.rstrip("\n"), line_numbers=bool(opts.line_numbers), start_line=start)
        render_output(ctx, make_header(ctx, obj, code) + "\n" + body, flood=bool(opts.flood))
        return None


class ShowDocCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            "show-doc",
            "Show the documentation for METH. Type `show-doc --help` for more info.",
            aliases=("?",),
            options=OptionSchema([INSTANCE_METHODS_FLAG, METHODS_FLAG, FLOOD_FLAG, CONTEXT_FLAG], help=True),
            usage=(
                "Usage: show-doc [OPTIONS] [METH]\n"
                "Show the docstring for method METH.\n"
                "e.g: show-doc hello_method\n"
                "--"
            ),
        )

    def run(self, ctx: CommandContext, opts: ParsedOptions) -> object:
        scope = target_scope(ctx, opts)
        name = opts.args[0] if opts.args else None
        obj = get_method_object(ctx, name, opts, scope)
        if obj is None:
            emit_error(ctx.output, f"could not find method: {name or '(current)'}")
            return Skip()
        doc = inspect.getdoc(obj)
        if not doc:
            ctx.puts("No documentation found.")
            return Skip()
        render_output(ctx, make_header(ctx, obj, doc) + "\n" + doc, flood=bool(opts.flood))
        return None


class ShowCommandCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            "show-command",
            "Show the source for CMD. Type `show-command --help` for more info.",
            options=OptionSchema([LINE_NUMBERS_FLAG, FLOOD_FLAG], help=True),
            usage=(
                "Usage: show-command [OPTIONS] [CMD]\n"
                "Show the source for command CMD.\n"
                "e.g: show-command show-method\n"
                "--"
            ),
        )

    def run(self, ctx: CommandContext, opts: ParsedOptions) -> object:
        if not opts.args:
            ctx.puts(self.format_usage())
            return Skip()
        name = opts.args[0]
        command = ctx.registry.lookup(name)
        if command is None:
            ctx.puts(f"No such command: {name}.")
            return Skip()
        body = command.handler if command.handler is not None else type(command).run
        code, start = code_for(body)
        if code is None:
            emit_error(ctx.output, f"could not locate source for command {command.name}")
            return Skip()
        highlighted = ctx.renderer.highlight(code.rstrip("\n"), line_numbers=bool(opts.line_numbers), start_line=start)
        render_output(ctx, make_header(ctx, body, code) + "\n" + highlighted, flood=bool(opts.flood))
        return None


class GistSourceCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            "gist-source",
            "Gist the source of METH to GitHub.",
            options=OptionSchema(
                [
                    INSTANCE_METHODS_FLAG,
                    METHODS_FLAG,
                    Flag("d", "description", "Gist description.", takes_value=True, metavar="TEXT"),
                    Flag("p", "public", "Create a public gist (default is secret)."),
                    CONTEXT_FLAG,
                ],
                help=True,
            ),
            usage=(
                "Usage: gist-source [OPTIONS] [METH]\n"
                "Gist the source for method METH via the `gh` command line tool.\n"
                "e.g: gist-source my_method\n"
                "--"
            ),
            requires="gh",
        )

    def run(self, ctx: CommandContext, opts: ParsedOptions) -> object:
        scope = target_scope(ctx, opts)
        name = opts.args[0] if opts.args else None
        obj = get_method_object(ctx, name, opts, scope)
        if obj is None:
            emit_error(ctx.output, f"could not find method: {name or '(current)'}")
            return Skip()
        code, _ = code_for(obj)
        if code is None:
            emit_error(ctx.output, f"could not locate source for {describe_object(obj)}")
            return Skip()
        path, _ = source_location(obj)
        description = opts.description or f"Source of {describe_object(obj)}"
        filename = f"{describe_object(obj)}.py"
        argv = ["gh", "gist", "create", "--filename", filename, "--desc", description]
        if opts.public:
            argv.append("--public")
        argv.append("-")
        LOGGER.debug("gist-source: %s (from %s)", argv, path)
        try:
            result = subprocess.run(argv, input=code, capture_output=True, text=True, check=False)
        except OSError as exc:
            emit_error(ctx.output, f"could not run gh: {exc}")
            return Skip()
        if result.returncode != 0:
            emit_error(ctx.output, (result.stderr or "gh gist create failed").strip())
            return Skip()
        ctx.puts(f"Gist created at {result.stdout.strip()}")
        return None
