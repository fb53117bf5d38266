"""Commands that read and evaluate files."""

from __future__ import annotations

import logging
import os

from ..context import CommandContext
from ..options import Flag, OptionSchema, ParsedOptions
from ..output import emit_error
from ..signals import Skip
from .base import Command
from .helpers import (
    CONTEXT_FLAG,
    FLOOD_FLAG,
    LINE_NUMBERS_FLAG,
    read_between_the_lines,
    render_output,
    set_file_and_dir_locals,
    target_scope,
)

LOGGER = logging.getLogger("burrow.commands.files")


def _int_option(value: object, flag: str) -> int:
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValueError(f"--{flag} expects an integer, got {value!r}") from exc


class CatFileCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            "cat-file",
            "Show output of file FILE. Type `cat-file --help` for more information.",
            options=OptionSchema(
                [
                    LINE_NUMBERS_FLAG,
                    Flag("s", "start", "Start line (default: first line).", takes_value=True, default="0", metavar="N"),
                    Flag("e", "end", "End line (default: last line).", takes_value=True, default="-1", metavar="N"),
                    Flag("t", "type", "The specific file type for syntax higlighting (e.g python, json).", takes_value=True, metavar="TYPE"),
                    FLOOD_FLAG,
                ],
                help=True,
            ),
            usage=(
                "Usage: cat-file FILE [OPTIONS]\n"
                "e.g: cat-file hello.py\n"
                "--"
            ),
        )

    def run(self, ctx: CommandContext, opts: ParsedOptions) -> object:
        if not opts.args:
            ctx.puts("Must provide a file name.")
            return Skip()
        path = os.path.expanduser(opts.args[0])
        try:
            start = _int_option(opts.start, "start")
            end = _int_option(opts.end, "end")
        except ValueError as exc:
            emit_error(ctx.output, str(exc))
            return Skip()
        try:
            contents, first, _ = read_between_the_lines(path, start, end)
        except (OSError, UnicodeDecodeError) as exc:
            emit_error(ctx.output, f"cannot read {path}: {exc}")
            return Skip()
        set_file_and_dir_locals(ctx.target, path)
        language = ctx.renderer.guess_language(path, contents, opts.get("type"))
        text = ctx.renderer.highlight(
            contents.rstrip("\n"),
            language,
            line_numbers=bool(opts.line_numbers),
            start_line=first + 1,
        )
        render_output(ctx, text, flood=bool(opts.flood))
        return None


class EvalFileCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            "eval-file",
            "Eval a Python script. Type `eval-file --help` for more info.",
            options=OptionSchema([CONTEXT_FLAG], help=True),
            usage=(
                "Usage: eval-file FILE [OPTIONS]\n"
                "Eval a Python script at top-level or in the specified context. Defaults to top-level.\n"
                "e.g: eval-file -c self hello.py\n"
                "--"
            ),
        )

    def run(self, ctx: CommandContext, opts: ParsedOptions) -> object:
        if not opts.args:
            ctx.puts("Must provide a file name.")
            return Skip()
        path = os.path.expanduser(opts.args[0])
        try:
            with open(path, encoding="utf-8") as handle:
                source = handle.read()
        except (OSError, UnicodeDecodeError) as exc:
            emit_error(ctx.output, f"cannot read {path}: {exc}")
            return Skip()
        toplevel = ctx.nesting[0].scope
        if opts.given("context"):
            scope = target_scope(ctx, opts)
            before = set(scope.local_names())
            ctx.eval(source, scope)
            ctx.puts("--")
            ctx.puts(f"Eval'd '{path}' in the `{opts.context}` context.")
        else:
            scope = toplevel
            before = set(scope.local_names())
            ctx.eval(source, scope)
            ctx.puts("--")
            ctx.puts(f"Eval'd '{path}' at top-level.")
        added = sorted(name for name in set(scope.local_names()) - before if not name.startswith("__"))
        if added:
            ctx.puts(f"Brought in the following top-level names: {', '.join(added)}")
        LOGGER.debug("eval-file %s added %d names", path, len(added))
        set_file_and_dir_locals(ctx.target, path)
        return None
