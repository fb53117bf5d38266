"""Commands that enter, list and leave nested sessions."""

from __future__ import annotations

from typing import Any

from ..context import CommandContext
from ..options import ParsedOptions
from ..output import emit_error, view_clip
from ..signals import Breakout, ControlSignal, Skip
from .base import Command


class CdCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            "cd",
            "Start a session on OBJ (use `cd ..` to go back and `cd /` to return to the top level)",
            keep_retval=True,
            usage="Usage: cd OBJ|..|/",
        )

    def run(self, ctx: CommandContext, opts: ParsedOptions) -> Any:
        text = ctx.trailing_text.strip()
        if not text:
            ctx.puts("Must provide an object.")
            return Skip()
        if text == "..":
            return Breakout(ctx.level)
        if text == "/":
            if ctx.level > 0:
                return Breakout(0)
            return Skip()
        return ctx.start_session(ctx.eval(text))


class NestCommand(Command):
    def __init__(self) -> None:
        super().__init__("!nest", "Start a nested session on the current receiver; works mid-expression.")

    def run(self, ctx: CommandContext, opts: ParsedOptions) -> None:
        ctx.start_session(ctx.target.receiver)


class NestingCommand(Command):
    def __init__(self) -> None:
        super().__init__("nesting", "Show nesting information.")

    def run(self, ctx: CommandContext, opts: ParsedOptions) -> None:
        ctx.puts("Nesting status:")
        ctx.puts("--")
        for frame in ctx.nesting:
            label = "main" if frame.scope.toplevel else view_clip(frame.receiver)
            if frame.level == 0:
                ctx.puts(f"{frame.level}. {label} (top level)")
            else:
                ctx.puts(f"{frame.level}. {label}")


class JumpToCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            "jump-to",
            "Jump to a session further up the stack, exiting all sessions below.",
            usage="Usage: jump-to LEVEL",
        )

    def run(self, ctx: CommandContext, opts: ParsedOptions) -> ControlSignal:
        level = ctx.level
        if not opts.args:
            ctx.puts(self.format_usage())
            return Skip()
        try:
            target = int(opts.args[0])
        except ValueError:
            emit_error(ctx.output, f"nesting level must be an integer: {opts.args[0]}")
            return Skip()
        if target == level:
            ctx.puts(f"Already at nesting level {level}")
            return Skip()
        if 0 <= target < level:
            return Breakout(target)
        ctx.puts(f"Invalid nest level. Must be between 0 and {max(level - 1, 0)}. Got {target}.")
        return Skip()


class ExitCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            "exit",
            "End the current session. Accepts optional return value.",
            aliases=("quit", "back"),
            usage="Usage: exit [EXPR]",
        )

    def run(self, ctx: CommandContext, opts: ParsedOptions) -> ControlSignal:
        return Breakout(ctx.level, ctx.eval_trailing())


class ExitAllCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            "exit-all",
            "End all nested sessions and return to the top level. Accepts optional return value.",
            aliases=("!!@",),
            usage="Usage: exit-all [EXPR]",
        )

    def run(self, ctx: CommandContext, opts: ParsedOptions) -> ControlSignal:
        return Breakout(0, ctx.eval_trailing())


class ExitProgramCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            "exit-program",
            "End the current program.",
            aliases=("quit-program", "!!!"),
            usage="Usage: exit-program [STATUS]",
        )

    def run(self, ctx: CommandContext, opts: ParsedOptions) -> None:
        status = 0
        if opts.args:
            try:
                status = int(opts.args[0])
            except ValueError:
                emit_error(ctx.output, f"exit status must be an integer: {opts.args[0]}")
                return
        raise SystemExit(status)
