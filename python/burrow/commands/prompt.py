"""Commands that toggle presentation settings."""

from __future__ import annotations

from ..context import CommandContext
from ..options import ParsedOptions
from .base import Command


def _toggle_prompt(ctx: CommandContext, style: str) -> None:
    state = ctx.state
    state.set_prompt_style("default" if state.prompt_style == style else style)


class ToggleColorCommand(Command):
    def __init__(self) -> None:
        super().__init__("toggle-color", "Toggle syntax highlighting.")

    def run(self, ctx: CommandContext, opts: ParsedOptions) -> None:
        ctx.state.color = not ctx.state.color
        ctx.puts(f"Syntax highlighting {'on' if ctx.state.color else 'off'}")


class SimplePromptCommand(Command):
    def __init__(self) -> None:
        super().__init__("simple-prompt", "Toggle the simple prompt.")

    def run(self, ctx: CommandContext, opts: ParsedOptions) -> None:
        _toggle_prompt(ctx, "simple")


class ShellModeCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            "shell-mode",
            "Toggle shell mode. Bring in the working directory and `.` commands.",
            aliases=("file-mode",),
        )

    def run(self, ctx: CommandContext, opts: ParsedOptions) -> None:
        _toggle_prompt(ctx, "shell")
