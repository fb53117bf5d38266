"""Catch-all command forwarding `.`-prefixed lines to the system shell."""

from __future__ import annotations

import logging
import os
import re
import subprocess

from ..context import CommandContext
from ..options import ParsedOptions
from ..output import emit_error
from ..parser import split_first_word
from ..signals import Skip
from .base import Command

LOGGER = logging.getLogger("burrow.commands.shell")


def run_shell(ctx: CommandContext, command_line: str) -> int:
    """Run *command_line* through the shell; output goes to the session sink."""
    LOGGER.debug("shell: %s", command_line)
    if ctx.output.isatty():
        return subprocess.run(command_line, shell=True).returncode
    result = subprocess.run(command_line, shell=True, capture_output=True, text=True)
    if result.stdout:
        ctx.output.write(result.stdout)
    if result.stderr:
        ctx.output.write(result.stderr)
    return result.returncode


class ShellEscapeCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            ".<shell command>",
            "All text following a '.' is forwarded to the shell.",
            pattern=re.compile(r"^\.(.*)$", re.DOTALL),
        )

    def run(self, ctx: CommandContext, opts: ParsedOptions) -> object:
        command_line = ctx.trailing_text.strip()
        if not command_line:
            return Skip()
        word, rest = split_first_word(command_line)
        if word == "cd":
            destination = os.path.expanduser(rest.strip() or "~")
            try:
                os.chdir(destination)
            except OSError as exc:
                emit_error(ctx.output, f"cd: {exc}")
            return Skip()
        returncode = run_shell(ctx, command_line)
        if returncode:
            LOGGER.debug("shell command exited with %d", returncode)
        return None
