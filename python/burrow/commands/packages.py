"""Commands for installing and browsing Python packages."""

from __future__ import annotations

import importlib
import importlib.util
import logging
import os
import shlex
import subprocess
import sys

from ..context import CommandContext
from ..options import ParsedOptions
from ..output import emit_error
from ..signals import Skip
from .base import Command
from .shell import run_shell

LOGGER = logging.getLogger("burrow.commands.packages")


class PipInstallCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            "pip-install",
            "Install a package with pip and refresh the import caches.",
            usage="Usage: pip-install PACKAGE [PACKAGE ...]",
            requires="pip",
        )

    def run(self, ctx: CommandContext, opts: ParsedOptions) -> object:
        if not opts.args:
            ctx.puts(self.format_usage())
            return Skip()
        ctx.puts(f"Attempting to install package: {' '.join(opts.args)}")
        argv = [sys.executable, "-m", "pip", "install", *opts.args]
        returncode = run_shell(ctx, " ".join(shlex.quote(part) for part in argv))
        if returncode != 0:
            emit_error(ctx.output, f"pip exited with status {returncode}")
            return Skip()
        importlib.invalidate_caches()
        ctx.puts("Refreshed import caches.")
        return None


class PkgCdCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            "pkg-cd",
            "Change the working directory to the directory of an installed package.",
            usage="Usage: pkg-cd PACKAGE",
        )

    def run(self, ctx: CommandContext, opts: ParsedOptions) -> object:
        if not opts.args:
            ctx.puts(self.format_usage())
            return Skip()
        name = opts.args[0]
        try:
            spec = importlib.util.find_spec(name)
        except (ImportError, ValueError):
            spec = None
        if spec is None:
            ctx.puts(f"Package `{name}` not found.")
            return Skip()
        if spec.submodule_search_locations:
            directory = list(spec.submodule_search_locations)[0]
        elif spec.origin and os.path.isfile(spec.origin):
            directory = os.path.dirname(spec.origin)
        else:
            ctx.puts(f"Package `{name}` has no directory ({spec.origin}).")
            return Skip()
        LOGGER.debug("pkg-cd %s -> %s", name, directory)
        os.chdir(directory)
        ctx.puts(directory)
        return None


class PydocCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            "pydoc",
            "Show documentation for a module, class or function using pydoc.",
            usage="Usage: pydoc NAME",
        )

    def run(self, ctx: CommandContext, opts: ParsedOptions) -> None:
        args = " ".join(shlex.quote(arg) for arg in opts.args)
        ctx.run(f".{shlex.quote(sys.executable)} -m pydoc {args}".rstrip())
