"""Helpers shared by the introspection and file commands."""

from __future__ import annotations

import inspect
import os
from pathlib import Path
from typing import Any, Optional, Tuple

from ..context import CommandContext
from ..errors import EvaluationError
from ..options import Flag, ParsedOptions
from ..scope import Scope

CONTEXT_FLAG = Flag("c", "context", "Select object context to run under.", takes_value=True)
INSTANCE_METHODS_FLAG = Flag("M", "instance-methods", "Operate on instance methods.")
METHODS_FLAG = Flag("m", "methods", "Operate on methods.")
FLOOD_FLAG = Flag("f", "flood", "Do not use a pager to view text longer than one screen.")
LINE_NUMBERS_FLAG = Flag("l", "line-numbers", "Show line numbers.")


def target_scope(ctx: CommandContext, opts: ParsedOptions) -> Scope:
    """The scope named by ``-c/--context``, or the current one."""
    source = opts.get("context")
    if source:
        return ctx.scope_for(source)
    return ctx.target


def get_method_object(
    ctx: CommandContext,
    name: Optional[str],
    opts: ParsedOptions,
    scope: Optional[Scope] = None,
) -> Optional[Any]:
    """Resolve *name* to a function, method or class in *scope*.

    ``-M`` looks the name up on the receiver's class, ``-m`` on the receiver
    itself; otherwise the name is evaluated and the receiver is tried last.
    """
    scope = scope or ctx.target
    if not name:
        if scope.function_name:
            name = scope.function_name
        else:
            return None
    receiver = scope.receiver
    if opts.get("instance_methods"):
        owner = receiver if inspect.isclass(receiver) else type(receiver)
        return getattr(owner, name, None)
    if opts.get("methods"):
        return getattr(receiver, name, None)
    try:
        return ctx.eval(name, scope)
    except EvaluationError:
        return getattr(receiver, name, None)


def source_location(obj: Any) -> Tuple[Optional[str], Optional[int]]:
    try:
        path = inspect.getsourcefile(obj) or inspect.getfile(obj)
    except TypeError:
        return None, None
    try:
        _, line = inspect.getsourcelines(obj)
    except (OSError, TypeError):
        line = None
    return path, line


def code_for(obj: Any) -> Tuple[Optional[str], int]:
    """Source text of *obj* and its first line number, or ``(None, 0)``."""
    try:
        lines, start = inspect.getsourcelines(obj)
    except (OSError, TypeError):
        return None, 0
    return "".join(lines), max(start, 1)


def make_header(ctx: CommandContext, obj: Any, content: str) -> str:
    path, line = source_location(obj)
    count = len(content.splitlines())
    where = f"{path} @ line {line}" if path else "(unknown location)"
    bold = ctx.renderer.bold
    return f"\n{bold('From:')} {where}:\n{bold('Number of lines:')} {count}\n"


def describe_object(obj: Any) -> str:
    name = getattr(obj, "__qualname__", None) or getattr(obj, "__name__", None)
    return name or type(obj).__name__


def read_between_the_lines(path: str, start: int, end: int) -> Tuple[str, int, int]:
    """Lines ``start``..``end`` (zero-based, inclusive; negatives count from the end)."""
    text = Path(path).expanduser().read_text(encoding="utf-8")
    lines = text.splitlines(keepends=True)
    count = len(lines)
    start_index = start + count if start < 0 else start
    end_index = end + count if end < 0 else end
    start_index = max(0, min(start_index, count))
    end_index = max(-1, min(end_index, count - 1))
    return "".join(lines[start_index : end_index + 1]), start_index, end_index


def set_file_and_dir_locals(scope: Scope, path: str) -> None:
    resolved = os.path.abspath(os.path.expanduser(path))
    scope.set_local("_file_", resolved)
    scope.set_local("_dir_", os.path.dirname(resolved))


def render_output(ctx: CommandContext, text: str, *, flood: bool = False) -> None:
    ctx.renderer.page(ctx.output, text.rstrip("\n"), flood=flood)


__all__ = [
    "CONTEXT_FLAG",
    "INSTANCE_METHODS_FLAG",
    "METHODS_FLAG",
    "FLOOD_FLAG",
    "LINE_NUMBERS_FLAG",
    "target_scope",
    "get_method_object",
    "source_location",
    "code_for",
    "make_header",
    "describe_object",
    "read_between_the_lines",
    "set_file_and_dir_locals",
    "render_output",
]
