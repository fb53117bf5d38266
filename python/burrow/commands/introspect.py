"""Commands that inspect the current receiver and scope."""

from __future__ import annotations

import inspect
import linecache
import platform
import re
import shutil
import types
from typing import Any, Callable, Dict, Iterable, List, Optional, Pattern, Sequence

from ..context import CommandContext
from ..options import Flag, OptionSchema, ParsedOptions
from ..output import emit_error, view, view_clip
from ..signals import Skip
from .base import Command
from .helpers import (
    CONTEXT_FLAG,
    INSTANCE_METHODS_FLAG,
    METHODS_FLAG,
    get_method_object,
    source_location,
    target_scope,
)

_OBJECT_ATTRS = frozenset(dir(object))


def tablify(items: Sequence[str], width: Optional[int] = None) -> str:
    """Lay *items* out in columns that fit the terminal width."""
    if not items:
        return ""
    width = width or shutil.get_terminal_size((100, 24)).columns
    cell = max(len(item) for item in items) + 2
    columns = max(1, width // cell)
    rows = [items[idx : idx + columns] for idx in range(0, len(items), columns)]
    return "\n".join("".join(item.ljust(cell) for item in row).rstrip() for row in rows)


def output_section(ctx: CommandContext, heading: str, body: Sequence[str]) -> str:
    """Heading plus body; a body that fits on one line follows the heading."""
    fancy = ctx.renderer.italic(f"{heading}:")
    if not body:
        return f"{fancy} (none)"
    one_line = "  ".join(body)
    if len(heading) + len(one_line) + 2 <= shutil.get_terminal_size((100, 24)).columns:
        return f"{fancy} {one_line}"
    return f"{fancy}\n{tablify(body)}"


def _variables(names: Iterable[str], lookup: Callable[[str], Any], pattern: Pattern[str], verbose: bool) -> List[str]:
    selected = [name for name in sorted(names) if not name.startswith("__") and pattern.search(name)]
    if not verbose:
        return selected
    return [f"{name}={view_clip(lookup(name))}" for name in selected]


def _method_names(owner: Any, *, less: bool, more: bool) -> List[str]:
    if less:
        namespace = vars(owner) if hasattr(owner, "__dict__") else {}
        names = [name for name, value in namespace.items() if callable(value) or isinstance(value, (staticmethod, classmethod))]
    else:
        names = [name for name in dir(owner) if callable(getattr(owner, name, None))]
    if not more:
        names = [name for name in names if not (name.startswith("__") and name.endswith("__")) and name not in _OBJECT_ATTRS]
    return sorted(names)


def _method_list(names: Sequence[str], owner: Any, pattern: Pattern[str], verbose: bool) -> List[str]:
    result: List[str] = []
    for name in names:
        if not pattern.search(name):
            continue
        if not verbose:
            result.append(name)
            continue
        path, line = source_location(getattr(owner, name, None))
        result.append(f"{name} ({path}:{line})" if path else f"{name} (builtin)")
    return result


def _is_namespace(obj: Any) -> bool:
    return inspect.isclass(obj) or isinstance(obj, types.ModuleType)


_SECTION_KEYS = ("locals", "globals", "instance_variables", "class_variables", "constants", "methods", "instance_methods")


class LsCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            "ls",
            "Show the list of vars and methods in the current scope. Type `ls --help` for more info.",
            options=OptionSchema(
                [
                    Flag("v", "verbose", "Show value of variables and constants and locations of methods"),
                    Flag("L", "less", "Only show methods set by the receiver"),
                    Flag("a", "more", "Show all of the methods, including those defined in object"),
                    Flag("f", "filter", "Regular expression to filter methods and variables", takes_value=True, default=""),
                    Flag("l", "locals", "Show local variables"),
                    Flag("g", "globals", "Show global variables"),
                    Flag("i", "instance-variables", "Show instance variables"),
                    Flag("k", "class-variables", "Show class variables"),
                    Flag("c", "constants", "Show constants"),
                    Flag("m", "methods", "Show methods"),
                    Flag("M", "instance-methods", "Show instance methods"),
                ],
                help=True,
            ),
            usage="Usage: ls [OPTIONS]",
        )

    def run(self, ctx: CommandContext, opts: ParsedOptions) -> None:
        if not ctx.trailing_text.strip():
            ctx.puts(self.format_usage())
            return
        try:
            pattern = re.compile(opts.filter or "", re.IGNORECASE)
        except re.error as exc:
            emit_error(ctx.output, f"invalid filter: {exc}")
            return
        scope = ctx.target
        receiver = scope.receiver
        verbose = bool(opts.verbose)
        sections: List[str] = []
        show = {key: bool(opts.get(key)) for key in _SECTION_KEYS}
        if not any(show.values()):
            # Modifiers alone list locals and methods.
            show["locals"] = show["methods"] = True
        if show["locals"]:
            names = scope.local_names()
            sections.append(output_section(ctx, "Local variables", _variables(names, scope.locals.get, pattern, verbose)))
        if show["globals"]:
            names = scope.global_names()
            sections.append(output_section(ctx, "Global variables", _variables(names, scope.globals.get, pattern, verbose)))
        if show["instance_variables"]:
            namespace: Dict[str, Any] = dict(vars(receiver)) if hasattr(receiver, "__dict__") else {}
            names = [name for name, value in namespace.items() if not callable(value)]
            sections.append(output_section(ctx, "Instance variables", _variables(names, namespace.get, pattern, verbose)))
        if show["class_variables"]:
            if inspect.isclass(receiver):
                namespace = dict(vars(receiver))
                names = [name for name, value in namespace.items() if not callable(value) and not isinstance(value, (property, staticmethod, classmethod))]
                sections.append(output_section(ctx, "Class variables", _variables(names, namespace.get, pattern, verbose)))
            else:
                sections.append(f"{ctx.renderer.italic('Class variables:')} (not a class)")
        if show["constants"]:
            if _is_namespace(receiver):
                namespace = dict(vars(receiver))
                names = [name for name in namespace if name.isupper()]
                sections.append(output_section(ctx, "Constants", _variables(names, namespace.get, pattern, verbose)))
            else:
                sections.append(f"{ctx.renderer.italic('Constants:')} (not a module or class)")
        if show["instance_methods"]:
            if inspect.isclass(receiver):
                names = _method_names(receiver, less=bool(opts.less), more=bool(opts.more))
                sections.append(output_section(ctx, "Instance methods", _method_list(names, receiver, pattern, verbose)))
            else:
                sections.append(f"{ctx.renderer.italic('Instance methods:')} (not a class)")
        if show["methods"]:
            owner = receiver
            if opts.less and not _is_namespace(receiver):
                owner = type(receiver)
            names = _method_names(owner, less=bool(opts.less), more=bool(opts.more))
            sections.append(output_section(ctx, "Methods", _method_list(names, receiver, pattern, verbose)))
        ctx.puts("\n\n".join(sections))


class CatCommand(Command):
    def __init__(self) -> None:
        super().__init__("cat", "Show the repr of EXPR.", aliases=("inspect",), usage="Usage: cat EXPR")

    def run(self, ctx: CommandContext, opts: ParsedOptions) -> None:
        text = ctx.trailing_text.strip()
        if not text:
            ctx.puts("Must provide an object to inspect.")
            return
        ctx.puts(ctx.renderer.value(ctx.eval(text)))


def _parameter_summary(func: Any) -> str:
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return "(unknown)"
    groups: Dict[str, List[str]] = {}
    for param in signature.parameters.values():
        if param.kind is param.VAR_POSITIONAL:
            label = "Rest:"
        elif param.kind is param.VAR_KEYWORD:
            label = "Keyrest:"
        elif param.kind is param.KEYWORD_ONLY:
            label = "Keyword:"
        elif param.default is param.empty:
            label = "Required:"
        else:
            label = "Optional:"
        groups.setdefault(label, []).append(param.name)
    return ". ".join(f"{label} {', '.join(names)}" for label, names in groups.items())


def _arity(func: Any) -> str:
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return "(unknown)"
    required = [
        p
        for p in signature.parameters.values()
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD) and p.default is p.empty
    ]
    return str(len(required))


class StatCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            "stat",
            "View method information and set _file_ and _dir_ locals",
            options=OptionSchema([INSTANCE_METHODS_FLAG, METHODS_FLAG, CONTEXT_FLAG], help=True),
            usage=(
                "Usage: stat [OPTIONS] [METH]\n"
                "Show method information for method METH and set _file_ and _dir_ locals.\n"
                "e.g: stat hello_method\n"
                "--"
            ),
        )

    def run(self, ctx: CommandContext, opts: ParsedOptions) -> None:
        from .helpers import set_file_and_dir_locals

        scope = target_scope(ctx, opts)
        name = opts.args[0] if opts.args else None
        meth = get_method_object(ctx, name, opts, scope)
        if meth is None or not callable(meth):
            ctx.puts(f"Invalid method name: {name}. Type `stat --help` for help")
            return
        path, _ = source_location(meth)
        if path:
            set_file_and_dir_locals(ctx.target, path)
        bold = ctx.renderer.bold
        doc = inspect.getdoc(meth) or ""
        ctx.puts(bold("Method Name: ") + getattr(meth, "__name__", str(name)))
        ctx.puts(bold("Method Language: ") + ("Python" if path else "Builtin"))
        ctx.puts(bold("Method Type: ") + ("Bound" if inspect.ismethod(meth) else "Unbound"))
        ctx.puts(bold("Method Arity: ") + _arity(meth))
        ctx.puts(bold("Method Parameters: ") + _parameter_summary(meth))
        ctx.puts(bold("Comment length: ") + (f"{len(doc.splitlines())} lines." if doc else "No comment."))


class WhereamiCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            "whereami",
            "Show the code context for the session. Shows AROUND lines around the invocation line (default 5).",
            usage="Usage: whereami [AROUND]",
        )

    def run(self, ctx: CommandContext, opts: ParsedOptions) -> object:
        from .helpers import set_file_and_dir_locals

        scope = ctx.target
        try:
            around = int(opts.args[0]) if opts.args else 5
        except ValueError:
            emit_error(ctx.output, f"AROUND must be an integer: {opts.args[0]}")
            return Skip()
        if not scope.file or not scope.line or scope.file.startswith("<"):
            ctx.puts("Cannot find local context. Did you use `burrow.embed()`?")
            return Skip()
        lines = linecache.getlines(scope.file)
        if not lines:
            ctx.puts(f"Cannot read source file {scope.file}.")
            return Skip()
        set_file_and_dir_locals(scope, scope.file)
        klass = type(scope.receiver).__name__
        method = scope.function_name or "N/A"
        ctx.puts(f"\n{ctx.renderer.bold('From:')} {scope.file} @ line {scope.line} in {klass}#{method}:\n")
        first = max(1, scope.line - around)
        last = min(len(lines), scope.line + around)
        for number in range(first, last + 1):
            code = ctx.renderer.highlight(lines[number - 1].rstrip("\n"))
            marker = " =>" if number == scope.line else "   "
            ctx.puts(f"{marker}{number:>4}: {code}")
        return None


class StatusCommand(Command):
    def __init__(self) -> None:
        super().__init__("status", "Show status information.")

    def run(self, ctx: CommandContext, opts: ParsedOptions) -> None:
        from .. import __version__

        state = ctx.state
        ctx.puts("Status:")
        ctx.puts("--")
        ctx.puts(f"Receiver: {view_clip(ctx.target.receiver)}")
        ctx.puts(f"Nesting level: {ctx.level}")
        ctx.puts(f"burrow version: {__version__}")
        ctx.puts(f"Python version: {platform.python_version()}")
        ctx.puts(f"Current method: {ctx.target.function_name or 'N/A'}")
        ctx.puts(f"Shell instance: {state.shell!r}")
        ctx.puts(f"Last result: {view(state.last_result)}")


class VersionCommand(Command):
    def __init__(self) -> None:
        super().__init__("version", "Show burrow version.")

    def run(self, ctx: CommandContext, opts: ParsedOptions) -> None:
        from .. import __version__

        ctx.puts(f"burrow version: {__version__} on Python {platform.python_version()}.")
