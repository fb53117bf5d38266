"""prompt_toolkit completer for burrow."""

from __future__ import annotations

import shlex
from typing import Any, Iterable, List, Optional

from prompt_toolkit.completion import Completer, Completion, PathCompleter
from prompt_toolkit.document import Document

from .context import SessionState

PATH_COMMANDS = {"cat-file", "eval-file", "pkg-cd"}
_MISSING = object()


def _normalise_tokens(text: str) -> List[str]:
    if not text:
        return []
    try:
        tokens = shlex.split(text, posix=True)
        trailing = text[-1].isspace()
    except ValueError:
        tokens = text.strip().split()
        trailing = text.endswith((" ", "\t"))
    if trailing:
        tokens.append("")
    return tokens


class ShellCompleter(Completer):
    """Completes command names, scope names, attributes and paths."""

    def __init__(self, state: SessionState) -> None:
        self.state = state
        self._path = PathCompleter(expanduser=True)

    def get_completions(self, document: Document, complete_event) -> Iterable[Completion]:
        text = document.text_before_cursor
        if text.lstrip().startswith("."):
            yield from self._path_completions(document, complete_event)
            return
        tokens = _normalise_tokens(text)
        if not tokens:
            yield from self._emit(self._command_names(), "")
            return
        prefix = tokens[-1]
        if len(tokens) == 1:
            yield from self._emit(self._command_names() + self._scope_names(), prefix)
            return
        command = self.state.registry.canonical_name(tokens[0])
        if self.state.prompt_style == "shell" or command in PATH_COMMANDS:
            yield from self._path_completions(document, complete_event)
            return
        yield from self._emit(self._expression_candidates(prefix), prefix)

    def _path_completions(self, document: Document, complete_event) -> Iterable[Completion]:
        word = document.get_word_before_cursor(WORD=True)
        sub_document = Document(word, cursor_position=len(word))
        yield from self._path.get_completions(sub_document, complete_event)

    def _command_names(self) -> List[str]:
        names: List[str] = []
        registry = self.state.registry
        for command in registry.list_commands():
            if command.pattern is not None:
                continue
            names.append(command.name)
            names.extend(registry.aliases_for(command.name))
        return names

    def _scope_names(self) -> List[str]:
        return self.state.target.completion_names()

    def _expression_candidates(self, prefix: str) -> List[str]:
        if "." not in prefix:
            return self._scope_names()
        head, _, _ = prefix.rpartition(".")
        obj = self._resolve(head)
        if obj is _MISSING:
            return []
        return [f"{head}.{name}" for name in dir(obj)]

    def _resolve(self, dotted: str) -> Any:
        """Follow a dotted name through the scope without calling anything."""
        parts = dotted.split(".")
        scope = self.state.target
        obj: Optional[Any] = _MISSING
        for source in (scope.locals, scope.globals):
            try:
                obj = source[parts[0]]
                break
            except KeyError:
                continue
        if obj is _MISSING:
            return _MISSING
        for part in parts[1:]:
            try:
                obj = getattr(obj, part)
            except Exception:
                return _MISSING
        return obj

    @staticmethod
    def _emit(candidates: Iterable[str], prefix: str) -> Iterable[Completion]:
        needle = prefix.lower()
        ordered = sorted(dict.fromkeys(c for c in candidates if c.lower().startswith(needle)))
        for entry in ordered[:200]:
            yield Completion(entry, start_position=-len(prefix))


__all__ = ["ShellCompleter", "PATH_COMMANDS"]
