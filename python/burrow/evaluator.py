"""Python source evaluation against a session scope."""

from __future__ import annotations

import ast
import codeop
import logging
from typing import Any, Optional, Protocol

from .errors import EvaluationError
from .scope import Scope

LOGGER = logging.getLogger("burrow.evaluator")

EVAL_FILENAME = "(burrow)"


class Evaluator(Protocol):
    def evaluate(self, scope: Scope, source: str) -> Any:
        ...

    def is_complete(self, source: str) -> bool:
        ...


class PythonEvaluator:
    """Compiles source text and runs it against a scope.

    Expressions return their value. Statement blocks run with ``exec``; when
    the last statement is a bare expression its value is returned, so
    ``x = 1; x + 1`` yields ``2`` the way an interactive prompt would.
    """

    def __init__(self, filename: str = EVAL_FILENAME) -> None:
        self.filename = filename

    def evaluate(self, scope: Scope, source: str) -> Any:
        text = source.strip("\n")
        if not text.strip():
            return None
        try:
            tree = ast.parse(text, self.filename, "exec")
        except SyntaxError as exc:
            raise EvaluationError(exc, source) from exc
        tail: Optional[ast.Expression] = None
        if tree.body and isinstance(tree.body[-1], ast.Expr):
            tail = ast.Expression(tree.body.pop().value)
        try:
            if tree.body:
                exec(compile(tree, self.filename, "exec"), scope.globals, scope.locals)
            if tail is not None:
                return eval(compile(tail, self.filename, "eval"), scope.globals, scope.locals)
        except Exception as exc:
            LOGGER.debug("evaluation failed: %s", exc)
            raise EvaluationError(exc, source) from exc
        return None

    def is_complete(self, source: str) -> bool:
        """False while *source* is a valid prefix of a longer statement."""
        try:
            return codeop.compile_command(source, self.filename, "single") is not None
        except (SyntaxError, ValueError, OverflowError):
            return True


__all__ = ["Evaluator", "PythonEvaluator", "EVAL_FILENAME"]
