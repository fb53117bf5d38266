"""Tests for burrow scopes and the Python evaluator."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.append(str(REPO_ROOT / "python"))

from burrow.errors import EvaluationError
from burrow.evaluator import PythonEvaluator
from burrow.output import format_exception, view_clip
from burrow.scope import Scope


class Point:
    def __init__(self, x, y):
        self.x = x
        self.y = y

    def norm2(self):
        return self.x * self.x + self.y * self.y


def test_statements_then_trailing_expression():
    scope = Scope.create_toplevel()
    evaluator = PythonEvaluator()
    assert evaluator.evaluate(scope, "a = 2; b = 3; a * b") == 6
    assert scope.get_local("a") == 2
    assert evaluator.evaluate(scope, "c = 1") is None


def test_toplevel_functions_see_toplevel_names():
    scope = Scope.create_toplevel({"base": 10})
    evaluator = PythonEvaluator()
    evaluator.evaluate(scope, "def add(n):\n    return base + n\n")
    assert evaluator.evaluate(scope, "add(5)") == 15


def test_child_scope_falls_back_to_receiver_attributes():
    toplevel = Scope.create_toplevel({"offset": 1})
    scope = toplevel.child(Point(3, 4))
    evaluator = PythonEvaluator()
    assert evaluator.evaluate(scope, "norm2() + offset") == 26
    assert evaluator.evaluate(scope, "self.x") == 3
    evaluator.evaluate(scope, "local_only = 9")
    assert "local_only" in scope.local_names()
    assert "local_only" not in toplevel.global_names()


def test_errors_are_wrapped():
    scope = Scope.create_toplevel()
    evaluator = PythonEvaluator()
    with pytest.raises(EvaluationError) as excinfo:
        evaluator.evaluate(scope, "1 / 0")
    assert isinstance(excinfo.value.original, ZeroDivisionError)
    assert excinfo.value.source == "1 / 0"
    with pytest.raises(EvaluationError) as excinfo:
        evaluator.evaluate(scope, "def (")
    assert isinstance(excinfo.value.original, SyntaxError)
    assert format_exception(excinfo.value.original).splitlines()[-1] == "from (burrow):1"


def test_is_complete_tracks_open_blocks():
    evaluator = PythonEvaluator()
    assert evaluator.is_complete("x = 1")
    assert not evaluator.is_complete("def f():")
    assert not evaluator.is_complete("items = [1,")
    assert evaluator.is_complete("def f():\n    return 1\n")
    assert evaluator.is_complete("1 +* 2")


def test_scope_from_frame_captures_locals():
    def inner(self_value):
        self = self_value  # noqa: F841
        hidden = "yes"  # noqa: F841
        return Scope.from_frame(sys._getframe())

    scope = inner(Point(1, 2))
    assert scope.function_name == "inner"
    assert scope.file.endswith("test_burrow_evaluator.py")
    assert isinstance(scope.receiver, Point)
    assert scope.get_local("hidden") == "yes"
    assert PythonEvaluator().evaluate(scope, "norm2()") == 5


def test_view_clip_shortens_long_values():
    assert view_clip([1, 2]) == "[1, 2]"
    assert view_clip(list(range(100))).startswith("#<list:0x")
    assert view_clip(Point).endswith("Point'>")
