"""
Pytest configuration and fixtures for burrow tests.
"""
import sys
from pathlib import Path
from typing import Iterable

import pytest

REPO_ROOT = Path(__file__).resolve().parents[2]
if str(REPO_ROOT / "python") not in sys.path:
    sys.path.append(str(REPO_ROOT / "python"))

from burrow.context import SessionState
from burrow.render import Renderer
from burrow.repl import ScriptSource, Shell


@pytest.fixture
def make_state():
    """Session state with plain (uncoloured, unpaged) output and no history file."""

    def factory(**kwargs) -> SessionState:
        kwargs.setdefault("renderer", Renderer(color=False, pager=False))
        return SessionState.create(**kwargs)

    return factory


@pytest.fixture
def run_shell(make_state):
    """Run a shell over a fixed list of input lines and return it."""

    def factory(lines: Iterable[str], **kwargs) -> Shell:
        shell = Shell(make_state(**kwargs), line_source=ScriptSource(lines))
        shell.run()
        return shell

    return factory
