"""
burrow interactive Python shell.

Run ``python -m burrow`` (or the ``burrow`` console script) for a standalone
shell, call :func:`start` to open a session on an object, or drop
``burrow.embed()`` into running code to inspect the caller's frame.
"""

from __future__ import annotations

import sys
from typing import Any, Optional

__version__ = "0.1.0"

from .cli import main
from .context import SessionState
from .history import HistoryStore, default_history_path
from .repl import LineSource, Shell
from .scope import Scope


def _run(scope: Scope, line_source: Optional[LineSource], kwargs: dict) -> Any:
    if "history" not in kwargs:
        kwargs["history"] = HistoryStore(str(default_history_path()))
    state = SessionState.create(scope=scope, **kwargs)
    shell = Shell(state, line_source=line_source)
    shell.run()
    return shell.result


def start(obj: Any = None, *, line_source: Optional[LineSource] = None, **kwargs: Any) -> Any:
    """Open a session on *obj* (a fresh top-level namespace when None).

    Returns the value given to ``exit``/``exit-all`` at level 0.
    """
    toplevel = Scope.create_toplevel()
    scope = toplevel if obj is None else toplevel.child(obj)
    return _run(scope, line_source, kwargs)


def embed(*, line_source: Optional[LineSource] = None, **kwargs: Any) -> Any:
    """Open a session in the caller's frame."""
    return _run(Scope.from_frame(sys._getframe(1)), line_source, kwargs)


__all__ = ["main", "start", "embed", "__version__"]
